# skinscan/inference/interpret.py
import math

import torch

from skinscan.errors import EmptyOutputError, MalformedOutputError
from skinscan.models import BENIGN, MALIGNANT, Verdict

DEFAULT_THRESHOLD = 0.3

def sigmoid(x: float) -> float:
    # float64; saturates to 0.0 or 1.0 for extreme logits instead of overflowing
    return torch.sigmoid(torch.tensor(x, dtype=torch.float64)).item()

def interpret(output, threshold: float = DEFAULT_THRESHOLD) -> Verdict:
    """Turn the first raw score of the model into a MALIGNANT/BENIGN verdict.

    Only output[0] is used even when the model returns more scores.
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Threshold must be in [0, 1], got {threshold}")
    if output is None or len(output) == 0:
        raise EmptyOutputError("Model returned an empty output")

    logit = float(output[0])
    if math.isnan(logit):
        raise MalformedOutputError("Model returned NaN as its first score")

    prob = sigmoid(logit)
    if prob > threshold:
        label, confidence = MALIGNANT, prob * 100.0
    else:
        label, confidence = BENIGN, (1.0 - prob) * 100.0
    return Verdict(label=label, confidence_percent=confidence, probability=prob, threshold=threshold)
