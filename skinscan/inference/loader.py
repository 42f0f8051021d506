# skinscan/inference/loader.py
import os
from typing import Optional

import numpy as np
import torch

from skinscan.errors import InferenceError, ModelLoadError
from skinscan.inference.preprocess import TENSOR_SHAPE


def default_device() -> torch.device:
    return torch.device("mps" if torch.backends.mps.is_available() else
                        "cuda" if torch.cuda.is_available() else "cpu")


class TorchScriptModel:
    """A loaded TorchScript classifier, read-only after construction.

    The output is returned as-is (flattened, on CPU); what the scores mean is
    up to the caller.
    """

    def __init__(self, module, device: torch.device, path: str = "<memory>"):
        self.module = module
        self.device = device
        self.path = path
        self.output_size: Optional[int] = None

    @classmethod
    def load(cls, path: str, device=None, warmup: bool = True) -> "TorchScriptModel":
        if not path or not os.path.isfile(path):
            raise ModelLoadError(f"Model artifact not found: {path}")
        try:
            device = torch.device(device) if device is not None else default_device()
        except (RuntimeError, TypeError) as exc:
            raise ModelLoadError(f"Unsupported device {device!r}: {exc}") from exc
        try:
            module = torch.jit.load(path, map_location=device)
        except Exception as exc:
            raise ModelLoadError(f"Cannot deserialize model at {path}: {exc}") from exc
        module.eval()
        model = cls(module, device, path)
        print(f"[ModelLoader] Loaded TorchScript model from {path} on {device}")
        if warmup:
            model._warmup()
        return model

    def _warmup(self):
        # A forward pass on zeros rejects artifacts that load but cannot run on our input.
        try:
            out = self.infer(torch.zeros(TENSOR_SHAPE, dtype=torch.float32))
        except InferenceError as exc:
            raise ModelLoadError(f"Model at {self.path} is incompatible with the expected input: {exc}") from exc
        if out.size == 0:
            raise ModelLoadError(f"Model at {self.path} produced an empty output")
        self.output_size = int(out.size)
        if self.output_size > 1:
            print(f"[ModelLoader] WARNING: model returns {self.output_size} scores; "
                  "only index 0 is interpreted as the malignancy logit.")

    def infer(self, tensor: torch.Tensor) -> np.ndarray:
        if not isinstance(tensor, torch.Tensor) or tuple(tensor.shape) != TENSOR_SHAPE:
            shape = tuple(tensor.shape) if isinstance(tensor, torch.Tensor) else type(tensor).__name__
            raise InferenceError(f"Expected input tensor of shape {TENSOR_SHAPE}, got {shape}")
        try:
            with torch.no_grad():
                out = self.module(tensor.to(self.device, dtype=torch.float32))
        except Exception as exc:
            raise InferenceError(f"Forward pass failed: {exc}") from exc
        if not isinstance(out, torch.Tensor):
            raise InferenceError(f"Model returned {type(out).__name__}, expected a tensor")
        return out.detach().cpu().to(torch.float32).reshape(-1).numpy()


def load_model(path: str, device=None, warmup: bool = True) -> TorchScriptModel:
    return TorchScriptModel.load(path, device=device, warmup=warmup)


def infer(model, tensor: torch.Tensor) -> np.ndarray:
    return model.infer(tensor)
