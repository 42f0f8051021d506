# skinscan/inference/pipeline.py
"""
Single-image pipeline: normalize -> infer -> interpret.

Every call to `execute` starts a fresh `PipelineRun` at IDLE and ends in DONE
or FAILED. The loaded model is the only thing shared between calls.
"""
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from skinscan.errors import PipelineError
from skinscan.inference.interpret import DEFAULT_THRESHOLD, interpret
from skinscan.inference.preprocess import normalize
from skinscan.models import Verdict


class PipelineState(str, Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    INFERRING = "inferring"
    INTERPRETING = "interpreting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineRun:
    state: PipelineState = PipelineState.IDLE
    history: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    raw_output: Optional[np.ndarray] = None
    verdict: Optional[Verdict] = None
    error: Optional[PipelineError] = None
    inference_time_ms: Optional[int] = None

    def advance(self, state: PipelineState):
        self.state = state
        self.history.append(state)

    def fail(self, stage: str, cause: Exception):
        self.error = PipelineError(stage, cause)
        self.advance(PipelineState.FAILED)

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE


class ClassificationPipeline:
    def __init__(self, model, threshold: float = DEFAULT_THRESHOLD, serialize_inference: bool = True):
        """
        Args:
            model: anything with an `infer(tensor) -> sequence of floats` method,
                   typically a loaded `TorchScriptModel`
            threshold: probability above which the verdict is MALIGNANT
            serialize_inference: hold a lock around `model.infer`
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Threshold must be in [0, 1], got {threshold}")
        self.model = model
        self.threshold = threshold
        self._lock = threading.Lock() if serialize_inference else None

    def _infer(self, tensor):
        if self._lock is None:
            return self.model.infer(tensor)
        with self._lock:
            return self.model.infer(tensor)

    def execute(self, image: np.ndarray) -> PipelineRun:
        run = PipelineRun()

        run.advance(PipelineState.NORMALIZING)
        try:
            tensor = normalize(image)
        except Exception as exc:
            run.fail("normalize", exc)
            return run

        run.advance(PipelineState.INFERRING)
        t0 = time.time()
        try:
            run.raw_output = np.asarray(self._infer(tensor), dtype=np.float32).reshape(-1)
        except Exception as exc:
            run.fail("inference", exc)
            return run
        finally:
            run.inference_time_ms = int((time.time() - t0) * 1000)

        run.advance(PipelineState.INTERPRETING)
        try:
            run.verdict = interpret(run.raw_output, self.threshold)
        except Exception as exc:
            run.fail("interpret", exc)
            return run

        run.advance(PipelineState.DONE)
        return run

    def run(self, image: np.ndarray) -> Verdict:
        """Run one image through the pipeline; raises PipelineError on any stage failure."""
        result = self.execute(image)
        if result.error is not None:
            raise result.error from result.error.cause
        return result.verdict
