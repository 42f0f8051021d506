# skinscan/app.py
from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

from skinscan.acquisition import AcquisitionResult
from skinscan.config import Settings
from skinscan.display import format_raw_output, render
from skinscan.inference.interpret import DEFAULT_THRESHOLD
from skinscan.inference.loader import load_model
from skinscan.inference.pipeline import ClassificationPipeline
from skinscan.models import Verdict


@dataclass(frozen=True, eq=False)
class ScreeningOutcome:
    status: Literal["done", "failed", "cancelled"]
    message: str
    model_version: str
    verdict: Optional[Verdict] = None
    error: Optional[Exception] = None
    inference_time_ms: Optional[int] = None
    raw_output: Optional[np.ndarray] = None
    debug_message: Optional[str] = None  # leading raw model scores, when inference ran


class ScreeningSession:
    """One loaded model, many images.

    Acquisition results are handed in explicitly through `handle`; the session
    keeps no per-image state between calls.
    """

    def __init__(self, model, threshold: float = DEFAULT_THRESHOLD,
                 model_version: str = "unknown", serialize_inference: bool = True):
        self.model_version = model_version
        self.pipeline = ClassificationPipeline(model, threshold=threshold,
                                               serialize_inference=serialize_inference)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ScreeningSession":
        """Load the model once. ModelLoadError propagates: no session without a model."""
        settings = settings or Settings.from_env()
        model = load_model(settings.model_path, device=settings.device)
        print(f"[ScreeningSession] model_version={settings.model_version} threshold={settings.threshold}")
        return cls(model, threshold=settings.threshold, model_version=settings.model_version,
                   serialize_inference=settings.serialize_inference)

    def handle(self, acquisition: AcquisitionResult) -> ScreeningOutcome:
        if not acquisition.ok:
            # nothing to classify; never reaches the model
            status = "cancelled" if acquisition.status == "cancelled" else "failed"
            return ScreeningOutcome(status=status, message=render(acquisition),
                                    model_version=self.model_version)

        run = self.pipeline.execute(acquisition.image)
        debug = format_raw_output(run.raw_output) if run.raw_output is not None else None
        if run.ok:
            return ScreeningOutcome(status="done", message=render(run.verdict),
                                    model_version=self.model_version, verdict=run.verdict,
                                    inference_time_ms=run.inference_time_ms,
                                    raw_output=run.raw_output, debug_message=debug)
        return ScreeningOutcome(status="failed", message=render(run.error),
                                model_version=self.model_version, error=run.error,
                                inference_time_ms=run.inference_time_ms,
                                raw_output=run.raw_output, debug_message=debug)

    def classify(self, image) -> Verdict:
        """Blocking single-image call; raises PipelineError."""
        return self.pipeline.run(image)
