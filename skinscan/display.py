# skinscan/display.py
from skinscan.acquisition import AcquisitionResult
from skinscan.errors import ModelLoadError, PipelineError
from skinscan.models import MALIGNANT, Verdict

STAGE_NAMES = {
    "normalize": "preprocessing",
    "inference": "inference",
    "interpret": "output interpretation",
}


def render(outcome) -> str:
    """User-facing text for a verdict, a failure or a cancelled acquisition."""
    if isinstance(outcome, Verdict):
        if outcome.label == MALIGNANT:
            return f"Malignant cancer detected with a confidence of: {outcome.confidence_percent:.2f}%"
        return f"No cancer detected with a confidence of: {outcome.confidence_percent:.2f}%"
    if isinstance(outcome, PipelineError):
        return f"Error during model {STAGE_NAMES[outcome.stage]}: {outcome.cause}"
    if isinstance(outcome, ModelLoadError):
        return "Error: unable to load the model."
    if isinstance(outcome, AcquisitionResult):
        if outcome.status == "cancelled":
            return "Capture cancelled." if outcome.source == "camera" else "Selection cancelled."
        if outcome.status == "failed":
            return f"Error: {outcome.message}"
        return "Image acquired."
    raise TypeError(f"Cannot render {type(outcome).__name__}")


def format_raw_output(output, limit: int = 10) -> str:
    values = [f"{float(v):.4f}" for v in list(output)[:limit]]
    more = len(output) - limit
    if more > 0:
        values.append(f"... (+{more} more)")
    return "Model Output: " + " ".join(values)
