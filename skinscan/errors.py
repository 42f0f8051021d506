# skinscan/errors.py


class SkinscanError(Exception):
    """Base class for every error raised by skinscan."""


class InvalidImageError(SkinscanError):
    pass


class ModelLoadError(SkinscanError):
    """The model artifact is missing, corrupt or incompatible. Fatal for the session."""


class InferenceError(SkinscanError):
    pass


class MalformedOutputError(SkinscanError):
    pass


class EmptyOutputError(MalformedOutputError):
    pass


STAGES = ("normalize", "inference", "interpret")


class PipelineError(SkinscanError):
    """A single pipeline invocation failed at `stage` because of `cause`."""

    def __init__(self, stage: str, cause: Exception):
        if stage not in STAGES:
            raise ValueError(f"Unknown pipeline stage: {stage}")
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")
