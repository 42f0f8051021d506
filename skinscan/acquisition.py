# skinscan/acquisition.py
"""Image sources that feed the pipeline: camera, gallery file, raw upload bytes.

None of these raise on a missing image; they report it through
AcquisitionResult.status so the caller can skip the pipeline entirely.
"""
import io
import os
from dataclasses import dataclass
from typing import Literal, Optional

import cv2
import numpy as np
from PIL import Image

Status = Literal["ok", "cancelled", "failed"]
Source = Literal["camera", "gallery", "upload"]

_DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


@dataclass(frozen=True)
class AcquisitionResult:
    status: Status
    source: Source
    image: Optional[np.ndarray] = None  # (H, W, 3) uint8 RGB when status == "ok"
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def cancelled(source: Source) -> AcquisitionResult:
    return AcquisitionResult(status="cancelled", source=source)


def failed(source: Source, message: str) -> AcquisitionResult:
    return AcquisitionResult(status="failed", source=source, message=message)


def _decoded(img: Image.Image, source: Source) -> AcquisitionResult:
    return AcquisitionResult(status="ok", source=source, image=np.asarray(img.convert("RGB")))


def from_bytes(content: bytes, source: Source = "upload") -> AcquisitionResult:
    if not content:
        return failed(source, "Empty image data")
    try:
        img = Image.open(io.BytesIO(content))
        img.load()
    except _DECODE_ERRORS as exc:
        return failed(source, f"Cannot read image: {exc}")
    return _decoded(img, source)


def from_gallery(path: Optional[str]) -> AcquisitionResult:
    """`path=None` means the picker was closed without a selection."""
    if path is None:
        return cancelled("gallery")
    if not os.path.isfile(path):
        return failed("gallery", f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            return _decoded(img, "gallery")
    except _DECODE_ERRORS as exc:
        return failed("gallery", f"Cannot read image {path}: {exc}")


def from_camera(device_index: int = 0) -> AcquisitionResult:
    """Grab a single frame from a local camera."""
    cap = cv2.VideoCapture(device_index)
    try:
        if not cap.isOpened():
            return failed("camera", f"Camera {device_index} is unavailable")
        ok, frame = cap.read()
        if not ok or frame is None:
            return failed("camera", "Unable to retrieve an image from the camera")
        frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return AcquisitionResult(status="ok", source="camera", image=frame)
    finally:
        cap.release()
