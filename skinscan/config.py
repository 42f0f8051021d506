# skinscan/config.py
import os
from dataclasses import dataclass
from typing import Optional

import torch
from dotenv import find_dotenv, load_dotenv

from skinscan.inference.interpret import DEFAULT_THRESHOLD

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    model_version: str = "v0_1"
    model_path: str = "models_store/v0_1/model_scripted.pt"
    threshold: float = DEFAULT_THRESHOLD
    device: Optional[str] = None  # None -> mps / cuda / cpu, whichever is available
    serialize_inference: bool = True

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        # Load .env first so its values are visible through os.getenv
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        version = os.getenv("MODEL_VERSION", "v0_1")
        path = os.getenv("MODEL_PATH", f"models_store/{version}/model_scripted.pt")

        raw_threshold = os.getenv("THRESHOLD", str(DEFAULT_THRESHOLD))
        try:
            threshold = float(raw_threshold)
        except ValueError:
            raise ValueError(f"THRESHOLD must be a number, got {raw_threshold!r}")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"THRESHOLD must be in [0, 1], got {threshold}")

        raw_serialize = os.getenv("SERIALIZE_INFERENCE", "1").strip().lower()
        if raw_serialize not in TRUTHY | FALSY:
            raise ValueError(f"SERIALIZE_INFERENCE must be a boolean flag, got {raw_serialize!r}")

        device = os.getenv("DEVICE") or None
        if device is not None:
            try:
                torch.device(device)
            except RuntimeError:
                raise ValueError(f"DEVICE must be a torch device string, got {device!r}")

        return cls(
            model_version=version,
            model_path=path,
            threshold=threshold,
            device=device,
            serialize_inference=raw_serialize in TRUTHY,
        )
