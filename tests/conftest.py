"""
Shared fixtures: stub models and tiny TorchScript artifacts written to tmp_path.
"""
import threading
import time
from typing import List

import numpy as np
import pytest
import torch
import torch.nn as nn


class ConstantLogits(nn.Module):
    """Returns the same scores for every input image."""

    def __init__(self, values: List[float]):
        super().__init__()
        self.register_buffer("values", torch.tensor(values, dtype=torch.float32))

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.values.unsqueeze(0).expand(x.shape[0], -1) + 0.0 * x.mean()


class WrongInputSize(nn.Module):
    """Expects 10 features, so it cannot run on a [1, 3, 224, 224] image."""

    def __init__(self):
        super().__init__()
        self.fc = nn.Linear(10, 1)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.fc(x.flatten(1))


class StubModel:
    """Stands in for a loaded model; counts calls and detects overlapping ones."""

    def __init__(self, output=(0.0,), error: Exception = None, delay: float = 0.0):
        self.output = np.asarray(output, dtype=np.float32)
        self.error = error
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()
        self.last_shape = None

    def infer(self, tensor):
        with self._guard:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.last_shape = tuple(tensor.shape)
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.output
        finally:
            with self._guard:
                self.active -= 1


def save_scripted(module: nn.Module, path) -> str:
    torch.jit.save(torch.jit.script(module), str(path))
    return str(path)


@pytest.fixture
def rgb_image():
    """Deterministic 300x200 RGB gradient."""
    h, w = 200, 300
    y, x = np.mgrid[0:h, 0:w]
    img = np.stack([x % 256, y % 256, (x + y) % 256], axis=-1)
    return img.astype(np.uint8)


@pytest.fixture
def single_logit_model_path(tmp_path):
    return save_scripted(ConstantLogits([0.0]), tmp_path / "single_logit.pt")


@pytest.fixture
def imagenet_head_model_path(tmp_path):
    values = [2.0] + [0.0] * 999
    return save_scripted(ConstantLogits(values), tmp_path / "imagenet_head.pt")


@pytest.fixture
def wrong_input_model_path(tmp_path):
    return save_scripted(WrongInputSize(), tmp_path / "wrong_input.pt")


@pytest.fixture
def corrupt_model_path(tmp_path):
    path = tmp_path / "corrupt.pt"
    path.write_bytes(b"definitely not a torchscript archive")
    return str(path)
