# skinscan/inference/preprocess.py
import numpy as np
import torch
from PIL import Image
from torchvision import transforms
from torchvision.transforms import InterpolationMode

from skinscan.errors import InvalidImageError

IMG_SIZE = 224  # must match the exported model
MEAN = [0.485, 0.456, 0.406]  # ImageNet
STD = [0.229, 0.224, 0.225]
TENSOR_SHAPE = (1, 3, IMG_SIZE, IMG_SIZE)

def get_transform():
    return transforms.Compose([
        transforms.Resize((IMG_SIZE, IMG_SIZE), interpolation=InterpolationMode.BILINEAR, antialias=True),
        transforms.ToTensor(),
        transforms.Normalize(mean=MEAN, std=STD)
    ])

_transform = get_transform()

def _as_rgb_uint8(image) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Expected a numpy array, got {type(image).__name__}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidImageError(f"Expected an RGB image of shape (H, W, 3), got {image.shape}")
    h, w, _ = image.shape
    if h <= 0 or w <= 0:
        raise InvalidImageError(f"Image has zero size: {w}x{h}")
    if image.dtype == np.uint8:
        return image
    if not (np.issubdtype(image.dtype, np.integer) or np.issubdtype(image.dtype, np.floating)):
        raise InvalidImageError(f"Unsupported pixel dtype: {image.dtype}")
    if not np.all(np.isfinite(image)):
        raise InvalidImageError("Image contains non-finite values")
    if image.min() < 0 or image.max() > 255:
        raise InvalidImageError("Pixel values must lie in [0, 255]")
    if np.issubdtype(image.dtype, np.floating) and image.max() <= 1.0 and np.any(image != np.floor(image)):
        raise InvalidImageError("Float image looks scaled to [0, 1]; pixel values must be in [0, 255]")
    return np.rint(image).astype(np.uint8)

def normalize(image: np.ndarray) -> torch.Tensor:
    """RGB array (H, W, 3) with values in [0, 255] -> float32 tensor [1, 3, 224, 224].

    uint8 is expected; integer and float arrays are rounded to uint8 first.
    """
    rgb = _as_rgb_uint8(image)
    pil = Image.fromarray(np.ascontiguousarray(rgb))
    return _transform(pil).unsqueeze(0)
