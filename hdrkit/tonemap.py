"""Map linear floating-point pixels to 8-bit gamma-encoded values."""

from __future__ import annotations

import numpy as np


def _to_bytes(values: np.ndarray, gamma: float) -> np.ndarray:
    values = np.asarray(values, dtype=np.float32)
    exponent = np.float32(1.0) / np.float32(gamma)
    with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
        scaled = np.float32(255.0) * np.power(values, exponent)
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.trunc(scaled), 0, 255).astype(np.uint8)


def gamma_to_byte(f: float, gamma: float) -> int:
    """Gamma-encode one value into the range 0..255."""
    return int(_to_bytes(np.array([f]), gamma)[0])


def to_ldr(
    rgba,
    width: int,
    height: int,
    scale: float = 1.0,
    gamma: float = 2.2,
    ignore_alpha: bool = False,
) -> np.ndarray:
    """Convert RGBA float pixels into an 8-bit RGBA array of shape (height, width, 4).

    Every channel, alpha included, is multiplied by ``scale`` before
    encoding; with ``ignore_alpha`` the output alpha is always 255.
    """
    pixels = np.asarray(rgba, dtype=np.float32).reshape(-1)
    if pixels.size != width * height * 4:
        raise ValueError(
            f"expected {width * height * 4} values for a {width}x{height} RGBA image, "
            f"got {pixels.size}"
        )
    pixels = pixels.reshape(height, width, 4) * np.float32(scale)
    out = _to_bytes(pixels, gamma)
    if ignore_alpha:
        out[..., 3] = 255
    return out