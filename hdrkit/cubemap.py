"""Cube map sampling, RGBM encoding and cube-to-longitude/latitude resampling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

K_PI = 3.141592


@dataclass
class Image:
    """Floating-point image whose ``data`` has shape (height, width, channels)."""

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        data = np.asarray(self.data, dtype=np.float32)
        if data.ndim == 1:
            if self.width * self.height == 0 or data.size % (self.width * self.height):
                raise ValueError("pixel data does not match the image size")
            data = data.reshape(self.height, self.width, -1)
        elif data.ndim == 2:
            data = data[..., np.newaxis]
        if data.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"pixel data of shape {data.shape} does not match "
                f"{self.width}x{self.height}"
            )
        self.data = data

    @property
    def channels(self) -> int:
        return int(self.data.shape[2])


def rgbm_to_linear(rgbm: Sequence[float]) -> tuple[float, float, float]:
    """Decode an RGBM value (components in 0..1) to linear RGB."""
    m = rgbm[3] * 16.0
    rgb = (c * m for c in rgbm[:3])
    return tuple(c * c for c in rgb)  # type: ignore[return-value]


def linear_to_rgbm(linear: Sequence[float]) -> tuple[float, float, float, float]:
    """Encode linear RGB as RGBM; the multiplier is quantised to 1/255 steps."""
    rgb = [c * c / 16.0 for c in linear[:3]]
    max_component = max(max(rgb[0], rgb[1]), max(rgb[2], 1e-6))
    m = max(1.0 / 16.0, min(max_component, 1.0))
    m = math.ceil(m * 255.0) / 255.0
    r, g, b = (max(0.0, min(1.0, c / m)) for c in rgb)
    return (r, g, b, m)


def file_extension(filename: str) -> str:
    """Text after the last dot of ``filename``, or an empty string."""
    _, dot, ext = filename.rpartition(".")
    return ext if dot else ""


def xyz_to_cube_uv(x: float, y: float, z: float) -> tuple[int, float, float]:
    """Face index (+X, -X, +Y, -Y, +Z, -Z = 0..5) and (u, v) in 0..1 of a direction.

    On ties between axes the later face in that order wins.
    """
    ax, ay, az = abs(x), abs(y), abs(z)
    x_pos, y_pos, z_pos = x > 0.0, y > 0.0, z > 0.0

    candidates = (
        (x_pos and ax >= ay and ax >= az, 0, ax, -z, y),
        (not x_pos and ax >= ay and ax >= az, 1, ax, z, y),
        (y_pos and ay >= ax and ay >= az, 2, ay, x, -z),
        (not y_pos and ay >= ax and ay >= az, 3, ay, x, z),
        (z_pos and az >= ax and az >= ay, 4, az, x, y),
        (not z_pos and az >= ax and az >= ay, 5, az, -x, y),
    )
    chosen = [c for c in candidates if c[0]]
    if not chosen:
        raise ValueError(f"direction ({x}, {y}, {z}) does not map to a cube face")
    _, index, max_axis, uc, vc = chosen[-1]
    if max_axis == 0.0:
        raise ValueError("cannot map a zero-length direction to a cube face")
    return index, 0.5 * (uc / max_axis + 1.0), 0.5 * (vc / max_axis + 1.0)


def sample_texture(u: float, v: float, image: Image) -> tuple[float, ...]:
    """Bilinearly filtered texel at (u, v), wrapping coordinates by repetition."""
    width, height = image.width, image.height
    uu = min(max(u - math.floor(u), 0.0), 1.0)
    vv = min(max(v - math.floor(v), 0.0), 1.0)

    px = (width - 1) * uu
    py = (height - 1) * vv

    x0 = max(0, min(int(px), width - 1))
    y0 = max(0, min(int(py), height - 1))
    x1 = max(0, min(x0 + 1, width - 1))
    y1 = max(0, min(y0 + 1, height - 1))

    dx = px - x0
    dy = py - y0
    w00 = (1.0 - dx) * (1.0 - dy)
    w10 = (1.0 - dx) * dy
    w01 = dx * (1.0 - dy)
    w11 = dx * dy

    texels = image.data
    value = (
        w00 * texels[y0, x0].astype(np.float64)
        + w10 * texels[y1, x0]
        + w01 * texels[y0, x1]
        + w11 * texels[y1, x1]
    )
    return tuple(float(c) for c in value)


def sample_cubemap(faces: Sequence[Image], n: Sequence[float]) -> tuple[float, ...]:
    """Colour of the cube map in direction ``n``."""
    if len(faces) != 6:
        raise ValueError(f"a cube map needs 6 faces, got {len(faces)}")
    face, u, v = xyz_to_cube_uv(n[0], n[1], n[2])
    return sample_texture(u, 1.0 - v, faces[face])


def cubemap_to_longlat(
    faces: Sequence[Image], width: int, phi_offset: float = 0.0
) -> Image:
    """Resample a cube map into a Y-up longitude/latitude RGB image.

    The output is ``width`` by ``width // 2``; ``phi_offset`` rotates it
    around the vertical axis, in degrees.
    """
    if len(faces) != 6:
        raise ValueError(f"a cube map needs 6 faces, got {len(faces)}")
    height = width // 2
    if width <= 0 or height <= 0:
        raise ValueError(f"output width {width} is too small")

    out = np.zeros((height, width, 3), dtype=np.float32)
    offset = phi_offset * K_PI / 180.0
    for y in range(height):
        theta = ((y + 0.5) / height) * K_PI
        sin_t, cos_t = math.sin(theta), math.cos(theta)
        for x in range(width):
            phi = ((x + 0.5) / width) * 2.0 * K_PI + offset
            n = (sin_t * math.cos(phi), cos_t, -sin_t * math.sin(phi))
            out[y, x] = sample_cubemap(faces, n)[:3]
    return Image(width, height, out)


def float_to_byte(f: float) -> int:
    """Scale 0..1 to 0..255, truncating and clamping."""
    return max(0, min(255, int(f * 255.0)))