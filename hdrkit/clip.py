"""Clip RGB intensities of an RGBA image to per-channel limits."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

FLT_MAX = float(np.finfo(np.float32).max)


@dataclass(frozen=True)
class ClipResult:
    """Clipped RGB pixels of shape (height, width, 3) and their per-channel range."""

    rgb: np.ndarray
    v_min: tuple[float, float, float]
    v_max: tuple[float, float, float]


def resolve_limits(
    max_all=None,
    rmax=None,
    gmax=None,
    bmax=None,
    min_all=None,
    rmin=None,
    gmin=None,
    bmin=None,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Combine shared and per-channel limits into (rgb_min, rgb_max).

    Per-channel values override the shared one; missing limits are
    the extremes of single-precision floats.
    """

    def combine(shared, channels, default):
        base = default if shared is None else float(shared)
        return tuple(base if c is None else float(c) for c in channels)

    rgb_max = combine(max_all, (rmax, gmax, bmax), FLT_MAX)
    rgb_min = combine(min_all, (rmin, gmin, bmin), -FLT_MAX)
    return rgb_min, rgb_max


def clip_rgb(rgba, width: int, height: int, rgb_min, rgb_max) -> ClipResult:
    """Drop alpha and clamp each RGB channel to [rgb_min, rgb_max].

    A NaN input value ends up at the channel's maximum.
    """
    pixels = np.asarray(rgba, dtype=np.float32).reshape(-1)
    if pixels.size != width * height * 4:
        raise ValueError(
            f"expected {width * height * 4} values for a {width}x{height} RGBA image, "
            f"got {pixels.size}"
        )
    rgb = pixels.reshape(height, width, 4)[..., :3]
    lo = np.asarray(rgb_min, dtype=np.float32)
    hi = np.asarray(rgb_max, dtype=np.float32)

    upper = np.where(rgb < hi, rgb, hi)
    clipped = np.where(lo < upper, upper, lo).astype(np.float32)

    flat = clipped.reshape(-1, 3)
    v_min = np.min(flat, axis=0, initial=FLT_MAX)
    v_max = np.max(flat, axis=0, initial=-FLT_MAX)
    return ClipResult(
        rgb=clipped,
        v_min=tuple(float(v) for v in v_min),
        v_max=tuple(float(v) for v in v_max),
    )