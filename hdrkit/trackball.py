"""Virtual trackball: turn mouse drags into rotation quaternions.

Quaternions are 4-tuples ``(x, y, z, w)`` with the vector part first.
"""

from __future__ import annotations

import math
from typing import Sequence

Quaternion = tuple[float, float, float, float]
Matrix = tuple[
    tuple[float, float, float, float],
    tuple[float, float, float, float],
    tuple[float, float, float, float],
    tuple[float, float, float, float],
]

TRACKBALL_SIZE = 0.8
RENORM_COUNT = 97

_IDENTITY: Quaternion = (0.0, 0.0, 0.0, 1.0)


def _cross(a: Sequence[float], b: Sequence[float]) -> tuple[float, float, float]:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot3(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _project_to_sphere(r: float, x: float, y: float) -> float:
    """Height of (x, y) on a sphere of radius r, or on a hyperbolic sheet further out."""
    d = math.hypot(x, y)
    if d < r * math.sqrt(0.5):
        return math.sqrt(r * r - d * d)
    t = r / math.sqrt(2.0)
    return t * t / d


def trackball(p1x: float, p1y: float, p2x: float, p2y: float) -> Quaternion:
    """Rotation for a drag from (p1x, p1y) to (p2x, p2y), coordinates in -1..1."""
    if p1x == p2x and p1y == p2y:
        return _IDENTITY

    p1 = (p1x, p1y, _project_to_sphere(TRACKBALL_SIZE, p1x, p1y))
    p2 = (p2x, p2y, _project_to_sphere(TRACKBALL_SIZE, p2x, p2y))

    axis = _cross(p2, p1)

    d = (p1[0] - p2[0], p1[1] - p2[1], p1[2] - p2[2])
    t = math.sqrt(_dot3(d, d)) / (2.0 * TRACKBALL_SIZE)
    t = max(-1.0, min(1.0, t))
    phi = 2.0 * math.asin(t)

    return axis_to_quat(axis, phi)


def axis_to_quat(axis: Sequence[float], phi: float) -> Quaternion:
    """Quaternion rotating by ``phi`` radians about ``axis``."""
    length = math.sqrt(_dot3(axis, axis))
    if length == 0.0:
        raise ValueError("rotation axis has zero length")
    s = math.sin(phi / 2.0) / length
    return (axis[0] * s, axis[1] * s, axis[2] * s, math.cos(phi / 2.0))


def add_quats(q1: Sequence[float], q2: Sequence[float]) -> Quaternion:
    """Single rotation equivalent to applying ``q1`` and then ``q2``."""
    cross = _cross(q2, q1)
    x, y, z = (
        q1[i] * q2[3] + q2[i] * q1[3] + cross[i] for i in range(3)
    )
    w = q1[3] * q2[3] - _dot3(q1, q2)
    return (x, y, z, w)


def normalize_quat(q: Sequence[float]) -> Quaternion:
    """Divide every component by the sum of squares of the components."""
    mag = sum(c * c for c in q[:4])
    if mag == 0.0:
        raise ValueError("cannot normalize a zero quaternion")
    return tuple(c / mag for c in q[:4])  # type: ignore[return-value]


def build_rotmatrix(q: Sequence[float]) -> Matrix:
    """4x4 rotation matrix of quaternion ``q``."""
    x, y, z, w = q[0], q[1], q[2], q[3]
    return (
        (1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (z * x + y * w), 0.0),
        (2.0 * (x * y + z * w), 1.0 - 2.0 * (z * z + x * x), 2.0 * (y * z - x * w), 0.0),
        (2.0 * (z * x - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (y * y + x * x), 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


class RotationAccumulator:
    """Composes quaternions, renormalizing every ``RENORM_COUNT + 1`` calls."""

    def __init__(self) -> None:
        self._count = 0

    def add(self, q1: Sequence[float], q2: Sequence[float]) -> Quaternion:
        """Like :func:`add_quats`, periodically renormalizing the result."""
        result = add_quats(q1, q2)
        self._count += 1
        if self._count > RENORM_COUNT:
            self._count = 0
            result = normalize_quat(result)
        return result