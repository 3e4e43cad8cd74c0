"""Polygon output for a 2D convex hull, oriented counter-clockwise."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from .messages import Header

_MIN_POLYGON_POINTS = 3


def _as_float32(value: float) -> float:
    return float(np.float32(value))


@dataclass(frozen=True)
class Point32:
    """A point with single-precision coordinates."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _as_float32(self.x))
        object.__setattr__(self, "y", _as_float32(self.y))
        object.__setattr__(self, "z", _as_float32(self.z))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


@dataclass
class PolygonStamped:
    """A polygon given by its corner points, with a header."""

    header: Header = field(default_factory=Header)
    points: list[Point32] = field(default_factory=list)


def _coordinates(points: Iterable[Sequence[float]]) -> np.ndarray:
    rows = []
    for point in points:
        coords = tuple(point)
        if len(coords) != 3:
            raise ValueError("each hull point must have exactly three coordinates")
        rows.append(coords)
    if not rows:
        return np.zeros((0, 3), dtype=np.float32)
    return np.asarray(rows, dtype=np.float32)


def hull_polygon(
    points: Iterable[Sequence[float]], header: Header
) -> PolygonStamped | None:
    """Build a polygon from ordered hull points, or None for fewer than three.

    The orientation is judged from the first three points: with ``O`` the
    second point, ``B`` the first and ``A`` the third, the normal
    ``(A - O) x (B - O)`` is dotted with ``O``; if that value is below
    pi/2 the point order is reversed.
    """
    coords = _coordinates(points)
    if len(coords) < _MIN_POLYGON_POINTS:
        return None

    origin, b, a = coords[1], coords[0], coords[2]
    normal = np.cross(a - origin, b - origin)
    theta = float(np.dot(normal, origin))
    if theta < math.pi / 2.0:
        coords = coords[::-1]

    return PolygonStamped(
        header=header,
        points=[Point32(float(x), float(y), float(z)) for x, y, z in coords],
    )