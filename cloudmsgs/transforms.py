"""Rigid transforms applied to point cloud messages."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from .cloud_ops import field_index
from .messages import Header, PointCloud2, PointFieldType, Time

_FLOAT_SIZE = 4


class TransformLookupError(LookupError):
    """Raised when no transform is known between two frames."""


class ExtrapolationError(LookupError):
    """Raised when a transform is requested outside the known time range."""


@dataclass(frozen=True)
class Transform:
    """A rigid transform: a translation and a rotation quaternion (x, y, z, w)."""

    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


@dataclass
class TransformStamped:
    """A transform from ``child_frame_id`` into ``header.frame_id``."""

    header: Header = field(default_factory=Header)
    child_frame_id: str = ""
    transform: Transform = field(default_factory=Transform)


class _TransformSource(Protocol):
    def lookup_transform(
        self, target_frame: str, source_frame: str, stamp: Time
    ) -> TransformStamped: ...


def _rotation_basis(rotation: tuple[float, float, float, float]) -> np.ndarray:
    x, y, z, w = (float(v) for v in rotation)
    norm_sq = x * x + y * y + z * z + w * w
    if norm_sq == 0.0:
        raise ValueError("rotation quaternion has zero length")
    s = 2.0 / norm_sq
    xs, ys, zs = x * s, y * s, z * s
    wx, wy, wz = w * xs, w * ys, w * zs
    xx, xy, xz = x * xs, x * ys, x * zs
    yy, yz, zz = y * ys, y * zs, z * zs
    return np.array(
        [
            [1.0 - (yy + zz), xy - wz, xz + wy],
            [xy + wz, 1.0 - (xx + zz), yz - wx],
            [xz - wy, yz + wx, 1.0 - (xx + yy)],
        ]
    )


def transform_as_matrix(transform: Transform | TransformStamped) -> np.ndarray:
    """Return the homogeneous 4x4 single-precision matrix of a transform."""
    if isinstance(transform, TransformStamped):
        transform = transform.transform
    matrix = np.zeros((4, 4), dtype=np.float32)
    matrix[:3, :3] = _rotation_basis(transform.rotation)
    matrix[:3, 3] = [float(v) for v in transform.translation]
    matrix[3, 3] = 1.0
    return matrix


def _float_column(
    buffer: bytearray, count: int, offset: int, step: int, dtype: np.dtype
) -> np.ndarray:
    end = (count - 1) * step + offset + _FLOAT_SIZE
    if offset < 0 or end > len(buffer):
        raise ValueError("point data is shorter than the fields and point step describe")
    return np.ndarray((count,), dtype=dtype, buffer=buffer, offset=offset, strides=(step,))


def transform_point_cloud(matrix, cloud: PointCloud2) -> PointCloud2:
    """Apply a 4x4 matrix to the x, y, z (and viewpoint) fields of a cloud.

    Points with a non-finite coordinate are left as they are, unless the
    cloud carries a finite ``distance`` value for them: such max-range
    points are transformed using the distance as x, the result's x is
    stored back in ``distance`` and x becomes NaN. Raises ValueError if
    the cloud has no float32 x, y and z fields.
    """
    transform = np.asarray(matrix, dtype=np.float32)
    if transform.shape != (4, 4):
        raise ValueError("transform must be a 4x4 matrix")

    indices = [field_index(cloud, name) for name in ("x", "y", "z")]
    if any(i is None for i in indices):
        raise ValueError(
            "input dataset has no X-Y-Z coordinates; cannot convert to matrix form"
        )
    xyz_fields = [cloud.fields[i] for i in indices]
    if any(f.datatype != PointFieldType.FLOAT32 for f in xyz_fields):
        raise ValueError("X-Y-Z coordinates are not floats; only floats are supported")

    out = copy.deepcopy(cloud)
    count = cloud.num_points()
    if count == 0:
        return out

    buffer = bytearray(cloud.data)
    dtype = np.dtype(">f4" if cloud.is_bigendian else "<f4")
    step = cloud.point_step
    columns = [_float_column(buffer, count, f.offset, step, dtype) for f in xyz_fields]

    points = np.vstack([*columns, np.ones(count, dtype=np.float32)]).astype(np.float32)
    finite = np.isfinite(points[:3]).all(axis=0)

    dist_idx = field_index(cloud, "distance")
    distance = None
    max_range = np.zeros(count, dtype=bool)
    if dist_idx is not None:
        distance = _float_column(buffer, count, cloud.fields[dist_idx].offset, step, dtype)
        max_range = ~finite & np.isfinite(distance)

    with np.errstate(invalid="ignore", over="ignore"):
        inputs = points.copy()
        inputs[0, max_range] = distance[max_range] if distance is not None else 0.0
        transformed = transform @ inputs
        result = np.where((finite | max_range)[None, :], transformed, points)

    if distance is not None and max_range.any():
        distance[max_range] = transformed[0, max_range]
        result[0, max_range] = np.nan

    for column, values in zip(columns, result[:3]):
        column[:] = values

    vp_idx = field_index(cloud, "vp_x")
    if vp_idx is not None:
        vp_offset = cloud.fields[vp_idx].offset
        vp_columns = [
            _float_column(buffer, count, vp_offset + k * _FLOAT_SIZE, step, dtype)
            for k in range(3)
        ]
        viewpoints = np.vstack([*vp_columns, np.ones(count, dtype=np.float32)]).astype(
            np.float32
        )
        with np.errstate(invalid="ignore", over="ignore"):
            moved = transform @ viewpoints
        for column, values in zip(vp_columns, moved[:3]):
            column[:] = values

    out.data = bytes(buffer)
    return out


def transform_point_cloud_with(
    target_frame: str, transform: Transform | TransformStamped, cloud: PointCloud2
) -> PointCloud2:
    """Transform a cloud with a known transform and relabel it to ``target_frame``.

    A cloud already in ``target_frame`` is returned as an unchanged copy.
    """
    if cloud.header.frame_id == target_frame:
        return copy.deepcopy(cloud)
    out = transform_point_cloud(transform_as_matrix(transform), cloud)
    out.header.frame_id = target_frame
    return out


def transform_point_cloud_to_frame(
    target_frame: str, cloud: PointCloud2, buffer: _TransformSource
) -> PointCloud2:
    """Look up the transform into ``target_frame`` at the cloud's stamp and apply it.

    ``buffer.lookup_transform`` raises :class:`TransformLookupError` or
    :class:`ExtrapolationError` when no transform is available; those
    propagate to the caller.
    """
    if cloud.header.frame_id == target_frame:
        return copy.deepcopy(cloud)
    stamped = buffer.lookup_transform(target_frame, cloud.header.frame_id, cloud.header.stamp)
    out = transform_point_cloud(transform_as_matrix(stamped), cloud)
    out.header.frame_id = target_frame
    return out