"""Field lookup and concatenation on point cloud messages."""

from __future__ import annotations

import copy
from dataclasses import replace

from .messages import PointCloud2, PointField, PointFieldType

_PADDING = "_"
_COLOUR_NAMES = frozenset({"rgb", "rgba"})

_FIELD_SIZES = {
    PointFieldType.INT8: 1,
    PointFieldType.UINT8: 1,
    PointFieldType.INT16: 2,
    PointFieldType.UINT16: 2,
    PointFieldType.INT32: 4,
    PointFieldType.UINT32: 4,
    PointFieldType.FLOAT32: 4,
    PointFieldType.FLOAT64: 8,
}


class ConcatenationError(ValueError):
    """Raised when two point clouds cannot be joined."""


def field_index(cloud: PointCloud2, name: str) -> int | None:
    """Return the position of the first field called ``name``, or None."""
    return next((i for i, f in enumerate(cloud.fields) if f.name == name), None)


def fields_list(cloud: PointCloud2) -> str:
    """Return the field names of a cloud separated by single spaces."""
    return " ".join(f.name for f in cloud.fields)


def field_size(datatype: int) -> int:
    """Return the byte size of one element of ``datatype``; 0 if unknown."""
    try:
        return _FIELD_SIZES[PointFieldType(datatype)]
    except ValueError:
        return 0


def _names_compatible(first: str, second: str) -> bool:
    if first == second:
        return True
    return {first, second} == _COLOUR_NAMES


def _copy_cloud(cloud: PointCloud2) -> PointCloud2:
    return copy.deepcopy(cloud)


def _strip_concatenate(
    cloud1: PointCloud2, cloud2: PointCloud2, out: PointCloud2
) -> bytes:
    fields2: list[PointField] = [f for f in cloud2.fields if f.name != _PADDING]
    sizes2 = [f.count * field_size(f.datatype) for f in fields2]

    base = len(cloud1.data)
    n2 = cloud2.num_points()
    data = bytearray(cloud1.data)
    data.extend(bytes(n2 * out.point_step))

    for cp in range(n2):
        i = 0
        for field2, size in zip(fields2, sizes2):
            if i >= len(cloud1.fields):
                break
            target = cloud1.fields[i]
            if target.name == _PADDING:
                # A padding field consumes this step without copying.
                i += 1
                continue
            if _names_compatible(target.name, field2.name):
                dst = base + cp * cloud1.point_step + target.offset
                src = cp * cloud2.point_step + field2.offset
                data[dst:dst + size] = cloud2.data[src:src + size]
                i += 1
    return bytes(data)


def concatenate_point_clouds(cloud1: PointCloud2, cloud2: PointCloud2) -> PointCloud2:
    """Join the points of two clouds into a new, unorganized cloud.

    If exactly one input is empty, a copy of the other is returned.
    Padding fields named ``_`` are stripped when present; otherwise the
    field lists must match by name, with ``rgb`` and ``rgba`` treated as
    interchangeable. Raises :class:`ConcatenationError` on a mismatch.
    """
    n1 = cloud1.num_points()
    n2 = cloud2.num_points()
    if n1 == 0 and n2 > 0:
        return _copy_cloud(cloud2)
    if n1 > 0 and n2 == 0:
        return _copy_cloud(cloud1)

    strip = any(f.name == _PADDING for f in (*cloud1.fields, *cloud2.fields))

    if not strip and len(cloud1.fields) != len(cloud2.fields):
        raise ConcatenationError(
            f"number of fields in cloud1 ({len(cloud1.fields)}) != "
            f"number of fields in cloud2 ({len(cloud2.fields)})"
        )

    out = replace(
        _copy_cloud(cloud1),
        width=n1 + n2,
        height=1,
        is_dense=cloud1.is_dense and cloud2.is_dense,
    )

    if strip:
        out.data = _strip_concatenate(cloud1, cloud2, out)
        return out

    for i, (f1, f2) in enumerate(zip(cloud1.fields, cloud2.fields)):
        if not _names_compatible(f1.name, f2.name):
            raise ConcatenationError(
                f"name of field {i} in cloud1, {f1.name}, does not match "
                f"name in cloud2, {f2.name}"
            )
    out.data = bytes(cloud1.data) + bytes(cloud2.data)
    return out