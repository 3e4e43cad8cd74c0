"""Message types for point clouds, images and related data.

Two families of types live here: the wire-facing message types, whose
headers carry a nanosecond :class:`Time` stamp, and the library-side
types (prefixed ``PCL``), whose headers carry an integer stamp in
microseconds and a sequence number.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

_NANOSECONDS_PER_SECOND = 1_000_000_000


class PointFieldType(IntEnum):
    """Data type codes of a point field."""

    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    FLOAT32 = 7
    FLOAT64 = 8


@dataclass(frozen=True, order=True)
class Time:
    """A point in time stored as whole nanoseconds since the epoch."""

    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if self.nanoseconds < 0:
            raise ValueError("cannot store a negative time point")

    @classmethod
    def from_parts(cls, seconds: int, nanoseconds: int) -> Time:
        """Build a time from whole seconds plus extra nanoseconds."""
        if seconds < 0:
            raise ValueError("cannot store a negative time point")
        if nanoseconds < 0:
            raise ValueError("nanoseconds must not be negative")
        return cls(seconds * _NANOSECONDS_PER_SECOND + nanoseconds)

    def to_seconds(self) -> float:
        """Return the time as floating-point seconds."""
        return self.nanoseconds / _NANOSECONDS_PER_SECOND


@dataclass
class Header:
    """Message header with a nanosecond stamp."""

    stamp: Time = field(default_factory=Time)
    frame_id: str = ""


@dataclass
class PCLHeader:
    """Library-side header; the stamp is in microseconds."""

    seq: int = 0
    stamp: int = 0
    frame_id: str = ""


@dataclass
class PointField:
    """Description of one field inside a point record."""

    name: str = ""
    offset: int = 0
    datatype: int = 0
    count: int = 0


@dataclass
class _CloudBase:
    height: int = 0
    width: int = 0
    fields: list[PointField] = field(default_factory=list)
    is_bigendian: bool = False
    point_step: int = 0
    row_step: int = 0
    data: bytes = b""
    is_dense: bool = False


@dataclass
class PointCloud2(_CloudBase):
    """A point cloud message with raw point records."""

    header: Header = field(default_factory=Header)

    def num_points(self) -> int:
        """Number of points, width times height."""
        return self.width * self.height


@dataclass
class PCLPointCloud2(_CloudBase):
    """Library-side point cloud with raw point records."""

    header: PCLHeader = field(default_factory=PCLHeader)

    def num_points(self) -> int:
        """Number of points, width times height."""
        return self.width * self.height


@dataclass
class Image:
    """An image message."""

    header: Header = field(default_factory=Header)
    height: int = 0
    width: int = 0
    encoding: str = ""
    is_bigendian: bool = False
    step: int = 0
    data: bytes = b""


@dataclass
class PCLImage:
    """Library-side image."""

    header: PCLHeader = field(default_factory=PCLHeader)
    height: int = 0
    width: int = 0
    encoding: str = ""
    is_bigendian: bool = False
    step: int = 0
    data: bytes = b""


@dataclass
class PointIndices:
    """A list of point indices with a header."""

    header: Header = field(default_factory=Header)
    indices: list[int] = field(default_factory=list)


@dataclass
class PCLPointIndices:
    """Library-side list of point indices."""

    header: PCLHeader = field(default_factory=PCLHeader)
    indices: list[int] = field(default_factory=list)


@dataclass
class ModelCoefficients:
    """Coefficients of a fitted model with a header."""

    header: Header = field(default_factory=Header)
    values: list[float] = field(default_factory=list)


@dataclass
class PCLModelCoefficients:
    """Library-side model coefficients."""

    header: PCLHeader = field(default_factory=PCLHeader)
    values: list[float] = field(default_factory=list)


@dataclass
class Vertices:
    """Indices of the vertices forming one polygon."""

    vertices: list[int] = field(default_factory=list)


@dataclass
class PolygonMesh:
    """A polygon mesh message: a cloud and polygons over its points."""

    header: Header = field(default_factory=Header)
    cloud: PointCloud2 = field(default_factory=PointCloud2)
    polygons: list[Vertices] = field(default_factory=list)


@dataclass
class PCLPolygonMesh:
    """Library-side polygon mesh."""

    header: PCLHeader = field(default_factory=PCLHeader)
    cloud: PCLPointCloud2 = field(default_factory=PCLPointCloud2)
    polygons: list[Vertices] = field(default_factory=list)