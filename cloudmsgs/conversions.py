"""Conversions between message types and library-side types."""

from __future__ import annotations

from .messages import (
    Header,
    Image,
    ModelCoefficients,
    PCLHeader,
    PCLImage,
    PCLModelCoefficients,
    PCLPointCloud2,
    PCLPointIndices,
    PCLPolygonMesh,
    PointCloud2,
    PointField,
    PointIndices,
    PolygonMesh,
    Time,
    Vertices,
)

_NS_PER_US = 1000


def stamp_from_pcl(pcl_stamp: int) -> Time:
    """Convert a microsecond stamp to a :class:`Time`."""
    return Time(pcl_stamp * _NS_PER_US)


def stamp_to_pcl(stamp: Time) -> int:
    """Convert a :class:`Time` to microseconds, dropping sub-microsecond parts."""
    return stamp.nanoseconds // _NS_PER_US


def header_from_pcl(pcl_header: PCLHeader) -> Header:
    """Convert a library header to a message header."""
    return Header(stamp=stamp_from_pcl(pcl_header.stamp), frame_id=pcl_header.frame_id)


def header_to_pcl(header: Header) -> PCLHeader:
    """Convert a message header to a library header; the sequence number is 0."""
    return PCLHeader(seq=0, stamp=stamp_to_pcl(header.stamp), frame_id=header.frame_id)


def image_from_pcl(pcl_image: PCLImage) -> Image:
    """Convert a library image to an image message."""
    return Image(
        header=header_from_pcl(pcl_image.header),
        height=pcl_image.height,
        width=pcl_image.width,
        encoding=pcl_image.encoding,
        is_bigendian=pcl_image.is_bigendian,
        step=pcl_image.step,
        data=bytes(pcl_image.data),
    )


def image_to_pcl(image: Image) -> PCLImage:
    """Convert an image message to a library image."""
    return PCLImage(
        header=header_to_pcl(image.header),
        height=image.height,
        width=image.width,
        encoding=image.encoding,
        is_bigendian=image.is_bigendian,
        step=image.step,
        data=bytes(image.data),
    )


def point_field_from_pcl(pcl_field: PointField) -> PointField:
    """Copy a library point field into a message point field."""
    return PointField(
        name=pcl_field.name,
        offset=pcl_field.offset,
        datatype=pcl_field.datatype,
        count=pcl_field.count,
    )


def point_field_to_pcl(field: PointField) -> PointField:
    """Copy a message point field into a library point field."""
    return PointField(
        name=field.name,
        offset=field.offset,
        datatype=field.datatype,
        count=field.count,
    )


def cloud_from_pcl(pcl_cloud: PCLPointCloud2) -> PointCloud2:
    """Convert a library point cloud to a point cloud message."""
    return PointCloud2(
        header=header_from_pcl(pcl_cloud.header),
        height=pcl_cloud.height,
        width=pcl_cloud.width,
        fields=[point_field_from_pcl(f) for f in pcl_cloud.fields],
        is_bigendian=pcl_cloud.is_bigendian,
        point_step=pcl_cloud.point_step,
        row_step=pcl_cloud.row_step,
        data=bytes(pcl_cloud.data),
        is_dense=pcl_cloud.is_dense,
    )


def cloud_to_pcl(cloud: PointCloud2) -> PCLPointCloud2:
    """Convert a point cloud message to a library point cloud."""
    return PCLPointCloud2(
        header=header_to_pcl(cloud.header),
        height=cloud.height,
        width=cloud.width,
        fields=[point_field_to_pcl(f) for f in cloud.fields],
        is_bigendian=cloud.is_bigendian,
        point_step=cloud.point_step,
        row_step=cloud.row_step,
        data=bytes(cloud.data),
        is_dense=cloud.is_dense,
    )


def indices_from_pcl(pcl_indices: PCLPointIndices) -> PointIndices:
    """Convert library point indices to a message."""
    return PointIndices(
        header=header_from_pcl(pcl_indices.header), indices=list(pcl_indices.indices)
    )


def indices_to_pcl(indices: PointIndices) -> PCLPointIndices:
    """Convert a point indices message to the library type."""
    return PCLPointIndices(header=header_to_pcl(indices.header), indices=list(indices.indices))


def coefficients_from_pcl(pcl_coefficients: PCLModelCoefficients) -> ModelCoefficients:
    """Convert library model coefficients to a message."""
    return ModelCoefficients(
        header=header_from_pcl(pcl_coefficients.header),
        values=list(pcl_coefficients.values),
    )


def coefficients_to_pcl(coefficients: ModelCoefficients) -> PCLModelCoefficients:
    """Convert a model coefficients message to the library type."""
    return PCLModelCoefficients(
        header=header_to_pcl(coefficients.header), values=list(coefficients.values)
    )


def vertices_from_pcl(pcl_vertices: Vertices) -> Vertices:
    """Copy one library polygon into a message polygon."""
    return Vertices(vertices=list(pcl_vertices.vertices))


def vertices_to_pcl(vertices: Vertices) -> Vertices:
    """Copy one message polygon into a library polygon."""
    return Vertices(vertices=list(vertices.vertices))


def mesh_from_pcl(pcl_mesh: PCLPolygonMesh) -> PolygonMesh:
    """Convert a library polygon mesh to a message."""
    return PolygonMesh(
        header=header_from_pcl(pcl_mesh.header),
        cloud=cloud_from_pcl(pcl_mesh.cloud),
        polygons=[vertices_from_pcl(p) for p in pcl_mesh.polygons],
    )


def mesh_to_pcl(mesh: PolygonMesh) -> PCLPolygonMesh:
    """Convert a polygon mesh message to the library type."""
    return PCLPolygonMesh(
        header=header_to_pcl(mesh.header),
        cloud=cloud_to_pcl(mesh.cloud),
        polygons=[vertices_to_pcl(p) for p in mesh.polygons],
    )