import copy
import math
import struct

import numpy as np
import pytest

from cloudmsgs.messages import Header, PointCloud2, PointField, PointFieldType, Time
from cloudmsgs.transforms import (
    ExtrapolationError,
    Transform,
    TransformLookupError,
    TransformStamped,
    transform_as_matrix,
    transform_point_cloud,
    transform_point_cloud_to_frame,
    transform_point_cloud_with,
)


def make_cloud(names, rows, frame="laser", bigendian=False):
    fields = [
        PointField(name=n, offset=4 * i, datatype=PointFieldType.FLOAT32, count=1)
        for i, n in enumerate(names)
    ]
    order = ">" if bigendian else "<"
    data = b"".join(struct.pack(f"{order}{len(names)}f", *r) for r in rows)
    return PointCloud2(
        header=Header(stamp=Time(1_500_000), frame_id=frame),
        height=1,
        width=len(rows),
        fields=fields,
        is_bigendian=bigendian,
        point_step=4 * len(names),
        row_step=4 * len(names) * len(rows),
        data=data,
        is_dense=True,
    )


def read_rows(cloud):
    order = ">" if cloud.is_bigendian else "<"
    fmt = f"{order}{len(cloud.fields)}f"
    return [list(r) for r in struct.iter_unpack(fmt, cloud.data)]


class FakeBuffer:
    def __init__(self, transform=None, error=None):
        self.transform = transform
        self.error = error
        self.calls = []

    def lookup_transform(self, target_frame, source_frame, stamp):
        self.calls.append((target_frame, source_frame, stamp))
        if self.error is not None:
            raise self.error
        return self.transform


def test_identity_transform_gives_identity_matrix():
    assert np.array_equal(transform_as_matrix(Transform()), np.eye(4, dtype=np.float32))


def test_matrix_holds_translation_and_fixed_bottom_row():
    m = transform_as_matrix(Transform(translation=(1.5, -2.0, 3.25)))
    assert m[:3, 3].tolist() == [1.5, -2.0, 3.25]
    assert m[3].tolist() == [0.0, 0.0, 0.0, 1.0]
    assert m.dtype == np.float32


def test_quarter_turn_about_z():
    s = math.sqrt(0.5)
    m = transform_as_matrix(Transform(translation=(1.0, 2.0, 3.0), rotation=(0.0, 0.0, s, s)))
    expected = np.array(
        [[0, -1, 0, 1], [1, 0, 0, 2], [0, 0, 1, 3], [0, 0, 0, 1]], dtype=np.float32
    )
    assert np.allclose(m, expected, atol=1e-6)


def test_rotation_is_orthonormal_and_ignores_quaternion_scale():
    q = np.array([0.1, 0.2, 0.3, 0.9])
    unit = transform_as_matrix(Transform(rotation=tuple(q / np.linalg.norm(q))))
    scaled = transform_as_matrix(Transform(rotation=tuple(q * 2)))
    assert np.allclose(unit, scaled, atol=1e-6)
    r = unit[:3, :3].astype(np.float64)
    assert np.allclose(r @ r.T, np.eye(3), atol=1e-5)
    assert np.linalg.det(r) == pytest.approx(1.0, abs=1e-5)


def test_stamped_transform_matches_plain():
    t = Transform(translation=(4.0, 5.0, 6.0), rotation=(0.0, 1.0, 0.0, 1.0))
    stamped = TransformStamped(header=Header(frame_id="map"), child_frame_id="laser", transform=t)
    assert np.array_equal(transform_as_matrix(stamped), transform_as_matrix(t))


def test_zero_quaternion_rejected():
    with pytest.raises(ValueError):
        transform_as_matrix(Transform(rotation=(0.0, 0.0, 0.0, 0.0)))


def test_translation_moves_points_by_offset():
    cloud = make_cloud(["x", "y", "z"], [(0.5, 0.5, 0.5), (-1.0, 2.0, 4.0)])
    out = transform_point_cloud(transform_as_matrix(Transform(translation=(1.0, 2.0, 3.0))), cloud)
    for before, after in zip(read_rows(cloud), read_rows(out)):
        assert np.allclose(np.subtract(after, before), [1.0, 2.0, 3.0])


def test_round_trip_with_inverse_matrix():
    rows = [(1.0, 2.0, 3.0), (-4.0, 0.5, 7.0), (0.0, 0.0, 0.0)]
    cloud = make_cloud(["x", "y", "z"], rows)
    m = transform_as_matrix(Transform(translation=(3.0, -1.0, 2.0), rotation=(0.2, 0.1, 0.4, 0.9)))
    there = transform_point_cloud(m, cloud)
    back = transform_point_cloud(np.linalg.inv(m.astype(np.float64)), there)
    assert np.allclose(read_rows(back), rows, atol=1e-4)


def test_input_not_modified_and_metadata_kept():
    cloud = make_cloud(["x", "y", "z", "intensity"], [(1.0, 1.0, 1.0, 42.0)])
    snapshot = copy.deepcopy(cloud)
    out = transform_point_cloud(transform_as_matrix(Transform(translation=(1.0, 0.0, 0.0))), cloud)
    assert cloud == snapshot
    assert out.fields == cloud.fields
    assert out.header == cloud.header
    assert read_rows(out)[0][3] == 42.0


def test_invalid_point_left_unchanged():
    cloud = make_cloud(["x", "y", "z"], [(float("nan"), 1.0, 2.0)])
    out = transform_point_cloud(transform_as_matrix(Transform(translation=(5.0, 5.0, 5.0))), cloud)
    row = read_rows(out)[0]
    assert math.isnan(row[0])
    assert row[1:] == [1.0, 2.0]


def test_max_range_point_stores_result_in_distance():
    cloud = make_cloud(
        ["x", "y", "z", "distance"], [(float("inf"), 0.0, 0.0, 7.0)]
    )
    m = transform_as_matrix(Transform(translation=(2.0, 0.0, 0.0)))
    there = transform_point_cloud(m, cloud)
    row = read_rows(there)[0]
    assert math.isnan(row[0])
    back = transform_point_cloud(np.linalg.inv(m.astype(np.float64)), there)
    assert read_rows(back)[0][3] == pytest.approx(7.0)
    assert math.isnan(read_rows(back)[0][0])


def test_nonfinite_distance_point_left_unchanged():
    cloud = make_cloud(["x", "y", "z", "distance"], [(float("nan"), 1.0, 1.0, float("nan"))])
    out = transform_point_cloud(transform_as_matrix(Transform(translation=(1.0, 1.0, 1.0))), cloud)
    row = read_rows(out)[0]
    assert math.isnan(row[0]) and math.isnan(row[3])
    assert row[1:3] == [1.0, 1.0]


def test_viewpoint_is_transformed():
    names = ["x", "y", "z", "vp_x", "vp_y", "vp_z"]
    cloud = make_cloud(names, [(0.0, 0.0, 0.0, 1.0, 2.0, 3.0)])
    out = transform_point_cloud(transform_as_matrix(Transform(translation=(1.0, 2.0, 3.0))), cloud)
    before, after = read_rows(cloud)[0], read_rows(out)[0]
    assert np.allclose(np.subtract(after[3:], before[3:]), [1.0, 2.0, 3.0])


def test_big_endian_cloud_round_trip():
    rows = [(1.0, -2.0, 3.0)]
    cloud = make_cloud(["x", "y", "z"], rows, bigendian=True)
    m = transform_as_matrix(Transform(translation=(1.0, 1.0, 1.0)))
    there = transform_point_cloud(m, cloud)
    back = transform_point_cloud(np.linalg.inv(m.astype(np.float64)), there)
    assert np.allclose(read_rows(back), rows)


def test_missing_coordinate_field_raises():
    cloud = make_cloud(["x", "y"], [(1.0, 2.0)])
    with pytest.raises(ValueError):
        transform_point_cloud(np.eye(4), cloud)


def test_non_float_coordinates_raise():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)])
    cloud.fields[2].datatype = PointFieldType.FLOAT64
    with pytest.raises(ValueError):
        transform_point_cloud(np.eye(4), cloud)


def test_wrong_matrix_shape_raises():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)])
    with pytest.raises(ValueError):
        transform_point_cloud(np.eye(3), cloud)


def test_with_same_frame_returns_copy():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)], frame="map")
    out = transform_point_cloud_with("map", Transform(translation=(9.0, 9.0, 9.0)), cloud)
    assert out == cloud
    assert out is not cloud


def test_with_other_frame_relabels_and_transforms():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)], frame="laser")
    out = transform_point_cloud_with("map", Transform(translation=(1.0, 1.0, 1.0)), cloud)
    assert out.header.frame_id == "map"
    assert cloud.header.frame_id == "laser"
    assert np.allclose(np.subtract(read_rows(out)[0], read_rows(cloud)[0]), [1.0, 1.0, 1.0])


def test_to_frame_looks_up_at_cloud_stamp():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)], frame="laser")
    stamped = TransformStamped(
        header=Header(frame_id="map"),
        child_frame_id="laser",
        transform=Transform(translation=(0.0, 0.0, 2.0)),
    )
    buffer = FakeBuffer(transform=stamped)
    out = transform_point_cloud_to_frame("map", cloud, buffer)
    assert buffer.calls == [("map", "laser", cloud.header.stamp)]
    assert out.header.frame_id == "map"
    assert np.allclose(np.subtract(read_rows(out)[0], read_rows(cloud)[0]), [0.0, 0.0, 2.0])


def test_to_frame_same_frame_skips_lookup():
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)], frame="map")
    buffer = FakeBuffer(error=TransformLookupError("unused"))
    out = transform_point_cloud_to_frame("map", cloud, buffer)
    assert out == cloud
    assert buffer.calls == []


@pytest.mark.parametrize(
    "error", [TransformLookupError("no such frame"), ExtrapolationError("too far ahead")]
)
def test_to_frame_lookup_errors_propagate(error):
    cloud = make_cloud(["x", "y", "z"], [(1.0, 2.0, 3.0)], frame="laser")
    buffer = FakeBuffer(error=error)
    with pytest.raises(type(error)) as info:
        transform_point_cloud_to_frame("map", cloud, buffer)
    assert info.value is error
    assert buffer.calls == [("map", "laser", cloud.header.stamp)]