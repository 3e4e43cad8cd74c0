# cloudmsgs

Point cloud message types and the operations that go with them, built on
plain dataclasses and numpy.

## What is in the package

- **`cloudmsgs.messages`**: the message types `PointCloud2`, `PointField`,
  `Header`, `Time`, `Image`, `PointIndices`, `ModelCoefficients`,
  `Vertices` and `PolygonMesh`, and their library-side counterparts
  `PCLPointCloud2`, `PCLHeader`, `PCLImage`, `PCLPointIndices`,
  `PCLModelCoefficients` and `PCLPolygonMesh`. Message headers carry a
  `Time` (whole nanoseconds; `Time.from_parts(seconds, nanoseconds)`,
  `Time.to_seconds()`); library-side headers carry an integer stamp in
  microseconds and a sequence number. `PointFieldType` lists the field
  data types (`INT8` ... `FLOAT64`). Both cloud types have
  `num_points()`, width times height.
- **`cloudmsgs.conversions`**: functions to and from the library-side
  types: `stamp_to_pcl` / `stamp_from_pcl` (nanoseconds to microseconds,
  dropping the sub-microsecond part, and back), `header_to_pcl` /
  `header_from_pcl` (the sequence number is set to 0), `image_to_pcl` /
  `image_from_pcl`, `point_field_to_pcl` / `point_field_from_pcl`,
  `cloud_to_pcl` / `cloud_from_pcl`, `indices_to_pcl` / `indices_from_pcl`,
  `coefficients_to_pcl` / `coefficients_from_pcl`, `vertices_to_pcl` /
  `vertices_from_pcl` and `mesh_to_pcl` / `mesh_from_pcl`. Every function
  returns a new object.
- **`cloudmsgs.cloud_ops`**: `field_index` (position of a named field, or
  `None`), `fields_list` (field names joined by spaces), `field_size`
  (bytes per element of a data type, 0 if unknown) and
  `concatenate_point_clouds`, which joins two clouds into one unorganized
  cloud (height 1). If exactly one input is empty the other is copied.
  Padding fields named `_` are stripped; otherwise the field names must
  match, with `rgb` and `rgba` treated as interchangeable. A mismatch
  raises `ConcatenationError`.
- **`cloudmsgs.transforms`**: `Transform` (translation plus an x, y, z, w
  quaternion), `TransformStamped`, `transform_as_matrix` (4x4 float32
  matrix), `transform_point_cloud` (applies a 4x4 matrix to the float32
  `x`, `y`, `z` fields and, if present, the `vp_x`, `vp_y`, `vp_z`
  viewpoint fields), `transform_point_cloud_with` (applies a known
  transform and relabels the frame) and `transform_point_cloud_to_frame`
  (looks the transform up through any object with a
  `lookup_transform(target_frame, source_frame, stamp)` method). Points
  with a non-finite coordinate are left alone, unless a finite `distance`
  field marks them as max-range points: those are transformed with the
  distance as x, the new x is written back to `distance` and x becomes
  NaN. A cloud without float32 x, y and z fields raises `ValueError`.
  A lookup object may raise `TransformLookupError` or `ExtrapolationError`;
  these reach the caller unchanged.
- **`cloudmsgs.hull`**: `hull_polygon(points, header)` turns ordered hull
  points into a `PolygonStamped` of `Point32` vertices, reversing the
  order when the orientation test on the first three points asks for it.
  It returns `None` for fewer than three points.
- **`cloudmsgs.mls`**: `MLSConfig` and `MovingLeastSquaresSettings`.
  `apply(config)` takes over every value that differs and returns the
  names of the settings that changed; switching on `use_polynomial_fit`
  emits a `DeprecationWarning`. `squared_gaussian_parameter()` returns the
  square of the Gaussian weighting parameter.

## What the package does not do

It has no commands and starts no services: it does not subscribe to or
publish messages, keep a transform buffer, read or write PCD files or
recorded message logs, compute convex hulls or run a moving-least-squares
fit. It provides the data types and the computations above for use in
your own program.

## Installation

```
pip install .
```

For the test suite, install the `test` extra and run pytest:

```
pip install .[test]
pytest
```

## Example

```python
import numpy as np

from cloudmsgs.messages import Header, PointCloud2, PointField, PointFieldType, Time
from cloudmsgs.transforms import transform_point_cloud

fields = [
    PointField(name="x", offset=0, datatype=PointFieldType.FLOAT32, count=1),
    PointField(name="y", offset=4, datatype=PointFieldType.FLOAT32, count=1),
    PointField(name="z", offset=8, datatype=PointFieldType.FLOAT32, count=1),
]
data = np.array([[1.0, 2.0, 3.0]], dtype="<f4").tobytes()
cloud = PointCloud2(
    header=Header(stamp=Time.from_parts(1, 0), frame_id="sensor"),
    height=1,
    width=1,
    fields=fields,
    point_step=12,
    row_step=12,
    data=data,
)

shift = np.eye(4, dtype=np.float32)
shift[0, 3] = 10.0
moved = transform_point_cloud(shift, cloud)
print(np.frombuffer(moved.data, dtype="<f4"))  # [11.  2.  3.]
```