[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudmsgs"
version = "0.1.0"
description = "Point cloud message types, conversions, concatenation, rigid transforms and hull polygons"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["point cloud", "pointcloud2", "transforms", "convex hull", "robotics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cloudmsgs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
