"""Point cloud messages, conversions, concatenation, rigid transforms, hull polygons and smoothing settings."""

__version__ = "0.1.0"
__all__ = ["cloud_ops", "conversions", "hull", "messages", "mls", "transforms"]