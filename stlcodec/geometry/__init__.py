"""Geometric primitives for stlcodec."""

from stlcodec.geometry.primitives import (
    DEFAULT_EPSILON,
    IndexedMesh,
    IndexedTriangle,
    Triangle,
    Vector3,
    VertexKey,
    face_areas,
    to_float32,
    triangle_area,
)

__all__ = [
    "DEFAULT_EPSILON",
    "Vector3",
    "VertexKey",
    "Triangle",
    "IndexedTriangle",
    "IndexedMesh",
    "triangle_area",
    "face_areas",
    "to_float32",
]
