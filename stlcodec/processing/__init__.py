"""Mesh processing functionality for stlcodec."""

from stlcodec.processing.indexer import index_triangles
from stlcodec.processing.validator import MeshValidator, validate_mesh

__all__ = [
    "index_triangles",
    "MeshValidator",
    "validate_mesh",
]
