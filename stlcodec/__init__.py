"""stlcodec - binary and ASCII STL decoding, binary encoding and manifold validation."""

from stlcodec.core import (
    CodecConfig,
    DecodeError,
    MeshValidationError,
    StlCodecError,
    load_config,
)
from stlcodec.formats import (
    AsciiStlReader,
    BinaryStlReader,
    StlFormat,
    TriangleStream,
    create_stl_reader,
    probe_format,
    read_stl,
    write_stl,
)
from stlcodec.geometry import IndexedMesh, IndexedTriangle, Triangle, Vector3, VertexKey
from stlcodec.processing import MeshValidator, index_triangles, validate_mesh

__version__ = "0.1.0"

__all__ = [
    "CodecConfig",
    "load_config",
    "StlCodecError",
    "DecodeError",
    "MeshValidationError",
    "Vector3",
    "VertexKey",
    "Triangle",
    "IndexedTriangle",
    "IndexedMesh",
    "TriangleStream",
    "BinaryStlReader",
    "AsciiStlReader",
    "StlFormat",
    "probe_format",
    "create_stl_reader",
    "read_stl",
    "write_stl",
    "index_triangles",
    "MeshValidator",
    "validate_mesh",
]
