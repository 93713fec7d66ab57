"""STL wire formats: probing, decoding and encoding."""

from stlcodec.formats.ascii import AsciiStlReader
from stlcodec.formats.base import TriangleStream
from stlcodec.formats.binary import BinaryStlReader, write_stl
from stlcodec.formats.probe import StlFormat, create_stl_reader, probe_format, read_stl

__all__ = [
    "TriangleStream",
    "BinaryStlReader",
    "AsciiStlReader",
    "StlFormat",
    "probe_format",
    "create_stl_reader",
    "read_stl",
    "write_stl",
]
