"""Binary STL decoding and encoding.

Layout (little-endian): an 80-byte header, a uint32 triangle count, then one
50-byte record per triangle holding the normal, three vertices (12 float32s
in total) and a 2-byte attribute field.
"""

import struct
from collections.abc import Sized
from typing import BinaryIO, Iterable, Optional

from stlcodec.core.exceptions import EncodeError, TruncatedInputError
from stlcodec.formats.base import TriangleStream, read_exact
from stlcodec.geometry import Triangle, Vector3
from stlcodec.utils.logging import TriangleOperationLog, get_logger

logger = get_logger(__name__)

HEADER_SIZE = 80
COUNT = struct.Struct("<I")
RECORD = struct.Struct("<12fH")


class BinaryStlReader(TriangleStream):
    """Pull-based decoder for binary STL."""

    def __init__(self, source: BinaryIO):
        """Read the header and triangle count.

        Args:
            source: Readable binary source positioned at the start of the STL data

        Raises:
            TruncatedInputError: If the header or count is cut short
        """
        super().__init__(source)
        self.header = read_exact(source, HEADER_SIZE)
        if len(self.header) < HEADER_SIZE:
            raise TruncatedInputError(
                f"{HEADER_SIZE}-byte header",
                details={"bytes_read": len(self.header)},
            )
        count = read_exact(source, COUNT.size)
        if len(count) < COUNT.size:
            raise TruncatedInputError(
                "triangle count", details={"bytes_read": len(count)}
            )
        (self.count,) = COUNT.unpack(count)
        self.index = 0
        logger.debug("binary_stl_opened", triangle_count=self.count)

    def __length_hint__(self) -> int:
        return 0 if self._finished else self.count - self.index

    def _next_triangle(self) -> Optional[Triangle]:
        if self.index >= self.count:
            return None
        position = self.index
        self.index += 1
        record = read_exact(self.source, RECORD.size)
        if len(record) < RECORD.size:
            raise TruncatedInputError(
                f"triangle #{position} of {self.count}",
                details={
                    "triangle_index": position,
                    "bytes_missing": RECORD.size - len(record),
                },
            )
        values = RECORD.unpack(record)
        return Triangle(
            normal=Vector3(*values[0:3]),
            vertices=(
                Vector3(*values[3:6]),
                Vector3(*values[6:9]),
                Vector3(*values[9:12]),
            ),
        )

    def _on_exhausted(self) -> None:
        logger.debug("binary_stl_exhausted", triangle_count=self.count)


def write_stl(sink: BinaryIO, triangles: Iterable[Triangle]) -> int:
    """Write triangles to ``sink`` as binary STL.

    The header is written as zeros and every attribute field as 0.

    Args:
        sink: Writable binary sink
        triangles: Sized collection of triangles; its length becomes the count field

    Returns:
        Number of triangles written

    Raises:
        TypeError: If ``triangles`` does not know its length up front
        EncodeError: If ``triangles`` yields a different number of items than its length
        OSError: If the sink fails; bytes already written are left in place
    """
    if not isinstance(triangles, Sized):
        raise TypeError(
            f"write_stl needs a sized collection of triangles, got {type(triangles).__name__}"
        )
    count = len(triangles)

    with TriangleOperationLog(logger, "stl_write", declared_count=count) as operation:
        sink.write(bytes(HEADER_SIZE))
        sink.write(COUNT.pack(count))
        written = 0
        for triangle in triangles:
            if written == count:
                raise EncodeError(
                    f"Triangle sequence yielded more than the {count} triangles it reported",
                    details={"expected": count},
                )
            sink.write(RECORD.pack(*triangle.normal, *_flatten(triangle), 0))
            written += 1
            operation.count()
        if written != count:
            raise EncodeError(
                f"Triangle sequence yielded {written} triangles but reported {count}",
                details={"expected": count, "written": written},
            )
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    return written


def _flatten(triangle: Triangle) -> list:
    return [c for vertex in triangle.vertices for c in vertex]
