"""Format detection and reader selection."""

import codecs
import os
from enum import Enum
from typing import BinaryIO, Optional

from stlcodec.core.config import CodecConfig, DecodeConfig
from stlcodec.formats.ascii import SOLID_PREFIX, AsciiStlReader
from stlcodec.formats.base import TriangleStream, read_exact
from stlcodec.formats.binary import COUNT, HEADER_SIZE, RECORD, BinaryStlReader
from stlcodec.geometry import IndexedMesh
from stlcodec.utils.logging import get_logger

logger = get_logger(__name__)

_PREFIX = SOLID_PREFIX.encode("ascii")


class StlFormat(str, Enum):
    """STL wire formats."""
    ASCII = "ascii"
    BINARY = "binary"


def probe_format(
    source: BinaryIO,
    config: Optional[DecodeConfig] = None,
) -> StlFormat:
    """Detect whether ``source`` holds ASCII or binary STL.

    The first line is inspected and the source is always returned to the
    position it had on entry, so either reader can start from there.

    Args:
        source: Readable, seekable binary source
        config: Decode configuration

    Returns:
        The detected format. Unreadable or short sources count as binary.
    """
    if config is None:
        config = DecodeConfig()

    start = source.tell()
    try:
        header = source.readline(config.probe_line_limit)
    except OSError as e:
        logger.debug("stl_probe_read_failed", error=str(e))
        header = b""
    finally:
        source.seek(start)

    fmt = StlFormat.ASCII if _is_text_line(header, config.probe_line_limit) else StlFormat.BINARY
    if fmt is StlFormat.ASCII and config.check_binary_size and _has_binary_size(source, start):
        fmt = StlFormat.BINARY

    logger.debug("stl_format_probed", format=fmt.value)
    return fmt


def _is_text_line(header: bytes, limit: int) -> bool:
    """Check for a UTF-8 first line starting with "solid ".

    Binary files often carry "solid " in their header, but the float bytes
    before the first newline are rarely valid UTF-8.
    """
    if not header.startswith(_PREFIX):
        return False
    # A line cut at the limit may end inside a multibyte character
    cut = len(header) >= limit and not header.endswith(b"\n")
    try:
        codecs.getincrementaldecoder("utf-8")().decode(header, final=not cut)
    except UnicodeDecodeError:
        logger.debug("stl_probe_not_text")
        return False
    return True


def _has_binary_size(source: BinaryIO, start: int) -> bool:
    """Check whether the source length matches the binary layout's declared count."""
    try:
        source.seek(start + HEADER_SIZE)
        count = read_exact(source, COUNT.size)
        end = source.seek(0, os.SEEK_END)
    finally:
        source.seek(start)
    if len(count) < COUNT.size:
        return False
    (triangle_count,) = COUNT.unpack(count)
    return end - start == HEADER_SIZE + COUNT.size + RECORD.size * triangle_count


def create_stl_reader(
    source: BinaryIO,
    config: Optional[CodecConfig] = None,
) -> TriangleStream:
    """Create a triangle stream for whichever STL format ``source`` contains.

    Args:
        source: Readable, seekable binary source
        config: Codec configuration

    Returns:
        ``AsciiStlReader`` or ``BinaryStlReader``

    Raises:
        DecodeError: If the chosen reader rejects the start of the input
    """
    if config is None:
        config = CodecConfig()

    if probe_format(source, config.decode) is StlFormat.ASCII:
        return AsciiStlReader(source)
    return BinaryStlReader(source)


def read_stl(
    source: BinaryIO,
    config: Optional[CodecConfig] = None,
) -> IndexedMesh:
    """Decode ASCII or binary STL from ``source`` into an indexed mesh.

    Args:
        source: Readable, seekable binary source
        config: Codec configuration

    Returns:
        Indexed mesh

    Raises:
        DecodeError: If the input is truncated or malformed
    """
    if config is None:
        config = CodecConfig()

    stream = create_stl_reader(source, config)
    return stream.as_indexed_mesh(show_progress=config.decode.show_progress)
