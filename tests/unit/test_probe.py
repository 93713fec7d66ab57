"""Unit tests for format probing and reader selection."""

import io
import struct

import pytest

from stlcodec.core.config import CodecConfig, DecodeConfig
from stlcodec.core.exceptions import TruncatedInputError
from stlcodec.formats import (
    AsciiStlReader,
    BinaryStlReader,
    StlFormat,
    create_stl_reader,
    probe_format,
    read_stl,
)


def _solid_header_binary() -> bytes:
    """Binary STL with one triangle whose header starts with 'solid '."""
    header = b"solid fake".ljust(80, b" ")
    record = struct.pack("<12fH", 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0)
    return header + struct.pack("<I", 1) + record


def _text_like_binary() -> bytes:
    """Binary STL with a "solid " header whose bytes all decode as UTF-8."""
    header = b"solid fake".ljust(80, b" ")
    return header + struct.pack("<I", 1) + bytes(50)


class FailingReadline(io.BytesIO):
    """Source whose first line cannot be read."""

    def readline(self, size=-1):
        raise OSError("device not ready")


class TestProbeFormat:
    """Test format detection."""

    def test_ascii(self, ascii_stl: bytes):
        source = io.BytesIO(ascii_stl)

        assert probe_format(source) is StlFormat.ASCII
        assert source.tell() == 0

    def test_binary(self, binary_stl: bytes):
        source = io.BytesIO(binary_stl)

        assert probe_format(source) is StlFormat.BINARY
        assert source.tell() == 0

    @pytest.mark.parametrize("data", [b"", b"sol", b"solid", b"solid\n", b"Solid x\n", b" solid x\n"])
    def test_prefix_must_match_exactly(self, data: bytes):
        """Test that anything but a leading 'solid ' counts as binary."""
        assert probe_format(io.BytesIO(data)) is StlFormat.BINARY

    def test_prefix_without_newline(self):
        """Test a first line that ends at end of input."""
        assert probe_format(io.BytesIO(b"solid x")) is StlFormat.ASCII

    def test_restores_non_zero_start(self, ascii_stl: bytes):
        """Test that the entry position, not byte 0, is restored."""
        source = io.BytesIO(b"JUNK" + ascii_stl)
        source.seek(4)

        assert probe_format(source) is StlFormat.ASCII
        assert source.tell() == 4

    def test_read_failure_counts_as_binary(self, binary_stl: bytes):
        """Test that a failing first read still seeks back."""
        source = FailingReadline(binary_stl)
        source.seek(0)

        assert probe_format(source) is StlFormat.BINARY
        assert source.tell() == 0

    def test_long_first_line_is_bounded(self):
        """Test that probing reads at most the configured number of bytes."""
        data = b"solid " + b"x" * 10_000
        source = io.BytesIO(data)

        assert probe_format(source, DecodeConfig(probe_line_limit=16)) is StlFormat.ASCII
        assert source.tell() == 0

    def test_solid_header_binary_is_binary(self):
        """Test that a "solid " header followed by float bytes counts as binary."""
        source = io.BytesIO(_solid_header_binary())

        assert probe_format(source) is StlFormat.BINARY
        assert source.tell() == 0

    def test_invalid_utf8_first_line(self):
        """Test that an undecodable first line counts as binary."""
        assert probe_format(io.BytesIO(b"solid \xff\xfe\n")) is StlFormat.BINARY

    def test_multibyte_character_cut_at_limit(self):
        """Test that a character split by the line limit is not a decode failure."""
        data = ("solid " + "\u00e9" * 20 + "\n").encode("utf-8")
        source = io.BytesIO(data)

        assert probe_format(source, DecodeConfig(probe_line_limit=7)) is StlFormat.ASCII
        assert source.tell() == 0

    def test_non_ascii_name(self):
        """Test a UTF-8 solid name."""
        data = ("solid pi\u00e8ce\nendsolid\n").encode("utf-8")

        assert probe_format(io.BytesIO(data)) is StlFormat.ASCII

    def test_text_like_binary_is_ascii_by_default(self):
        """Test that a binary body made of valid UTF-8 bytes is still taken for text."""
        source = io.BytesIO(_text_like_binary())

        assert probe_format(source) is StlFormat.ASCII
        assert source.tell() == 0

    def test_solid_header_binary_with_size_check(self):
        """Test the optional size check for text-like binary files."""
        source = io.BytesIO(_text_like_binary())

        fmt = probe_format(source, DecodeConfig(check_binary_size=True))

        assert fmt is StlFormat.BINARY
        assert source.tell() == 0

    def test_size_check_keeps_real_ascii(self, ascii_stl: bytes):
        """Test that the size check does not misfire on ASCII input."""
        source = io.BytesIO(ascii_stl)

        assert probe_format(source, DecodeConfig(check_binary_size=True)) is StlFormat.ASCII
        assert source.tell() == 0


class TestCreateStlReader:
    """Test reader selection."""

    def test_selects_ascii(self, ascii_stl: bytes, tetrahedron):
        reader = create_stl_reader(io.BytesIO(ascii_stl))

        assert isinstance(reader, AsciiStlReader)
        assert list(reader) == tetrahedron

    def test_selects_binary(self, binary_stl: bytes, tetrahedron):
        reader = create_stl_reader(io.BytesIO(binary_stl))

        assert isinstance(reader, BinaryStlReader)
        assert list(reader) == tetrahedron

    def test_solid_header_binary_reads_from_start(self):
        """Test that the chosen reader starts at byte 0 after probing."""
        data = _solid_header_binary()

        reader = create_stl_reader(io.BytesIO(data))

        assert isinstance(reader, BinaryStlReader)
        assert reader.header.startswith(b"solid fake")
        (triangle,) = list(reader)
        assert tuple(triangle.normal) == (0.0, 0.0, 1.0)

    def test_text_like_binary_with_size_check(self):
        """Test that the size check routes a text-like binary file to the binary reader."""
        data = _text_like_binary()

        with pytest.raises(TruncatedInputError):
            list(create_stl_reader(io.BytesIO(data)))

        config = CodecConfig(decode={"check_binary_size": True})
        (triangle,) = list(create_stl_reader(io.BytesIO(data), config))
        assert tuple(triangle.normal) == (0.0, 0.0, 0.0)

    def test_neither_format(self):
        """Test a source too short for binary and not ASCII."""
        with pytest.raises(TruncatedInputError):
            create_stl_reader(io.BytesIO(b"not an stl file"))


class TestReadStl:
    """Test the decode-and-index convenience function."""

    def test_ascii_and_binary_agree(self, ascii_stl: bytes, binary_stl: bytes):
        """Test dual-format equivalence on the tetrahedron."""
        from_ascii = read_stl(io.BytesIO(ascii_stl))
        from_binary = read_stl(io.BytesIO(binary_stl))

        assert len(from_ascii.vertices) == 4
        assert [f.vertices for f in from_ascii.faces] == [f.vertices for f in from_binary.faces]
        assert [v.key() for v in from_ascii.vertices] == [v.key() for v in from_binary.vertices]
        assert from_ascii == from_binary

    def test_show_progress(self, binary_stl: bytes):
        """Test indexing with the progress bar enabled."""
        config = CodecConfig(decode={"show_progress": True})

        mesh = read_stl(io.BytesIO(binary_stl), config)

        assert len(mesh.faces) == 4
