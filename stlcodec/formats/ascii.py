"""ASCII STL decoding.

Grammar, one statement per line, tokens separated by whitespace::

    solid <name>
    facet normal <f32> <f32> <f32>
      outer loop
        vertex <f32> <f32> <f32>   (three times)
      endloop
    endfacet                       (facet blocks repeat)
    endsolid <name>
"""

import math
from typing import BinaryIO, Iterator, List, Optional, Sequence

from stlcodec.core.exceptions import (
    InvalidNumericError,
    MalformedStructureError,
    TruncatedInputError,
)
from stlcodec.formats.base import TriangleStream
from stlcodec.geometry import Triangle, Vector3, to_float32
from stlcodec.utils.logging import get_logger

logger = get_logger(__name__)

SOLID_PREFIX = "solid "


class AsciiStlReader(TriangleStream):
    """Pull-based decoder for ASCII STL."""

    def __init__(self, source: BinaryIO):
        """Read and check the ``solid`` line.

        Args:
            source: Readable binary source positioned at the start of the STL text

        Raises:
            TruncatedInputError: If the source is empty
            MalformedStructureError: If the first line does not start with "solid "
        """
        super().__init__(source)
        first = source.readline()
        if not first:
            raise TruncatedInputError("'solid <name>' (empty file?)")
        line = _decode(first).rstrip("\r\n")
        if not line.startswith(SOLID_PREFIX):
            raise MalformedStructureError("ascii STL to start with 'solid '", line)
        self.name = line[len(SOLID_PREFIX):].strip()
        self.triangle_count = 0
        self._lines = self._token_lines()

    def _token_lines(self) -> Iterator[List[str]]:
        for raw in iter(self.source.readline, b""):
            tokens = _decode(raw).split()
            if tokens:
                yield tokens

    def _next_triangle(self) -> Optional[Triangle]:
        header = self._next_line("'facet normal' or 'endsolid'")
        if header[0] == "endsolid":
            return None
        if len(header) != 5 or header[0] != "facet" or header[1] != "normal":
            raise MalformedStructureError(
                "'facet normal <f32> <f32> <f32>'", " ".join(header)
            )
        normal = Vector3(*_parse_numbers(header[2:5]))

        self._expect("outer", "loop")
        vertices = []
        for _ in range(3):
            line = self._next_line("'vertex <f32> <f32> <f32>'")
            if len(line) != 4 or line[0] != "vertex":
                raise MalformedStructureError(
                    "'vertex <f32> <f32> <f32>'", " ".join(line)
                )
            vertices.append(Vector3(*_parse_numbers(line[1:4])))
        self._expect("endloop")
        self._expect("endfacet")

        self.triangle_count += 1
        return Triangle(normal=normal, vertices=tuple(vertices))

    def _on_exhausted(self) -> None:
        logger.debug(
            "ascii_stl_exhausted", solid=self.name, triangle_count=self.triangle_count
        )

    def _next_line(self, expected: str) -> List[str]:
        line = next(self._lines, None)
        if line is None:
            raise TruncatedInputError(
                expected, details={"triangles_read": self.triangle_count}
            )
        return line

    def _expect(self, *expected: str) -> None:
        wanted = " ".join(expected)
        line = self._next_line(f"'{wanted}'")
        if line != list(expected):
            raise MalformedStructureError(f"'{wanted}'", " ".join(line))


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedStructureError("UTF-8 text", raw[:80]) from e


def _parse_numbers(tokens: Sequence[str]) -> List[float]:
    return [parse_float32(token) for token in tokens]


def parse_float32(token: str) -> float:
    """Parse a numeric token into a finite float32 value.

    Raises:
        InvalidNumericError: If the token is not a number or not finite as float32
    """
    # float() also accepts digit separators, which STL does not
    if "_" in token:
        raise InvalidNumericError(token, "not a valid float")
    try:
        value = to_float32(float(token))
    except ValueError as e:
        raise InvalidNumericError(token, "not a valid float") from e
    if not math.isfinite(value):
        raise InvalidNumericError(token, "expected a finite float32")
    return value
