"""Base class for lazily decoded STL triangle streams."""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional

from stlcodec.geometry import IndexedMesh, Triangle


class TriangleStream(ABC, Iterator[Triangle]):
    """Finite, non-restartable sequence of triangles pulled from a byte source.

    The source is borrowed: the stream never closes it. Once the stream is
    exhausted or a decode error has been raised, further ``next()`` calls
    raise ``StopIteration``.
    """

    def __init__(self, source: BinaryIO):
        self.source = source
        self._finished = False

    def __iter__(self) -> "TriangleStream":
        return self

    def __next__(self) -> Triangle:
        if self._finished:
            raise StopIteration
        try:
            triangle = self._next_triangle()
        except Exception:
            self._finished = True
            raise
        if triangle is None:
            self._finished = True
            self._on_exhausted()
            raise StopIteration
        return triangle

    @abstractmethod
    def _next_triangle(self) -> Optional[Triangle]:
        """Decode the next triangle, or return None at the end of the stream.

        Raises:
            DecodeError: If the input is truncated or malformed
        """
        pass

    def _on_exhausted(self) -> None:
        """Hook called once when the stream ends normally."""
        pass

    def as_indexed_mesh(self, show_progress: bool = False) -> IndexedMesh:
        """Consume the stream and fold it into an indexed mesh.

        Args:
            show_progress: Whether to show a progress bar

        Returns:
            Indexed mesh built from every remaining triangle
        """
        from stlcodec.processing.indexer import index_triangles

        return index_triangles(self, show_progress=show_progress)


def read_exact(source: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, retrying short reads until EOF."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = source.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)
