"""Geometric primitives shared by the decoders, indexer, validator and encoder."""

import math
import struct
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

# Per-component tolerance for approximate Vector3 equality
DEFAULT_EPSILON = 1e-6

_FLOAT32 = struct.Struct("<f")
_VERTEX_BITS = struct.Struct("<3f")
_VERTEX_WORDS = struct.Struct("<3I")


def to_float32(value: float) -> float:
    """Round a number to the nearest single-precision value.

    Values beyond the float32 range become infinite.
    """
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


@dataclass(frozen=True, eq=False)
class Vector3:
    """A point or direction with three single-precision components.

    Equality is approximate (see ``DEFAULT_EPSILON``), which is why vectors
    are unhashable. Use ``key()`` when exact identity is needed.
    """

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            object.__setattr__(self, name, to_float32(getattr(self, name)))

    @classmethod
    def from_iterable(cls, values) -> "Vector3":
        x, y, z = values
        return cls(x, y, z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return all(abs(a - b) < DEFAULT_EPSILON for a, b in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def key(self) -> "VertexKey":
        """Exact bit-pattern identity of this vector."""
        return VertexKey.from_vector(self)

    def to_array(self) -> np.ndarray:
        return np.array((self.x, self.y, self.z), dtype=np.float32)


@dataclass(frozen=True)
class VertexKey:
    """Hashable exact identity of a vertex: the IEEE-754 bits of its components.

    Two vertices share a key only when all three components are bit-identical,
    so ``0.0`` and ``-0.0`` are distinct keys.
    """

    bits: Tuple[int, int, int]

    @classmethod
    def from_vector(cls, vector: Vector3) -> "VertexKey":
        return cls(_VERTEX_WORDS.unpack(_VERTEX_BITS.pack(vector.x, vector.y, vector.z)))


@dataclass(frozen=True)
class Triangle:
    """Unindexed triangle: a normal and three vertices."""

    normal: Vector3
    vertices: Tuple[Vector3, Vector3, Vector3]

    # Vector3 components compare approximately
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) != 3:
            raise ValueError(f"Triangle needs exactly 3 vertices, got {len(vertices)}")
        object.__setattr__(self, "vertices", vertices)

    def area(self) -> float:
        return triangle_area(*self.vertices)


@dataclass(frozen=True)
class IndexedTriangle:
    """Triangle whose vertices are indices into an ``IndexedMesh`` vertex list."""

    normal: Vector3
    vertices: Tuple[int, int, int]

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) != 3:
            raise ValueError(f"IndexedTriangle needs exactly 3 indices, got {len(vertices)}")
        object.__setattr__(self, "vertices", vertices)


@dataclass(frozen=True)
class IndexedMesh:
    """Deduplicated vertex list plus faces referencing it.

    Built once by the indexer and never mutated afterwards.
    """

    vertices: Tuple[Vector3, ...]
    faces: Tuple[IndexedTriangle, ...]

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "faces", tuple(self.faces))

    def vertex_array(self) -> np.ndarray:
        """Vertices as a ``(V, 3)`` float32 array."""
        return np.array([tuple(v) for v in self.vertices], dtype=np.float32).reshape(-1, 3)

    def face_array(self) -> np.ndarray:
        """Face vertex indices as a ``(F, 3)`` int64 array."""
        return np.array([f.vertices for f in self.faces], dtype=np.int64).reshape(-1, 3)

    def triangles(self) -> List[Triangle]:
        """Expand the faces back into unindexed triangles, in face order."""
        return [
            Triangle(
                normal=face.normal,
                vertices=tuple(self.vertices[i] for i in face.vertices),
            )
            for face in self.faces
        ]


def triangle_area(a: Vector3, b: Vector3, c: Vector3) -> float:
    """Area of triangle ``abc`` as ``|(c - b) x (a - b)| / 2`` in float32."""
    a, b, c = (v.to_array() for v in (a, b, c))
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.linalg.norm(np.cross(c - b, a - b)) * np.float32(0.5))


def face_areas(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Vectorized ``triangle_area`` over a ``(V, 3)`` vertex and ``(F, 3)`` face array."""
    if len(faces) == 0:
        return np.zeros(0, dtype=np.float32)
    a = vertices[faces[:, 0]]
    b = vertices[faces[:, 1]]
    c = vertices[faces[:, 2]]
    with np.errstate(over="ignore", invalid="ignore"):
        return np.linalg.norm(np.cross(c - b, a - b), axis=1) * np.float32(0.5)
