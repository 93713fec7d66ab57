"""Shared test fixtures and configuration."""

import io
from typing import Callable, List, Sequence

import pytest

from stlcodec.formats import write_stl
from stlcodec.geometry import Triangle, Vector3


def make_triangle(normal: Sequence[float], *vertices: Sequence[float]) -> Triangle:
    """Build a Triangle from plain coordinate tuples."""
    return Triangle(
        normal=Vector3(*normal),
        vertices=tuple(Vector3(*v) for v in vertices),
    )


# Unit tetrahedron corners
A = (0.0, 0.0, 0.0)
B = (1.0, 0.0, 0.0)
C = (0.0, 1.0, 0.0)
D = (0.0, 0.0, 1.0)


@pytest.fixture
def triangle_factory() -> Callable[..., Triangle]:
    """Expose make_triangle to tests."""
    return make_triangle


@pytest.fixture
def tetrahedron() -> List[Triangle]:
    """Closed tetrahedron with outward, consistent winding."""
    return [
        make_triangle((0, 0, -1), A, C, B),
        make_triangle((0, -1, 0), A, B, D),
        make_triangle((-1, 0, 0), A, D, C),
        make_triangle((0.57735, 0.57735, 0.57735), B, C, D),
    ]


@pytest.fixture
def binary_stl(tetrahedron: List[Triangle]) -> bytes:
    """Binary STL encoding of the tetrahedron."""
    sink = io.BytesIO()
    write_stl(sink, tetrahedron)
    return sink.getvalue()


@pytest.fixture
def make_ascii_stl() -> Callable[..., bytes]:
    """Render triangles as ASCII STL text."""

    def render(triangles: Sequence[Triangle], name: str = "test") -> bytes:
        lines = [f"solid {name}"]
        for t in triangles:
            lines.append("  facet normal {!r} {!r} {!r}".format(*t.normal))
            lines.append("    outer loop")
            for v in t.vertices:
                lines.append("      vertex {!r} {!r} {!r}".format(*v))
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append(f"endsolid {name}")
        return ("\n".join(lines) + "\n").encode("ascii")

    return render


@pytest.fixture
def ascii_stl(make_ascii_stl, tetrahedron: List[Triangle]) -> bytes:
    """ASCII STL encoding of the tetrahedron."""
    return make_ascii_stl(tetrahedron)


# Markers for different test categories
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 1 second"
    )
