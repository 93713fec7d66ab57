"""Integration tests on trimesh-generated geometry."""

import io
from typing import List

import numpy as np
import pytest
import trimesh

from stlcodec.core.exceptions import UnmatchedEdgeError
from stlcodec.formats import read_stl, write_stl
from stlcodec.geometry import Triangle, Vector3
from stlcodec.processing import MeshValidator, validate_mesh


def _triangles(mesh: trimesh.Trimesh) -> List[Triangle]:
    return [
        Triangle(
            normal=Vector3(*normal),
            vertices=tuple(Vector3(*corner) for corner in corners),
        )
        for normal, corners in zip(mesh.face_normals, mesh.triangles)
    ]


def _encode(triangles: List[Triangle]) -> io.BytesIO:
    sink = io.BytesIO()
    write_stl(sink, triangles)
    sink.seek(0)
    return sink


@pytest.fixture(
    params=[
        lambda: trimesh.creation.box(extents=[1, 1, 1]),
        lambda: trimesh.creation.box(extents=[2.5, 0.75, 4.0]),
        lambda: trimesh.creation.icosphere(subdivisions=2),
    ],
    ids=["cube", "box", "icosphere"],
)
def closed_mesh(request) -> trimesh.Trimesh:
    """Closed, outward-wound meshes."""
    return request.param()


@pytest.mark.integration
class TestTrimeshMeshes:
    """Cross-check decoding, indexing and validation against trimesh."""

    def test_binary_round_trip_recovers_topology(self, closed_mesh: trimesh.Trimesh):
        """Test that indexing rebuilds trimesh's shared vertices."""
        mesh = read_stl(_encode(_triangles(closed_mesh)))

        assert len(mesh.faces) == len(closed_mesh.faces)
        assert len(mesh.vertices) == len(closed_mesh.vertices)
        np.testing.assert_allclose(
            mesh.vertex_array()[mesh.face_array()],
            closed_mesh.triangles,
            atol=1e-6,
        )

    def test_closed_meshes_validate(self, closed_mesh: trimesh.Trimesh):
        """Test that watertight, consistently wound meshes pass."""
        mesh = read_stl(_encode(_triangles(closed_mesh)))

        validate_mesh(mesh)

        rebuilt = trimesh.Trimesh(
            vertices=mesh.vertex_array(), faces=mesh.face_array(), process=False
        )
        assert rebuilt.is_watertight
        assert rebuilt.is_winding_consistent

    def test_removed_face_agrees_with_trimesh(self, closed_mesh: trimesh.Trimesh):
        """Test that a hole is reported by both validators."""
        triangles = _triangles(closed_mesh)[1:]
        mesh = read_stl(_encode(triangles))

        with pytest.raises(UnmatchedEdgeError) as exc_info:
            validate_mesh(mesh)

        assert exc_info.value.details["unmatched_edges"] == 3
        rebuilt = trimesh.Trimesh(
            vertices=mesh.vertex_array(), faces=mesh.face_array(), process=False
        )
        assert not rebuilt.is_watertight

    def test_inverted_face_rejected(self, closed_mesh: trimesh.Trimesh):
        """Test that flipping one face breaks orientation."""
        triangles = _triangles(closed_mesh)
        first = triangles[0]
        triangles[0] = Triangle(normal=first.normal, vertices=first.vertices[::-1])

        mesh = read_stl(_encode(triangles))

        assert not MeshValidator().is_valid(mesh)

    def test_triangles_re_encode_identically(self, closed_mesh: trimesh.Trimesh):
        """Test that an indexed mesh encodes back to the same bytes."""
        source = _encode(_triangles(closed_mesh))
        original = source.getvalue()

        mesh = read_stl(source)

        assert _encode(mesh.triangles()).getvalue() == original
