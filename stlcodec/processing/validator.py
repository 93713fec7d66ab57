"""Manifold validation of indexed meshes."""

from typing import Dict, Optional, Tuple

import numpy as np

from stlcodec.core.config import ValidationConfig
from stlcodec.core.exceptions import (
    DegenerateFaceError,
    MeshValidationError,
    UnmatchedEdgeError,
)
from stlcodec.geometry import IndexedMesh
from stlcodec.geometry.primitives import face_areas
from stlcodec.utils.logging import get_logger

logger = get_logger(__name__)

# (from vertex, to vertex) -> (face index, local start, local end)
EdgeMap = Dict[Tuple[int, int], Tuple[int, int, int]]


class MeshValidator:
    """Checks that a mesh is a closed, consistently oriented, non-degenerate manifold."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        """Initialize validator.

        Args:
            config: Validation configuration
        """
        self.config = config or ValidationConfig()

    def validate(self, mesh: IndexedMesh) -> None:
        """Validate ``mesh`` without modifying it.

        Every face contributes its directed edges ``v0->v1``, ``v1->v2`` and
        ``v2->v0``. An edge whose reverse is already waiting is matched and
        removed, anything left over at the end is a hole or a winding flip.
        When several edges are left, which one is reported is unspecified.

        Args:
            mesh: Indexed mesh to check

        Raises:
            DegenerateFaceError: For the first face whose area is below the threshold
            UnmatchedEdgeError: For one directed edge without an opposite partner
        """
        areas = face_areas(mesh.vertex_array(), mesh.face_array())
        degenerate = np.flatnonzero(areas < self.config.area_epsilon)
        if len(degenerate) > 0:
            face_index = int(degenerate[0])
            logger.info("mesh_degenerate_face", face_index=face_index)
            raise DegenerateFaceError(face_index, float(areas[face_index]))

        unconnected = self._unmatched_edges(mesh)
        if unconnected:
            face_index, start, end = next(iter(unconnected.values()))
            logger.info(
                "mesh_unmatched_edges",
                unmatched_edges=len(unconnected),
                face_index=face_index,
            )
            raise UnmatchedEdgeError(face_index, start, end, remaining=len(unconnected))

        logger.debug("mesh_valid", face_count=len(mesh.faces))

    def is_valid(self, mesh: IndexedMesh) -> bool:
        """Return whether ``mesh`` passes ``validate``."""
        try:
            self.validate(mesh)
        except MeshValidationError:
            return False
        return True

    @staticmethod
    def _unmatched_edges(mesh: IndexedMesh) -> EdgeMap:
        unconnected: EdgeMap = {}
        for fi, face in enumerate(mesh.faces):
            for i in range(3):
                j = (i + 1) % 3
                u = face.vertices[i]
                v = face.vertices[j]
                if (v, u) in unconnected:
                    del unconnected[(v, u)]
                else:
                    unconnected[(u, v)] = (fi, i, j)
        return unconnected


def validate_mesh(mesh: IndexedMesh, config: Optional[ValidationConfig] = None) -> None:
    """Convenience function to validate an indexed mesh.

    Raises:
        MeshValidationError: If the mesh is not a closed, oriented manifold
    """
    MeshValidator(config).validate(mesh)
