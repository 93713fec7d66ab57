"""Folding of a triangle stream into an indexed mesh."""

import operator
from typing import Dict, Iterable, List

from tqdm import tqdm

from stlcodec.geometry import IndexedMesh, IndexedTriangle, Triangle, Vector3, VertexKey
from stlcodec.utils.logging import TriangleOperationLog, get_logger, log_mesh_summary

logger = get_logger(__name__)


def index_triangles(
    triangles: Iterable[Triangle],
    show_progress: bool = False,
) -> IndexedMesh:
    """Consume ``triangles`` and build an indexed mesh.

    Vertices are deduplicated by exact bit pattern (``VertexKey``), not by
    the approximate ``Vector3`` equality: ``0.0`` and ``-0.0`` stay separate
    vertices. Distinct vertices keep their first-occurrence order and faces
    keep arrival order.

    Args:
        triangles: Finite triangle stream
        show_progress: Whether to show a progress bar

    Returns:
        Indexed mesh

    Raises:
        DecodeError: Propagated from the stream; no partial mesh is returned
    """
    vertices: List[Vector3] = []
    faces: List[IndexedTriangle] = []
    vertex_to_index: Dict[VertexKey, int] = {}

    # Only sizes the progress bar, a binary count field may be bogus
    total = operator.length_hint(triangles) or None

    with TriangleOperationLog(logger, "stl_index") as operation, tqdm(
        triangles,
        total=total,
        desc="Indexing STL",
        disable=not show_progress,
        unit="triangles",
    ) as progress:
        for triangle in progress:
            indices = []
            for vertex in triangle.vertices:
                key = vertex.key()
                index = vertex_to_index.get(key)
                if index is None:
                    index = len(vertices)
                    vertex_to_index[key] = index
                    vertices.append(vertex)
                indices.append(index)
            faces.append(IndexedTriangle(normal=triangle.normal, vertices=tuple(indices)))
            operation.count()

    mesh = IndexedMesh(vertices=vertices, faces=faces)
    log_mesh_summary(logger, mesh)
    return mesh
