"""Construction of indexed triangle meshes.

Two entry points build a :class:`~shapeops.shapes.Mesh`:

* :func:`create_mesh_from_vertices` takes a vertex list and explicit
  triangle indices and copies them verbatim.
* :func:`create_mesh_from_soup` takes a flat stream of triangle corners,
  three per triangle, and merges corners with identical coordinates into
  shared vertices.

Vertices are merged only when all three coordinates compare equal; no
tolerance is applied, so nearly coincident points stay distinct.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from shapeops.asset import AssetNode, AssetScene
from shapeops.errors import MalformedInputError, ShapeError
from shapeops.geometry_utils import Vec3, to_vec3
from shapeops.shapes import Mesh

logger = logging.getLogger(__name__)


def _as_points(vertices) -> np.ndarray:
    pts = np.asarray(vertices, dtype=np.float64)
    if pts.size == 0:
        return np.zeros((0, 3), dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] < 3:
        raise MalformedInputError(f"vertices must be XYZ points, got array of shape {pts.shape}")
    return pts[:, :3]


def create_mesh_from_vertices(vertices: Sequence[Sequence[float]],
                              triangles: Sequence[int]) -> Mesh:
    """Build a mesh from a vertex list and flat triangle indices.

    Triangle ``k`` uses ``triangles[3k]``, ``triangles[3k+1]`` and
    ``triangles[3k+2]``; trailing indices that do not complete a
    triangle are ignored.  No deduplication is done and the indices are
    trusted: one that is past the end of ``vertices`` surfaces as an
    ``IndexError`` from the normal computation.
    """

    pts = _as_points(vertices)
    indices = np.asarray(triangles, dtype=np.int64).reshape(-1)
    nt = len(indices) // 3

    mesh = Mesh(len(pts), nt)
    mesh.vertices[:] = pts.reshape(-1)
    mesh.triangles[:] = indices[:3 * nt]
    mesh.compute_normals()
    return mesh


def _dedup_soup(source: Sequence[Sequence[float]]) -> Tuple[List[Vec3], List[int]]:
    """Merge identical corners of a triangle soup.

    Returns the unique vertices in order of first appearance and the
    triangle index list referring to them.
    """

    ids: Dict[Vec3, int] = {}
    vertices: List[Vec3] = []
    triangles: List[int] = []

    n = len(source) // 3
    for corner in range(3 * n):
        v = to_vec3(source[corner])
        index = ids.get(v)
        if index is None:
            index = len(vertices)
            ids[v] = index
            vertices.append(v)
        triangles.append(index)

    return vertices, triangles


def create_mesh_from_soup(source: Sequence[Sequence[float]], *,
                          log: Optional[logging.Logger] = None) -> Optional[Mesh]:
    """Build a mesh from consecutive triangle corners.

    Every three consecutive points of ``source`` form one triangle.
    Corners with bit-identical coordinates are collapsed into a single
    vertex; vertex ids are handed out in order of first appearance, so
    the same input always yields the same mesh.

    Returns ``None`` if ``source`` holds fewer than three points.  If its
    length is not a multiple of three a warning is logged and the
    incomplete trailing triangle is dropped.
    """

    log = log or logger
    if len(source) < 3:
        log.error("Cannot construct a mesh from %d vertices; at least 3 are needed", len(source))
        return None

    if len(source) % 3 != 0:
        log.warning("The number of vertices to construct a mesh from (%d) is not divisible by 3; "
                    "the trailing %d will be ignored", len(source), len(source) % 3)

    try:
        vertices, triangles = _dedup_soup(source)
    except ValueError as exc:
        log.error("Unable to construct mesh from vertices: %s", exc)
        return None

    log.debug("Merged %d corners into %d unique vertices", len(triangles), len(vertices))
    return create_mesh_from_vertices(vertices, triangles)


def _extract_mesh_data(scene: AssetScene, node: AssetNode, parent_transform: np.ndarray,
                       scale: np.ndarray, vertices: List[np.ndarray], triangles: List[int],
                       offset: int) -> int:
    transform = parent_transform @ node.transform
    rotation = transform[:3, :3]
    translation = transform[:3, 3]

    for mesh_index in node.meshes:
        try:
            amesh = scene.meshes[mesh_index]
        except IndexError:
            raise MalformedInputError(f"node references missing mesh {mesh_index}") from None
        pts = _as_points(amesh.vertices)
        vertices.append((pts @ rotation.T + translation) * scale)
        for face in amesh.faces:
            if len(face) != 3:
                continue
            for i in face:
                if not 0 <= int(i) < len(pts):
                    raise MalformedInputError(
                        f"mesh {mesh_index} face refers to vertex {i} of {len(pts)}")
                triangles.append(offset + int(i))
        offset += len(pts)

    for child in node.children:
        offset = _extract_mesh_data(scene, child, transform, scale, vertices, triangles, offset)
    return offset


def create_mesh_from_asset(scene: AssetScene, scale: Sequence[float] = (1.0, 1.0, 1.0),
                           name: str = "", *,
                           log: Optional[logging.Logger] = None) -> Optional[Mesh]:
    """Flatten a decoded asset into a single mesh.

    The node hierarchy is walked depth first, composing each node's
    transform with its parent's.  Vertices of every referenced mesh are
    transformed, multiplied per axis by ``scale`` and appended; faces with
    exactly three indices are appended with their indices shifted past
    the vertices collected before their mesh.  The result goes through
    :func:`create_mesh_from_vertices`, so vertices are not merged.

    Returns ``None`` (with a warning naming ``name``) if the scene has no
    meshes, no vertices or no triangles.
    """

    log = log or logger
    if not scene.has_meshes():
        log.warning("Scene %s has no meshes", name)
        return None

    factors = np.asarray(scale, dtype=np.float64).reshape(-1)
    if len(factors) != 3:
        log.error("Scale for scene %s must have 3 components, got %d", name, len(factors))
        return None

    vertices: List[np.ndarray] = []
    triangles: List[int] = []
    try:
        _extract_mesh_data(scene, scene.root, np.eye(4), factors, vertices, triangles, 0)
    except ShapeError as exc:
        log.error("Unable to flatten scene %s: %s", name, exc)
        return None

    points = np.concatenate(vertices) if vertices else np.zeros((0, 3))
    if len(points) == 0:
        log.warning("There are no vertices in the scene %s", name)
        return None
    if not triangles:
        log.warning("There are no triangles in the scene %s", name)
        return None

    return create_mesh_from_vertices(points, triangles)


__all__ = [
    "create_mesh_from_vertices",
    "create_mesh_from_soup",
    "create_mesh_from_asset",
]
