"""Common geometric helpers shared by the mesh builder and the codecs."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]

ZERO_VEC3: Vec3 = (0.0, 0.0, 0.0)


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point-like sequence as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def triangle_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3:
    """Return the unit normal of a triangle.

    The normal follows the right-hand rule on ``(v1 - v0) x (v2 - v0)``.
    A degenerate triangle (zero-length cross product) yields the zero
    vector instead of raising.
    """

    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    nx = ay * bz - az * by
    ny = az * bx - ax * bz
    nz = ax * by - ay * bx
    length = (nx * nx + ny * ny + nz * nz) ** 0.5
    if length == 0.0:
        return ZERO_VEC3
    return (nx / length, ny / length, nz / length)


def triangle_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Return flat per-triangle unit normals for an indexed mesh.

    ``vertices`` holds interleaved ``x, y, z`` coordinates and
    ``triangles`` interleaved vertex indices, three per triangle.  The
    result is a flat ``float64`` array with three entries per triangle;
    degenerate triangles get ``(0, 0, 0)``.
    """

    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    if len(tris) == 0:
        return np.zeros(0, dtype=np.float64)
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)

    v0 = verts[tris[:, 0]]
    edge1 = verts[tris[:, 1]] - v0
    edge2 = verts[tris[:, 2]] - v0
    normals = np.cross(edge1, edge2)
    lengths = np.linalg.norm(normals, axis=1)

    nonzero = lengths > 0.0
    normals[nonzero] /= lengths[nonzero, np.newaxis]
    normals[~nonzero] = 0.0
    return normals.reshape(-1)


def axis_extents(points: np.ndarray) -> Vec3:
    """Return the axis-aligned bounding box size of a set of XYZ points."""

    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(pts) == 0:
        return ZERO_VEC3
    size = pts.max(axis=0) - pts.min(axis=0)
    return float(size[0]), float(size[1]), float(size[2])


__all__ = [
    "Vec3",
    "ZERO_VEC3",
    "to_vec3",
    "triangle_normal",
    "triangle_normals",
    "axis_extents",
]
