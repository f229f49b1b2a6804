"""In-memory description of an already decoded 3D asset.

File decoding happens elsewhere; whatever loader is used fills these
containers and hands them to :func:`shapeops.mesh_builder.create_mesh_from_asset`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np


def _identity() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


@dataclass
class AssetMesh:
    """Vertex list plus faces of one mesh inside an asset.

    Faces are index sequences into ``vertices``; only faces with exactly
    three indices are used when the asset is flattened.
    """

    vertices: Sequence[Sequence[float]] = field(default_factory=list)
    faces: Sequence[Sequence[int]] = field(default_factory=list)


@dataclass
class AssetNode:
    """Node of the asset hierarchy.

    ``transform`` is the 4x4 homogeneous matrix relative to the parent
    node and ``meshes`` indexes into :attr:`AssetScene.meshes`.
    """

    transform: np.ndarray = field(default_factory=_identity)
    meshes: List[int] = field(default_factory=list)
    children: List["AssetNode"] = field(default_factory=list)

    def __post_init__(self):
        self.transform = np.asarray(self.transform, dtype=np.float64)
        if self.transform.shape != (4, 4):
            raise ValueError(f"node transform must be 4x4, got {self.transform.shape}")


@dataclass
class AssetScene:
    meshes: List[AssetMesh] = field(default_factory=list)
    root: AssetNode = field(default_factory=AssetNode)

    def has_meshes(self) -> bool:
        return bool(self.meshes)


__all__ = ["AssetMesh", "AssetNode", "AssetScene"]
