"""Tagged message forms of shapes used at the interchange boundary.

A :data:`ShapeMsg` is one of :class:`SolidPrimitive`, :class:`PlaneMsg` or
:class:`MeshMsg`.  The primitive kinds keep their dimensions in a flat
list; the offset of each dimension within that list is fixed per kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple, Union

Point = Tuple[float, float, float]


class PrimitiveType(IntEnum):
    """Kinds of solid primitive carried by :class:`SolidPrimitive`."""

    BOX = 1
    SPHERE = 2
    CYLINDER = 3
    CONE = 4


# offsets into SolidPrimitive.dimensions
BOX_X = 0
BOX_Y = 1
BOX_Z = 2

SPHERE_RADIUS = 0

CYLINDER_RADIUS = 0
CYLINDER_HEIGHT = 1

CONE_RADIUS = 0
CONE_HEIGHT = 1

PRIMITIVE_DIM_COUNT: Dict[PrimitiveType, int] = {
    PrimitiveType.BOX: 3,
    PrimitiveType.SPHERE: 1,
    PrimitiveType.CYLINDER: 2,
    PrimitiveType.CONE: 2,
}


@dataclass
class SolidPrimitive:
    """Primitive solid described by its kind and dimension list."""

    type: PrimitiveType
    dimensions: List[float] = field(default_factory=list)


@dataclass
class PlaneMsg:
    """Plane given by the four coefficients of ``a*x + b*y + c*z + d = 0``."""

    coef: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)


@dataclass
class MeshTriangle:
    vertex_indices: Tuple[int, int, int] = (0, 0, 0)


@dataclass
class MeshMsg:
    """Indexed mesh given as a list of points and a list of index triples."""

    vertices: List[Point] = field(default_factory=list)
    triangles: List[MeshTriangle] = field(default_factory=list)


ShapeMsg = Union[SolidPrimitive, PlaneMsg, MeshMsg]


__all__ = [
    "Point",
    "PrimitiveType",
    "BOX_X",
    "BOX_Y",
    "BOX_Z",
    "SPHERE_RADIUS",
    "CYLINDER_RADIUS",
    "CYLINDER_HEIGHT",
    "CONE_RADIUS",
    "CONE_HEIGHT",
    "PRIMITIVE_DIM_COUNT",
    "SolidPrimitive",
    "PlaneMsg",
    "MeshTriangle",
    "MeshMsg",
    "ShapeMsg",
]
