"""Shape variants understood by shapeops.

The set of variants is closed: :class:`Sphere`, :class:`Box`,
:class:`Cylinder`, :class:`Cone`, :class:`Plane`, :class:`Mesh` and the
opaque :class:`OcTree`.  Every variant carries its discriminant in the
``type`` class attribute and its text name in ``STRING_NAME``.

Shapes own their numbers outright.  Constructors check the invariants of
their variant and raise :class:`~shapeops.errors.MalformedInputError`
instead of returning a half-built object.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Sequence, Tuple

import numpy as np

from shapeops.errors import MalformedInputError
from shapeops.geometry_utils import triangle_normals


class ShapeType(Enum):
    """Discriminant of the shape variants."""

    SPHERE = "sphere"
    BOX = "box"
    CYLINDER = "cylinder"
    CONE = "cone"
    PLANE = "plane"
    MESH = "mesh"
    OCTREE = "octree"


def _non_negative(name: str, value: float) -> float:
    value = float(value)
    # also rejects NaN
    if not value >= 0.0:
        raise MalformedInputError(f"{name} must be non-negative, got {value!r}")
    return value


def _count(name: str, value: int) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise MalformedInputError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 0 or value > 0xFFFFFFFF:
        raise MalformedInputError(f"{name} out of range: {value}")
    return value


class Shape:
    """Common base of every shape variant."""

    type: ClassVar[ShapeType]
    STRING_NAME: ClassVar[str]

    def clone(self) -> "Shape":
        """Return an independent copy of this shape."""
        return copy.deepcopy(self)


@dataclass
class Sphere(Shape):
    """Sphere centered at the origin."""

    radius: float = 0.0

    type: ClassVar[ShapeType] = ShapeType.SPHERE
    STRING_NAME: ClassVar[str] = "sphere"

    def __post_init__(self):
        self.radius = _non_negative("radius", self.radius)


@dataclass
class Box(Shape):
    """Axis-aligned box centered at the origin.

    ``size`` holds the three box dimensions along x, y and z.
    """

    size: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    type: ClassVar[ShapeType] = ShapeType.BOX
    STRING_NAME: ClassVar[str] = "box"

    def __post_init__(self):
        if len(self.size) != 3:
            raise MalformedInputError(f"box needs 3 dimensions, got {len(self.size)}")
        self.size = tuple(_non_negative(axis, v) for axis, v in zip("xyz", self.size))


@dataclass
class Cylinder(Shape):
    """Cylinder along the z axis, centered at the origin."""

    radius: float = 0.0
    length: float = 0.0

    type: ClassVar[ShapeType] = ShapeType.CYLINDER
    STRING_NAME: ClassVar[str] = "cylinder"

    def __post_init__(self):
        self.radius = _non_negative("radius", self.radius)
        self.length = _non_negative("length", self.length)


@dataclass
class Cone(Shape):
    """Cone along the z axis, centered at the origin."""

    radius: float = 0.0
    length: float = 0.0

    type: ClassVar[ShapeType] = ShapeType.CONE
    STRING_NAME: ClassVar[str] = "cone"

    def __post_init__(self):
        self.radius = _non_negative("radius", self.radius)
        self.length = _non_negative("length", self.length)


@dataclass
class Plane(Shape):
    """Infinite plane ``a*x + b*y + c*z + d = 0``.

    The coefficients are stored as given; they are not normalised.
    """

    a: float = 0.0
    b: float = 0.0
    c: float = 1.0
    d: float = 0.0

    type: ClassVar[ShapeType] = ShapeType.PLANE
    STRING_NAME: ClassVar[str] = "plane"

    def __post_init__(self):
        self.a = float(self.a)
        self.b = float(self.b)
        self.c = float(self.c)
        self.d = float(self.d)

    @property
    def coef(self) -> Tuple[float, float, float, float]:
        return (self.a, self.b, self.c, self.d)


@dataclass
class OcTree(Shape):
    """Opaque volumetric occupancy structure.

    Only the type name is supported; no conversion handles this variant.
    """

    tree: Any = None

    type: ClassVar[ShapeType] = ShapeType.OCTREE
    STRING_NAME: ClassVar[str] = "octree"


class Mesh(Shape):
    """Indexed triangle mesh.

    ``vertices`` is a flat ``float64`` array of ``3 * vertex_count``
    interleaved coordinates, ``triangles`` a flat ``uint32`` array of
    ``3 * triangle_count`` vertex indices and ``normals`` a flat
    ``float64`` array holding one unit normal per triangle.  The arrays
    are allocated (zero filled) at construction and keep their length;
    their contents may be filled in afterwards, after which
    :meth:`compute_normals` must be called.
    """

    type: ClassVar[ShapeType] = ShapeType.MESH
    STRING_NAME: ClassVar[str] = "mesh"

    __hash__ = None  # mutable

    def __init__(self, vertex_count: int = 0, triangle_count: int = 0):
        self._vertex_count = _count("vertex_count", vertex_count)
        self._triangle_count = _count("triangle_count", triangle_count)
        self.vertices = np.zeros(3 * self._vertex_count, dtype=np.float64)
        self.triangles = np.zeros(3 * self._triangle_count, dtype=np.uint32)
        self.normals = np.zeros(3 * self._triangle_count, dtype=np.float64)

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    @property
    def triangle_count(self) -> int:
        return self._triangle_count

    def points(self) -> np.ndarray:
        """Return the vertices as an ``(vertex_count, 3)`` view."""
        return self.vertices.reshape(-1, 3)

    def faces(self) -> np.ndarray:
        """Return the triangles as a ``(triangle_count, 3)`` view."""
        return self.triangles.reshape(-1, 3)

    def compute_normals(self) -> None:
        """Recompute every triangle normal from the current geometry.

        Degenerate triangles receive a zero normal.  Indices are not
        checked; an index past ``vertex_count`` raises ``IndexError``.
        """
        self.normals[:] = triangle_normals(self.vertices, self.triangles)

    def clone(self) -> "Mesh":
        other = Mesh(self._vertex_count, self._triangle_count)
        other.vertices[:] = self.vertices
        other.triangles[:] = self.triangles
        other.normals[:] = self.normals
        return other

    def __eq__(self, other):
        if not isinstance(other, Mesh):
            return NotImplemented
        return (self._vertex_count == other._vertex_count
                and self._triangle_count == other._triangle_count
                and np.array_equal(self.vertices, other.vertices)
                and np.array_equal(self.triangles, other.triangles)
                and np.array_equal(self.normals, other.normals))

    def __repr__(self) -> str:
        return f"Mesh(vertex_count={self._vertex_count}, triangle_count={self._triangle_count})"


SHAPE_CLASSES: Sequence[type] = (Sphere, Box, Cylinder, Cone, Plane, Mesh, OcTree)


def is_shape(obj: Any) -> bool:
    """Return ``True`` if ``obj`` is an instance of a known shape variant."""
    return isinstance(obj, Shape) and isinstance(getattr(obj, "type", None), ShapeType)


__all__ = [
    "ShapeType",
    "Shape",
    "Sphere",
    "Box",
    "Cylinder",
    "Cone",
    "Plane",
    "Mesh",
    "OcTree",
    "SHAPE_CLASSES",
    "is_shape",
]
