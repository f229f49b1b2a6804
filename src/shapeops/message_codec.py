"""Conversion between shapes and their tagged message form."""

from __future__ import annotations

import logging
from typing import Optional

from shapeops.errors import MalformedInputError, ShapeError, UnsupportedVariantError
from shapeops.geometry_utils import to_vec3
from shapeops.mesh_builder import create_mesh_from_vertices
from shapeops.messages import (
    BOX_X,
    BOX_Y,
    BOX_Z,
    CONE_HEIGHT,
    CONE_RADIUS,
    CYLINDER_HEIGHT,
    CYLINDER_RADIUS,
    PRIMITIVE_DIM_COUNT,
    SPHERE_RADIUS,
    MeshMsg,
    MeshTriangle,
    PlaneMsg,
    PrimitiveType,
    ShapeMsg,
    SolidPrimitive,
)
from shapeops.shapes import Box, Cone, Cylinder, Plane, Shape, ShapeType, Sphere

logger = logging.getLogger(__name__)


def _require_dims(msg: SolidPrimitive, *offsets: int) -> None:
    needed = max(offsets) + 1
    if len(msg.dimensions) < needed:
        raise MalformedInputError(
            f"primitive of type {int(msg.type)} needs {needed} dimensions, got {len(msg.dimensions)}")


def _shape_from_primitive(msg: SolidPrimitive) -> Shape:
    try:
        kind = PrimitiveType(msg.type)
    except ValueError:
        raise UnsupportedVariantError(f"unknown primitive type {msg.type!r}") from None

    dims = msg.dimensions
    if kind == PrimitiveType.SPHERE:
        _require_dims(msg, SPHERE_RADIUS)
        return Sphere(dims[SPHERE_RADIUS])
    elif kind == PrimitiveType.BOX:
        _require_dims(msg, BOX_X, BOX_Y, BOX_Z)
        return Box((dims[BOX_X], dims[BOX_Y], dims[BOX_Z]))
    elif kind == PrimitiveType.CYLINDER:
        _require_dims(msg, CYLINDER_RADIUS, CYLINDER_HEIGHT)
        return Cylinder(dims[CYLINDER_RADIUS], dims[CYLINDER_HEIGHT])
    elif kind == PrimitiveType.CONE:
        _require_dims(msg, CONE_RADIUS, CONE_HEIGHT)
        return Cone(dims[CONE_RADIUS], dims[CONE_HEIGHT])
    raise UnsupportedVariantError(f"unknown primitive type {msg.type!r}")


def _shape_from_plane(msg: PlaneMsg) -> Shape:
    if len(msg.coef) != 4:
        raise MalformedInputError(f"plane needs 4 coefficients, got {len(msg.coef)}")
    return Plane(*msg.coef)


def _shape_from_mesh(msg: MeshMsg) -> Shape:
    if not msg.vertices or not msg.triangles:
        raise MalformedInputError("mesh definition is empty")

    vertices = [to_vec3(v) for v in msg.vertices]
    triangles = []
    for tri in msg.triangles:
        indices = tri.vertex_indices
        if len(indices) != 3:
            raise MalformedInputError(f"mesh triangle needs 3 indices, got {len(indices)}")
        for i in indices:
            if not 0 <= i < len(vertices):
                raise MalformedInputError(
                    f"mesh triangle index {i} out of range for {len(vertices)} vertices")
        triangles.extend(indices)
    return create_mesh_from_vertices(vertices, triangles)


def shape_from_msg(msg: ShapeMsg) -> Shape:
    """Strict variant of :func:`construct_shape_from_msg`.

    Raises :class:`~shapeops.errors.ShapeError` instead of returning
    ``None``.
    """

    if isinstance(msg, SolidPrimitive):
        return _shape_from_primitive(msg)
    elif isinstance(msg, PlaneMsg):
        return _shape_from_plane(msg)
    elif isinstance(msg, MeshMsg):
        return _shape_from_mesh(msg)
    raise UnsupportedVariantError(f"unknown shape message {type(msg).__name__}")


def construct_shape_from_msg(msg: ShapeMsg, *,
                             log: Optional[logging.Logger] = None) -> Optional[Shape]:
    """Build the shape described by ``msg``.

    Primitives need at least as many dimensions as their kind uses and
    meshes need both vertices and triangles.  On failure the problem is
    logged and ``None`` is returned.
    """

    log = log or logger
    try:
        return shape_from_msg(msg)
    except ShapeError as exc:
        log.error("Unable to construct shape from message: %s", exc)
        return None


def msg_from_shape(shape: Shape) -> ShapeMsg:
    """Strict variant of :func:`construct_msg_from_shape`."""

    shape_type = getattr(shape, "type", None)
    if shape_type == ShapeType.SPHERE:
        msg = SolidPrimitive(type=PrimitiveType.SPHERE,
                             dimensions=[0.0] * PRIMITIVE_DIM_COUNT[PrimitiveType.SPHERE])
        msg.dimensions[SPHERE_RADIUS] = shape.radius
        return msg
    elif shape_type == ShapeType.BOX:
        msg = SolidPrimitive(type=PrimitiveType.BOX,
                             dimensions=[0.0] * PRIMITIVE_DIM_COUNT[PrimitiveType.BOX])
        msg.dimensions[BOX_X], msg.dimensions[BOX_Y], msg.dimensions[BOX_Z] = shape.size
        return msg
    elif shape_type == ShapeType.CYLINDER:
        msg = SolidPrimitive(type=PrimitiveType.CYLINDER,
                             dimensions=[0.0] * PRIMITIVE_DIM_COUNT[PrimitiveType.CYLINDER])
        msg.dimensions[CYLINDER_RADIUS] = shape.radius
        msg.dimensions[CYLINDER_HEIGHT] = shape.length
        return msg
    elif shape_type == ShapeType.CONE:
        msg = SolidPrimitive(type=PrimitiveType.CONE,
                             dimensions=[0.0] * PRIMITIVE_DIM_COUNT[PrimitiveType.CONE])
        msg.dimensions[CONE_RADIUS] = shape.radius
        msg.dimensions[CONE_HEIGHT] = shape.length
        return msg
    elif shape_type == ShapeType.PLANE:
        return PlaneMsg(coef=(shape.a, shape.b, shape.c, shape.d))
    elif shape_type == ShapeType.MESH:
        return MeshMsg(
            vertices=[tuple(float(c) for c in v) for v in shape.points()],
            triangles=[MeshTriangle(tuple(int(i) for i in t)) for t in shape.faces()],
        )

    if shape_type is None:
        raise UnsupportedVariantError(f"not a shape: {type(shape).__name__}")
    raise UnsupportedVariantError(
        f"unable to construct shape message for shape of type '{getattr(shape, 'STRING_NAME', shape_type)}'")


def construct_msg_from_shape(shape: Shape, *,
                             log: Optional[logging.Logger] = None) -> Optional[ShapeMsg]:
    """Return the message form of ``shape``.

    The shape's numbers are copied field for field.  Returns ``None``
    (after logging) for an :class:`~shapeops.shapes.OcTree` or anything
    that is not a known shape.
    """

    log = log or logger
    try:
        return msg_from_shape(shape)
    except ShapeError as exc:
        log.error("%s", exc)
        return None


__all__ = [
    "shape_from_msg",
    "construct_shape_from_msg",
    "msg_from_shape",
    "construct_msg_from_shape",
]
