"""Derived facts about shapes: bounding extents and type names."""

from __future__ import annotations

import logging
from typing import Optional, Union

from shapeops.errors import MalformedInputError, ShapeError, UnsupportedVariantError
from shapeops.geometry_utils import ZERO_VEC3, Vec3, axis_extents
from shapeops.message_codec import msg_from_shape
from shapeops.messages import (
    BOX_X,
    BOX_Y,
    BOX_Z,
    CONE_HEIGHT,
    CONE_RADIUS,
    CYLINDER_HEIGHT,
    CYLINDER_RADIUS,
    SPHERE_RADIUS,
    MeshMsg,
    PlaneMsg,
    PrimitiveType,
    ShapeMsg,
    SolidPrimitive,
)
from shapeops.shapes import SHAPE_CLASSES, Shape

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "unknown"
EMPTY_NAME = ""

_STRING_NAMES = {cls.type: cls.STRING_NAME for cls in SHAPE_CLASSES}


def _primitive_extents(msg: SolidPrimitive) -> Vec3:
    try:
        kind = PrimitiveType(msg.type)
    except ValueError:
        raise UnsupportedVariantError(f"unknown primitive type {msg.type!r}") from None

    dims = msg.dimensions
    try:
        if kind == PrimitiveType.SPHERE:
            d = 2.0 * dims[SPHERE_RADIUS]
            return (d, d, d)
        elif kind == PrimitiveType.BOX:
            return (float(dims[BOX_X]), float(dims[BOX_Y]), float(dims[BOX_Z]))
        elif kind == PrimitiveType.CYLINDER:
            d = 2.0 * dims[CYLINDER_RADIUS]
            return (d, d, float(dims[CYLINDER_HEIGHT]))
        else:
            d = 2.0 * dims[CONE_RADIUS]
            return (d, d, float(dims[CONE_HEIGHT]))
    except IndexError:
        raise MalformedInputError(
            f"primitive of type {int(kind)} has too few dimensions ({len(dims)})") from None


def message_extents(msg: ShapeMsg) -> Vec3:
    """Return the axis-aligned extents of a shape message.

    Spheres extend ``2r`` along every axis, boxes by their dimensions,
    cylinders and cones ``2r`` across and their height along z, meshes
    by the spread of their vertices.  Planes are unbounded and report
    ``(0, 0, 0)``.
    """

    if isinstance(msg, PlaneMsg):
        return ZERO_VEC3
    elif isinstance(msg, MeshMsg):
        for i, v in enumerate(msg.vertices):
            if len(v) != 3:
                raise MalformedInputError(f"mesh vertex {i} has {len(v)} coordinates, expected 3")
        return axis_extents(msg.vertices)
    elif isinstance(msg, SolidPrimitive):
        return _primitive_extents(msg)
    raise UnsupportedVariantError(f"unknown shape message {type(msg).__name__}")


def compute_shape_extents(obj: Union[Shape, ShapeMsg], *,
                          log: Optional[logging.Logger] = None) -> Vec3:
    """Return the bounding box size of a shape or shape message.

    Anything that cannot be measured (an octree, an unknown object, a
    primitive missing dimensions) is logged and measured as
    ``(0, 0, 0)``.
    """

    log = log or logger
    try:
        if isinstance(obj, Shape):
            obj = msg_from_shape(obj)
        return message_extents(obj)
    except ShapeError as exc:
        log.error("Unable to compute shape extents: %s", exc)
        return ZERO_VEC3


def shape_string_name(shape: Optional[Shape]) -> str:
    """Return the text name of a shape's type.

    ``None`` gives the empty string and an object whose type is not
    known gives ``"unknown"``.
    """

    if shape is None:
        return EMPTY_NAME
    return _STRING_NAMES.get(getattr(shape, "type", None), UNKNOWN_NAME)


__all__ = [
    "UNKNOWN_NAME",
    "EMPTY_NAME",
    "message_extents",
    "compute_shape_extents",
    "shape_string_name",
]
