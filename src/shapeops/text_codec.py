"""Plain-text form of shapes.

The first line holds the type name (``sphere``, ``box``, ``cylinder``,
``cone``, ``plane`` or ``mesh``); the following lines hold the numbers of
that type separated by whitespace::

    sphere          box            cylinder / cone     plane
    r               x y z          r length            a b c d

A mesh is written as ``vertex_count triangle_count`` followed by one
``x y z`` line per vertex and one ``i0 i1 i2`` line per triangle.  Face
normals are not written; they are recomputed on load.

Floats are written with :func:`repr`, which reads back to the identical
value.  Numbers are read back only in plain ASCII decimal or exponent
form (``inf`` and ``nan`` included); counts and indices are unsigned
integers.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, TextIO, Union

from shapeops.errors import ShapeError, ShapeParseError, UnsupportedVariantError
from shapeops.shapes import Box, Cone, Cylinder, Mesh, Plane, Shape, ShapeType, Sphere

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)")
_UINT_RE = re.compile(r"\+?[0-9]+")


def _fmt(value) -> str:
    return repr(float(value))


def _shape_lines(shape: Shape) -> List[str]:
    shape_type = getattr(shape, "type", None)
    if shape_type == ShapeType.SPHERE:
        return [Sphere.STRING_NAME, _fmt(shape.radius)]
    elif shape_type == ShapeType.BOX:
        return [Box.STRING_NAME, " ".join(_fmt(v) for v in shape.size)]
    elif shape_type == ShapeType.CYLINDER:
        return [Cylinder.STRING_NAME, f"{_fmt(shape.radius)} {_fmt(shape.length)}"]
    elif shape_type == ShapeType.CONE:
        return [Cone.STRING_NAME, f"{_fmt(shape.radius)} {_fmt(shape.length)}"]
    elif shape_type == ShapeType.PLANE:
        return [Plane.STRING_NAME, " ".join(_fmt(v) for v in shape.coef)]
    elif shape_type == ShapeType.MESH:
        lines = [Mesh.STRING_NAME, f"{shape.vertex_count} {shape.triangle_count}"]
        lines.extend(" ".join(_fmt(c) for c in v) for v in shape.points())
        lines.extend(" ".join(str(int(i)) for i in t) for t in shape.faces())
        return lines
    raise UnsupportedVariantError(
        f"unable to save shape of type '{getattr(shape, 'STRING_NAME', shape_type)}'")


def shape_to_text(shape: Shape, *, log: Optional[logging.Logger] = None) -> Optional[str]:
    """Return the text form of ``shape``, or ``None`` if it has none."""

    log = log or logger
    try:
        lines = _shape_lines(shape)
    except ShapeError as exc:
        log.error("%s", exc)
        return None
    return "\n".join(lines) + "\n"


def save_as_text(shape: Shape, out: TextIO, *, log: Optional[logging.Logger] = None) -> bool:
    """Write the text form of ``shape`` to ``out``.

    Nothing is written for a shape without a text form (an octree or an
    unknown object); the failure is logged and ``False`` returned.
    """

    text = shape_to_text(shape, log=log)
    if text is None:
        return False
    out.write(text)
    return True


class _TokenReader:
    """Sequential reader over whitespace separated tokens."""

    def __init__(self, text: str):
        self._tokens: List[str] = text.split()
        self._pos = 0

    def remaining(self) -> int:
        return len(self._tokens) - self._pos

    def next_token(self, what: str) -> str:
        if self._pos >= len(self._tokens):
            raise ShapeParseError(f"unexpected end of input while reading {what}")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def next_float(self, what: str) -> float:
        token = self.next_token(what)
        if not _FLOAT_RE.fullmatch(token):
            raise ShapeParseError(f"expected a number for {what}, got '{token}'", token)
        return float(token)

    def next_uint(self, what: str) -> int:
        token = self.next_token(what)
        if not _UINT_RE.fullmatch(token):
            raise ShapeParseError(f"expected an integer for {what}, got '{token}'", token)
        value = int(token)
        if value < 0 or value > 0xFFFFFFFF:
            raise ShapeParseError(f"{what} out of range: {value}", token)
        return value


def _parse_mesh(reader: _TokenReader) -> Mesh:
    vertex_count = reader.next_uint("vertex count")
    triangle_count = reader.next_uint("triangle count")
    needed = 3 * (vertex_count + triangle_count)
    if reader.remaining() < needed:
        raise ShapeParseError(f"mesh needs {needed} numbers, only {reader.remaining()} left")
    mesh = Mesh(vertex_count, triangle_count)

    for i in range(3 * vertex_count):
        mesh.vertices[i] = reader.next_float(f"vertex {i // 3}")
    for i in range(3 * triangle_count):
        index = reader.next_uint(f"triangle {i // 3}")
        if index >= vertex_count:
            raise ShapeParseError(
                f"triangle {i // 3} refers to vertex {index} of {vertex_count}", str(index))
        mesh.triangles[i] = index

    mesh.compute_normals()
    return mesh


def parse_shape_text(text: str) -> Shape:
    """Strict variant of :func:`construct_shape_from_text`.

    Raises :class:`~shapeops.errors.ShapeParseError` for an unknown type
    name or missing or malformed numbers, and
    :class:`~shapeops.errors.MalformedInputError` for numbers that break
    a shape invariant (a negative radius, say).
    """

    reader = _TokenReader(text)
    kind = reader.next_token("shape type")

    if kind == Sphere.STRING_NAME:
        return Sphere(reader.next_float("radius"))
    elif kind == Box.STRING_NAME:
        return Box((reader.next_float("box x"),
                    reader.next_float("box y"),
                    reader.next_float("box z")))
    elif kind == Cylinder.STRING_NAME:
        return Cylinder(reader.next_float("radius"), reader.next_float("length"))
    elif kind == Cone.STRING_NAME:
        return Cone(reader.next_float("radius"), reader.next_float("length"))
    elif kind == Plane.STRING_NAME:
        return Plane(*(reader.next_float(f"plane coefficient {c}") for c in "abcd"))
    elif kind == Mesh.STRING_NAME:
        return _parse_mesh(reader)
    raise ShapeParseError(f"unknown shape type: '{kind}'", kind)


def _read_source(source: Union[str, TextIO]) -> str:
    if not hasattr(source, "read"):
        return source
    try:
        return source.read()
    except UnicodeDecodeError as exc:
        raise ShapeParseError(f"text is not ASCII: {exc.reason} at byte {exc.start}",
                              repr(exc.object[exc.start:exc.end])) from None


def construct_shape_from_text(source: Union[str, TextIO], *,
                              log: Optional[logging.Logger] = None) -> Optional[Shape]:
    """Read a shape from its text form.

    ``source`` is either the text itself or an open text stream.  Mesh
    normals are recomputed from the loaded geometry.  On any error the
    problem, including the offending token where there is one, is
    logged and ``None`` is returned.
    """

    log = log or logger
    try:
        return parse_shape_text(_read_source(source))
    except ShapeError as exc:
        log.error("Unable to construct shape from text: %s", exc)
        return None


def load_text_file(path, *, log: Optional[logging.Logger] = None) -> Optional[Shape]:
    """Read a shape from a text file at ``path``."""

    with open(path, "r", encoding="ascii") as stream:
        return construct_shape_from_text(stream, log=log)


def save_text_file(shape: Shape, path, *, log: Optional[logging.Logger] = None) -> bool:
    """Write ``shape`` to a text file at ``path``; no file is created on failure."""

    text = shape_to_text(shape, log=log)
    if text is None:
        return False
    with open(path, "w", encoding="ascii") as stream:
        stream.write(text)
    return True


__all__ = [
    "shape_to_text",
    "save_as_text",
    "parse_shape_text",
    "construct_shape_from_text",
    "load_text_file",
    "save_text_file",
]
