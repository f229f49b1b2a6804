"""JSON-compatible dictionaries for shape messages.

Documents look like::

    {"schema": "shapeops-shape-msg-v0.1", "type": "primitive",
     "kind": "cylinder", "dimensions": [0.5, 2.0]}

with ``type`` one of ``primitive``, ``plane`` (``coef``) or ``mesh``
(``vertices`` and ``triangles``).
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Sequence

from shapeops.errors import ShapeParseError, UnsupportedVariantError
from shapeops.messages import MeshMsg, MeshTriangle, PlaneMsg, PrimitiveType, ShapeMsg, SolidPrimitive

SCHEMA_ID = "shapeops-shape-msg-v0.1"


def _float_vec(vec: Sequence[float]) -> List[float]:
    return [float(c) for c in vec]


def _int_vec(vec: Sequence[int]) -> List[int]:
    return [int(c) for c in vec]


def message_to_json(msg: ShapeMsg) -> Dict[str, Any]:
    """Return ``msg`` as a dictionary of plain lists, strings and numbers."""

    if isinstance(msg, SolidPrimitive):
        try:
            kind = PrimitiveType(msg.type)
        except ValueError:
            raise UnsupportedVariantError(f"unknown primitive type {msg.type!r}") from None
        return {
            "schema": SCHEMA_ID,
            "type": "primitive",
            "kind": kind.name.lower(),
            "dimensions": _float_vec(msg.dimensions),
        }
    elif isinstance(msg, PlaneMsg):
        return {
            "schema": SCHEMA_ID,
            "type": "plane",
            "coef": _float_vec(msg.coef),
        }
    elif isinstance(msg, MeshMsg):
        return {
            "schema": SCHEMA_ID,
            "type": "mesh",
            "vertices": [_float_vec(v) for v in msg.vertices],
            "triangles": [_int_vec(t.vertex_indices) for t in msg.triangles],
        }
    raise UnsupportedVariantError(f"unknown shape message {type(msg).__name__}")


def _field(doc: Mapping[str, Any], key: str) -> Any:
    if key not in doc:
        raise ShapeParseError(f"missing '{key}' in {doc.get('type')} message", key)
    return doc[key]


def _numbers(values: Any, what: str, count: int = -1) -> List[float]:
    if not isinstance(values, (list, tuple)):
        raise ShapeParseError(f"{what} must be a list")
    if count >= 0 and len(values) != count:
        raise ShapeParseError(f"{what} must have {count} entries, got {len(values)}")
    out = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ShapeParseError(f"{what} entries must be numbers, got {v!r}", repr(v))
        out.append(float(v))
    return out


def _indices(values: Any, what: str) -> List[int]:
    numbers = _numbers(values, what, 3)
    if not all(math.isfinite(n) and n.is_integer() and n >= 0 for n in numbers):
        raise ShapeParseError(f"{what} must be non-negative integers, got {values!r}")
    return [int(n) for n in numbers]


def message_from_json(doc: Mapping[str, Any]) -> ShapeMsg:
    """Rebuild a shape message from :func:`message_to_json` output.

    Raises :class:`~shapeops.errors.ShapeParseError` if the document does
    not follow the schema.
    """

    if not isinstance(doc, Mapping):
        raise ShapeParseError("shape message document must be a mapping")
    schema = doc.get("schema")
    if schema != SCHEMA_ID:
        raise ShapeParseError(f"unsupported schema {schema!r}", str(schema))

    kind = doc.get("type")
    if kind == "primitive":
        name = _field(doc, "kind")
        try:
            prim = PrimitiveType[str(name).upper()]
        except KeyError:
            raise ShapeParseError(f"unknown primitive kind '{name}'", str(name)) from None
        return SolidPrimitive(type=prim, dimensions=_numbers(_field(doc, "dimensions"), "dimensions"))
    elif kind == "plane":
        return PlaneMsg(coef=tuple(_numbers(_field(doc, "coef"), "coef", 4)))
    elif kind == "mesh":
        vertices = _field(doc, "vertices")
        triangles = _field(doc, "triangles")
        if not isinstance(vertices, list) or not isinstance(triangles, list):
            raise ShapeParseError("mesh vertices and triangles must be lists")
        return MeshMsg(
            vertices=[tuple(_numbers(v, f"vertex {i}", 3)) for i, v in enumerate(vertices)],
            triangles=[MeshTriangle(tuple(_indices(t, f"triangle {i}"))) for i, t in enumerate(triangles)],
        )
    raise ShapeParseError(f"unknown shape message type '{kind}'", str(kind))


__all__ = ["SCHEMA_ID", "message_to_json", "message_from_json"]
