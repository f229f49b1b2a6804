import io
import logging

import numpy as np
import pytest

from shapeops.errors import MalformedInputError, ShapeParseError
from shapeops.mesh_builder import create_mesh_from_soup, create_mesh_from_vertices
from shapeops.shapes import Box, Cone, Cylinder, Mesh, OcTree, Plane, Sphere
from shapeops.text_codec import (
    construct_shape_from_text,
    load_text_file,
    parse_shape_text,
    save_as_text,
    save_text_file,
    shape_to_text,
)


def _mesh():
    soup = [
        (0.1, 0.2, 0.3), (1.0 / 3.0, 0.0, 0.0), (0.0, 2.0 / 3.0, 1e-17),
        (0.1, 0.2, 0.3), (0.0, 2.0 / 3.0, 1e-17), (-7.25, 1e30, 0.0),
    ]
    return create_mesh_from_soup(soup)


def test_sphere_text_layout():
    assert shape_to_text(Sphere(1.5)) == "sphere\n1.5\n"


def test_box_text_layout():
    assert shape_to_text(Box((1.0, 2.0, 3.0))) == "box\n1.0 2.0 3.0\n"


def test_cylinder_and_cone_text_layout():
    assert shape_to_text(Cylinder(0.5, 2.0)) == "cylinder\n0.5 2.0\n"
    assert shape_to_text(Cone(0.5, 2.0)) == "cone\n0.5 2.0\n"


def test_plane_text_layout():
    assert shape_to_text(Plane(0.0, 0.0, 1.0, -2.5)) == "plane\n0.0 0.0 1.0 -2.5\n"


def test_mesh_text_layout_omits_normals():
    soup = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 0), (1, 1, 0), (0, 1, 0)]
    text = shape_to_text(create_mesh_from_soup(soup))
    assert text.splitlines() == [
        "mesh",
        "4 2",
        "0.0 0.0 0.0",
        "1.0 0.0 0.0",
        "1.0 1.0 0.0",
        "0.0 1.0 0.0",
        "0 1 2",
        "0 2 3",
    ]


@pytest.mark.parametrize("shape", [
    Sphere(0.1),
    Box((1.0 / 3.0, 2.5e-9, 7.0)),
    Cylinder(0.3, 1e10),
    Cone(2.0 / 7.0, 0.0),
    Plane(0.1, -0.2, 0.30000000000000004, 1e-300),
])
def test_primitive_text_roundtrip(shape):
    assert parse_shape_text(shape_to_text(shape)) == shape


def test_mesh_text_roundtrip_is_exact():
    mesh = _mesh()
    loaded = construct_shape_from_text(shape_to_text(mesh))

    assert isinstance(loaded, Mesh)
    assert loaded.vertex_count == mesh.vertex_count
    assert loaded.triangle_count == mesh.triangle_count
    assert loaded.vertices.tobytes() == mesh.vertices.tobytes()
    assert loaded.triangles.tolist() == mesh.triangles.tolist()
    np.testing.assert_array_equal(loaded.normals, mesh.normals)


def test_load_recomputes_normals():
    text = "mesh\n3 1\n0 0 0\n1 0 0\n0 1 0\n0 2 1\n"
    mesh = construct_shape_from_text(text)
    assert mesh.normals.tolist() == [0.0, 0.0, -1.0]


def test_save_to_stream():
    buf = io.StringIO()
    assert save_as_text(Sphere(2.0), buf)
    assert buf.getvalue() == "sphere\n2.0\n"


def test_load_from_stream():
    assert construct_shape_from_text(io.StringIO("cone\n1 2\n")) == Cone(1.0, 2.0)


def test_octree_is_not_saved(caplog):
    buf = io.StringIO()
    with caplog.at_level(logging.ERROR, logger="shapeops.text_codec"):
        assert not save_as_text(OcTree(), buf)
        assert shape_to_text(OcTree()) is None
    assert buf.getvalue() == ""
    assert "octree" in caplog.text


def test_file_roundtrip(tmp_path):
    path = tmp_path / "shape.txt"
    mesh = _mesh()
    assert save_text_file(mesh, path)
    assert path.read_text().startswith("mesh\n")
    assert load_text_file(path) == mesh


def test_failed_save_creates_no_file(tmp_path):
    path = tmp_path / "octree.txt"
    assert not save_text_file(OcTree(), path)
    assert not path.exists()


def test_unknown_type_token_is_reported(caplog):
    with caplog.at_level(logging.ERROR, logger="shapeops.text_codec"):
        assert construct_shape_from_text("torus\n1 2\n") is None
    assert "torus" in caplog.text

    with pytest.raises(ShapeParseError) as info:
        parse_shape_text("torus 1 2")
    assert info.value.token == "torus"


@pytest.mark.parametrize("text", [
    "",
    "   \n",
    "sphere\n",
    "box\n1 2\n",
    "plane\n1 2 3\n",
    "cylinder\n1 abc\n",
    "mesh\n",
    "mesh\n2 1\n0 0 0\n1 1 1\n0 1\n",
    "mesh\n3 1\n0 0 0\n1 0 0\n0 1 0\n0 1 3\n",
    "mesh\n-1 0\n",
    "mesh\n3 1\n0 0 0\n1 0 0\n0 1 0\n0 1 1.5\n",
])
def test_malformed_text_fails(text):
    assert construct_shape_from_text(text) is None
    with pytest.raises(ShapeParseError):
        parse_shape_text(text)


def test_invariant_violation_in_text_fails():
    assert construct_shape_from_text("sphere\n-1\n") is None
    with pytest.raises(MalformedInputError):
        parse_shape_text("sphere -1")


def test_empty_mesh_text_roundtrip():
    mesh = create_mesh_from_vertices([], [])
    assert shape_to_text(mesh) == "mesh\n0 0\n"
    assert construct_shape_from_text("mesh\n0 0\n") == mesh


def test_non_ascii_file_fails(tmp_path, caplog):
    path = tmp_path / "accent.txt"
    path.write_bytes("sphere\n1.0 é\n".encode("utf-8"))
    with caplog.at_level(logging.ERROR, logger="shapeops.text_codec"):
        assert load_text_file(path) is None
    assert "not ASCII" in caplog.text


@pytest.mark.parametrize("text", [
    "sphere\n1_0\n",
    "sphere\n５\n",
    "box\n1 ٢ 3\n",
    "mesh\n1_0 0\n",
    "mesh\n３ 0\n0 0 0\n0 0 0\n0 0 0\n",
])
def test_non_decimal_numbers_are_rejected(text):
    assert construct_shape_from_text(text) is None
    with pytest.raises(ShapeParseError):
        parse_shape_text(text)


@pytest.mark.parametrize("text,radius", [
    ("sphere\n+2\n", 2.0),
    ("sphere\n.5\n", 0.5),
    ("sphere\n3.\n", 3.0),
    ("sphere\n1e+30\n", 1e30),
    ("sphere\n2.5E-3\n", 2.5e-3),
])
def test_decimal_number_forms(text, radius):
    assert parse_shape_text(text) == Sphere(radius)


def test_infinite_radius_is_read():
    assert parse_shape_text("sphere inf").radius == float("inf")
