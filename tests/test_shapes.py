import numpy as np
import pytest

from shapeops.errors import MalformedInputError
from shapeops.shapes import (
    SHAPE_CLASSES,
    Box,
    Cone,
    Cylinder,
    Mesh,
    OcTree,
    Plane,
    ShapeType,
    Sphere,
    is_shape,
)


def test_every_variant_has_a_distinct_type_and_name():
    types = [cls.type for cls in SHAPE_CLASSES]
    names = [cls.STRING_NAME for cls in SHAPE_CLASSES]
    assert set(types) == set(ShapeType)
    assert len(set(names)) == len(names)


def test_primitives_store_floats():
    box = Box((1, 2, 3))
    assert box.size == (1.0, 2.0, 3.0)
    assert isinstance(Sphere(2).radius, float)
    cyl = Cylinder(0.5, 4)
    assert (cyl.radius, cyl.length) == (0.5, 4.0)


@pytest.mark.parametrize("factory", [
    lambda: Sphere(-1.0),
    lambda: Box((1.0, -2.0, 3.0)),
    lambda: Box((1.0, 2.0)),
    lambda: Cylinder(1.0, -0.1),
    lambda: Cone(-1.0, 1.0),
    lambda: Sphere(float("nan")),
    lambda: Mesh(-1, 0),
])
def test_invariant_violations_raise(factory):
    with pytest.raises(MalformedInputError):
        factory()


def test_plane_keeps_unnormalised_coefficients():
    plane = Plane(0.0, 0.0, 2.0, -4.0)
    assert plane.coef == (0.0, 0.0, 2.0, -4.0)


def test_mesh_arrays_are_sized_at_construction():
    mesh = Mesh(4, 2)
    assert mesh.vertex_count == 4
    assert mesh.triangle_count == 2
    assert mesh.vertices.shape == (12,)
    assert mesh.triangles.shape == (6,)
    assert mesh.triangles.dtype == np.uint32
    assert mesh.normals.shape == (6,)
    assert not mesh.vertices.any()


def test_mesh_compute_normals():
    mesh = Mesh(4, 2)
    mesh.vertices[:] = [0, 0, 0, 1, 0, 0, 0, 1, 0, 5, 5, 5]
    mesh.triangles[:] = [0, 1, 2, 0, 0, 3]
    mesh.compute_normals()
    assert mesh.normals.tolist() == [0.0, 0.0, 1.0, 0.0, 0.0, 0.0]

    # recomputed fully after a geometry change
    mesh.triangles[:3] = [0, 2, 1]
    mesh.compute_normals()
    assert mesh.normals[:3].tolist() == [0.0, 0.0, -1.0]


def test_mesh_equality_and_clone():
    mesh = Mesh(3, 1)
    mesh.vertices[:] = [0, 0, 0, 1, 0, 0, 0, 1, 0]
    mesh.triangles[:] = [0, 1, 2]
    mesh.compute_normals()

    copy = mesh.clone()
    assert copy == mesh
    assert copy is not mesh
    copy.vertices[0] = 9.0
    assert copy != mesh
    assert mesh.vertices[0] == 0.0


def test_primitive_clone_is_independent():
    box = Box((1.0, 2.0, 3.0))
    other = box.clone()
    assert other == box and other is not box


def test_is_shape():
    assert is_shape(Sphere(1.0))
    assert is_shape(OcTree())
    assert not is_shape("sphere")
    assert not is_shape(None)
