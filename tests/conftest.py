"""Shared fixtures: in-memory glTF models built with pygltflib."""

from __future__ import annotations

import numpy as np
import pygltflib
import pytest

from gltfiv.accessors import COMPONENT_DTYPES

UP = (0.0, 0.0, 1.0)
TRIANGLE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)]


class GltfBuilder:
    """Accumulates accessors, meshes and nodes into a single-buffer GLTF2."""

    def __init__(self) -> None:
        self.gltf = pygltflib.GLTF2(
            scene=0,
            scenes=[pygltflib.Scene(nodes=[])],
            nodes=[],
            meshes=[],
            accessors=[],
            bufferViews=[],
            buffers=[],
            materials=[],
        )
        self.blob = bytearray()

    def raw(self, data: bytes, *, byte_stride: int | None = None) -> int:
        """Append bytes as a new buffer view and return its index."""
        self.blob += b"\x00" * ((4 - len(self.blob) % 4) % 4)
        self.gltf.bufferViews.append(
            pygltflib.BufferView(
                buffer=0,
                byteOffset=len(self.blob),
                byteLength=len(data),
                byteStride=byte_stride,
            )
        )
        self.blob += data
        return len(self.gltf.bufferViews) - 1

    def accessor(
        self,
        values,
        *,
        component_type: int = pygltflib.FLOAT,
        type_: str = pygltflib.VEC3,
    ) -> int:
        data = np.asarray(values, dtype=COMPONENT_DTYPES[component_type]).tobytes()
        view = self.raw(data)
        self.gltf.accessors.append(
            pygltflib.Accessor(
                bufferView=view,
                componentType=component_type,
                count=len(values),
                type=type_,
            )
        )
        return len(self.gltf.accessors) - 1

    def material(self, base_color=(1.0, 1.0, 1.0, 1.0), name: str | None = None) -> int:
        self.gltf.materials.append(
            pygltflib.Material(
                name=name,
                pbrMetallicRoughness=pygltflib.PbrMetallicRoughness(
                    baseColorFactor=list(base_color)
                ),
            )
        )
        return len(self.gltf.materials) - 1

    def primitive(
        self,
        positions,
        normals,
        indices=None,
        *,
        material: int | None = None,
        mode: int = pygltflib.TRIANGLES,
        index_type: int = pygltflib.UNSIGNED_SHORT,
    ) -> pygltflib.Primitive:
        attributes = pygltflib.Attributes(
            POSITION=self.accessor(positions),
            NORMAL=self.accessor(normals),
        )
        index_accessor = None
        if indices is not None:
            index_accessor = self.accessor(
                indices, component_type=index_type, type_=pygltflib.SCALAR
            )
        return pygltflib.Primitive(
            attributes=attributes,
            indices=index_accessor,
            material=material,
            mode=mode,
        )

    def mesh(self, *primitives: pygltflib.Primitive) -> int:
        self.gltf.meshes.append(pygltflib.Mesh(primitives=list(primitives)))
        return len(self.gltf.meshes) - 1

    def node(self, mesh: int | None = None, children=None, name: str | None = None) -> int:
        self.gltf.nodes.append(
            pygltflib.Node(name=name, mesh=mesh, children=list(children or []))
        )
        return len(self.gltf.nodes) - 1

    def build(self, roots) -> pygltflib.GLTF2:
        self.gltf.scenes[0].nodes = list(roots)
        self.gltf.buffers = [pygltflib.Buffer(byteLength=len(self.blob))]
        self.gltf.set_binary_blob(bytes(self.blob))
        return self.gltf


@pytest.fixture
def builder() -> GltfBuilder:
    return GltfBuilder()


@pytest.fixture
def triangle_gltf(builder: GltfBuilder) -> pygltflib.GLTF2:
    """One scene, node, mesh and red triangle sharing a single normal."""
    red = builder.material((1.0, 0.0, 0.0, 1.0), name="red")
    prim = builder.primitive(TRIANGLE, [UP] * 3, [0, 1, 2], material=red)
    node = builder.node(mesh=builder.mesh(prim), name="triangle")
    return builder.build([node])


@pytest.fixture
def quad_gltf(builder: GltfBuilder) -> pygltflib.GLTF2:
    """Two triangles over four vertices; vertex 3 repeats vertex 0's position."""
    positions = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 0.0, 0.0)]
    normals = [UP, UP, UP, (0.0, 1.0, 0.0)]
    mat = builder.material((0.5, 0.25, 0.125, 1.0))
    prim = builder.primitive(positions, normals, [0, 1, 2, 3, 1, 2], material=mat)
    node = builder.node(mesh=builder.mesh(prim))
    return builder.build([node])
