"""glTF scene traversal and conversion to an Inventor scene graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pygltflib

from gltfiv.accessors import AccessorReader
from gltfiv.config import ConversionOptions
from gltfiv.dedup import NormalRegistry
from gltfiv.errors import GltfIvError, IndexOutOfRangeError, LoadError
from gltfiv.geometry import assemble_triangles
from gltfiv.inventor import Material, Separator
from gltfiv.materials import convert_material
from gltfiv.warning_policy import DEFAULT_MATERIAL, UNSUPPORTED_MODE, emit_warning

logger = logging.getLogger(__name__)


class Writer(Protocol):
    """Serializes a finished scene graph; returns True on success."""

    def __call__(self, destination: Path, root: Separator, binary: bool) -> bool: ...


@dataclass
class ConversionResult:
    """Outcome of :func:`convert`: a scene graph or the error that stopped it."""

    root: Separator | None
    error: GltfIvError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SceneConverter:
    """Converts one glTF model into one Inventor scene graph.

    A converter holds the state of a single run: the output root and the
    normal registry shared by all primitives. Use a new instance per run.
    """

    def __init__(
        self,
        gltf: pygltflib.GLTF2,
        *,
        options: ConversionOptions | None = None,
        resource_dir: Path | None = None,
    ) -> None:
        self.gltf = gltf
        self.options = options or ConversionOptions()
        self.reader = AccessorReader(gltf, resource_dir)
        self.root = Separator()
        self.normal_registry = NormalRegistry()

    def convert_model(self) -> Separator:
        logger.debug("converting gltf model to open inventor model")
        for scene in self.gltf.scenes:
            self.convert_scene(scene)
        return self.root

    def convert_scene(self, scene: pygltflib.Scene) -> None:
        logger.debug("converting scene with name %r", scene.name)
        self.convert_nodes(scene.nodes or [])

    def convert_nodes(self, node_indices: list[int]) -> None:
        for node_index in node_indices:
            self.convert_node(node_index)

    def convert_node(self, node_index: int) -> None:
        logger.debug("converting node with index %d", node_index)
        nodes = self.gltf.nodes
        if not 0 <= node_index < len(nodes):
            raise IndexOutOfRangeError(
                f"node index {node_index} out of bounds [0, {len(nodes)})"
            )

        node = nodes[node_index]
        logger.debug("converting node with name %r", node.name)
        # negative mesh indices mean "no mesh", as for loaders that use -1
        if node.mesh is not None and node.mesh >= 0:
            self.convert_mesh(node.mesh)
        self.convert_nodes(node.children or [])

    def convert_mesh(self, mesh_index: int) -> None:
        logger.debug("converting mesh with index %d", mesh_index)
        meshes = self.gltf.meshes
        if not 0 <= mesh_index < len(meshes):
            raise IndexOutOfRangeError(
                f"mesh index {mesh_index} out of bounds [0, {len(meshes)})"
            )

        mesh = meshes[mesh_index]
        logger.debug("converting mesh with name %r", mesh.name)
        for primitive in mesh.primitives:
            self.convert_primitive(primitive)

    def convert_primitive(self, primitive: pygltflib.Primitive) -> None:
        mode = pygltflib.TRIANGLES if primitive.mode is None else primitive.mode
        logger.debug("converting primitive with mode %d", mode)
        if mode != pygltflib.TRIANGLES:
            emit_warning(
                UNSUPPORTED_MODE,
                f"skipping unsupported primitive with mode {mode}",
                policy=self.options.warning_policy,
            )
            return
        self._convert_triangles(primitive)

    def _convert_triangles(self, primitive: pygltflib.Primitive) -> None:
        logger.debug("converting triangles primitive")
        positions = self.reader.positions(primitive)
        normals = self.reader.normals(primitive)
        indices = self.reader.indices(primitive)

        nodes = [self._convert_material(primitive.material)]
        nodes += assemble_triangles(
            positions,
            normals,
            indices,
            self.normal_registry,
            normal_list=self.options.normal_list,
        )
        for node in nodes:
            self.root.add_child(node)

    def _convert_material(self, material_index: int | None) -> Material:
        policy = self.options.warning_policy
        if material_index is None:
            emit_warning(
                DEFAULT_MATERIAL, "primitive has no material, using default", policy=policy
            )
            return convert_material(None, warning_policy=policy)

        materials = self.gltf.materials
        if not 0 <= material_index < len(materials):
            raise IndexOutOfRangeError(
                f"material index {material_index} out of bounds [0, {len(materials)})"
            )
        return convert_material(materials[material_index], warning_policy=policy)


def convert(
    gltf: pygltflib.GLTF2,
    *,
    options: ConversionOptions | None = None,
    resource_dir: Path | None = None,
) -> ConversionResult:
    """Convert a glTF model, reporting failure instead of raising.

    The scene graph is returned only when every scene converted; otherwise
    ``root`` is None and ``error`` holds the cause.
    """
    converter = SceneConverter(gltf, options=options, resource_dir=resource_dir)
    try:
        root = converter.convert_model()
    except GltfIvError as e:
        logger.error("failed to convert model: %s", e)
        return ConversionResult(root=None, error=e)
    return ConversionResult(root=root)


def convert_file(
    source: Path,
    destination: Path,
    writer: Writer,
    *,
    options: ConversionOptions | None = None,
) -> bool:
    """Load ``source``, convert it and hand the scene graph to ``writer``.

    The writer is called only after a successful conversion, with
    ``options.binary`` passed through unchanged.

    Raises:
        LoadError: If ``source`` cannot be loaded as glTF.
    """
    options = options or ConversionOptions()
    try:
        gltf = pygltflib.GLTF2().load(str(source))
    except (OSError, ValueError) as e:
        raise LoadError(f"Cannot load glTF file {source}: {e}") from e
    if gltf is None:
        raise LoadError(f"Cannot load glTF file {source}")

    result = convert(gltf, options=options, resource_dir=source.parent)
    if not result.ok:
        return False
    return bool(writer(destination, result.root, options.binary))
