"""Typed decoding of glTF accessor data via numpy."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from urllib.parse import unquote

import numpy as np
import pygltflib

from gltfiv.errors import AccessorError, TypeMismatchError, UnsupportedComponentTypeError

logger = logging.getLogger(__name__)

# pygltflib has no constant for signed 32-bit storage.
INT = 5124

COMPONENT_DTYPES: dict[int, np.dtype] = {
    pygltflib.BYTE: np.dtype("<i1"),
    pygltflib.UNSIGNED_BYTE: np.dtype("<u1"),
    pygltflib.SHORT: np.dtype("<i2"),
    pygltflib.UNSIGNED_SHORT: np.dtype("<u2"),
    INT: np.dtype("<i4"),
    pygltflib.UNSIGNED_INT: np.dtype("<u4"),
    pygltflib.FLOAT: np.dtype("<f4"),
}

TYPE_WIDTHS: dict[str, int] = {
    pygltflib.SCALAR: 1,
    pygltflib.VEC2: 2,
    pygltflib.VEC3: 3,
}


class AccessorReader:
    """Decode accessors of one glTF model into numpy arrays.

    Buffer contents are resolved lazily and cached per buffer index: the GLB
    binary chunk, a base64 ``data:`` URI, or a file under ``resource_dir``.
    """

    def __init__(self, gltf: pygltflib.GLTF2, resource_dir: Path | None = None) -> None:
        self.gltf = gltf
        self.resource_dir = resource_dir
        self._buffers: dict[int, bytes] = {}

    def positions(self, primitive: pygltflib.Primitive) -> np.ndarray:
        logger.debug("retrieve positions from primitive")
        return self.read(self._attribute(primitive, "POSITION"), pygltflib.VEC3).astype(np.float64)

    def normals(self, primitive: pygltflib.Primitive) -> np.ndarray:
        logger.debug("retrieve normals from primitive")
        return self.read(self._attribute(primitive, "NORMAL"), pygltflib.VEC3).astype(np.float64)

    def texcoords(self, primitive: pygltflib.Primitive) -> np.ndarray:
        logger.debug("retrieve texture coordinates from primitive")
        return self.read(self._attribute(primitive, "TEXCOORD_0"), pygltflib.VEC2).astype(
            np.float64
        )

    def indices(self, primitive: pygltflib.Primitive) -> np.ndarray:
        """Return the triangle index stream as uint32.

        A primitive without an index accessor indexes its POSITION accessor
        sequentially.
        """
        logger.debug("retrieve indices from primitive")
        if primitive.indices is None:
            count = self._accessor(self._attribute(primitive, "POSITION")).count
            return np.arange(count, dtype=np.uint32)

        accessor = self._accessor(primitive.indices)
        # INT is not a legal index component type in glTF 2.0
        if accessor.componentType == INT:
            raise UnsupportedComponentTypeError(
                f"unsupported index component type {accessor.componentType}"
            )
        return self.read(primitive.indices, pygltflib.SCALAR).reshape(-1).astype(np.uint32)

    def read(self, accessor_index: int, expected_type: str) -> np.ndarray:
        """Decode an accessor into a ``(count, width)`` array of its native dtype.

        Raises:
            TypeMismatchError: If the accessor type is not ``expected_type``.
            UnsupportedComponentTypeError: If the component type is unknown.
            AccessorError: If the accessor is sparse, or its data lies outside
                its buffer view or buffer.
        """
        accessor = self._accessor(accessor_index)
        if accessor.type != expected_type:
            raise TypeMismatchError(
                f"expected accessor type {expected_type} instead of {accessor.type}"
            )
        dtype = COMPONENT_DTYPES.get(accessor.componentType)
        if dtype is None:
            raise UnsupportedComponentTypeError(
                f"unsupported component type {accessor.componentType}"
            )

        if accessor.sparse is not None:
            raise AccessorError(f"accessor {accessor_index}: sparse accessors are not supported")

        width = TYPE_WIDTHS[accessor.type]
        count = accessor.count
        if accessor.bufferView is None:
            return np.zeros((count, width), dtype=dtype)
        if count == 0:
            return np.empty((0, width), dtype=dtype)

        view = self._buffer_view(accessor.bufferView)
        data = self._buffer(view.buffer)
        element_size = dtype.itemsize * width
        stride = view.byteStride or element_size
        view_start = view.byteOffset or 0
        start = view_start + (accessor.byteOffset or 0)
        end = start + stride * (count - 1) + element_size
        if end > view_start + view.byteLength or end > len(data):
            raise AccessorError(
                f"accessor {accessor_index} reads bytes [{start}, {end}) beyond "
                f"buffer view {accessor.bufferView}"
            )

        array = np.ndarray(
            shape=(count, width),
            dtype=dtype,
            buffer=data,
            offset=start,
            strides=(stride, dtype.itemsize),
        )
        return array.copy()

    def _attribute(self, primitive: pygltflib.Primitive, name: str) -> int:
        index = getattr(primitive.attributes, name, None)
        if index is None:
            raise AccessorError(f"primitive has no {name} attribute")
        return index

    def _accessor(self, index: int) -> pygltflib.Accessor:
        if not 0 <= index < len(self.gltf.accessors):
            raise AccessorError(
                f"accessor index {index} out of bounds [0, {len(self.gltf.accessors)})"
            )
        return self.gltf.accessors[index]

    def _buffer_view(self, index: int) -> pygltflib.BufferView:
        if not 0 <= index < len(self.gltf.bufferViews):
            raise AccessorError(
                f"buffer view index {index} out of bounds [0, {len(self.gltf.bufferViews)})"
            )
        return self.gltf.bufferViews[index]

    def _buffer(self, index: int) -> bytes:
        if index in self._buffers:
            return self._buffers[index]
        if not 0 <= index < len(self.gltf.buffers):
            raise AccessorError(f"buffer index {index} out of bounds [0, {len(self.gltf.buffers)})")

        uri = self.gltf.buffers[index].uri
        if uri is None:
            data = self.gltf.binary_blob()
            if data is None:
                raise AccessorError(f"buffer {index} refers to a missing binary chunk")
        elif uri.startswith("data:"):
            header, _, payload = uri.partition(",")
            if not header.endswith(";base64"):
                raise AccessorError(f"buffer {index} data URI is not base64 encoded")
            try:
                data = base64.b64decode(payload, validate=True)
            except binascii.Error as e:
                raise AccessorError(f"buffer {index} has a corrupt data URI: {e}") from e
        else:
            base = self.resource_dir or Path.cwd()
            try:
                data = (base / unquote(uri)).read_bytes()
            except OSError as e:
                raise AccessorError(f"Cannot read buffer {index} from {uri!r}: {e}") from e

        self._buffers[index] = bytes(data)
        return self._buffers[index]
