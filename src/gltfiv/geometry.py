"""Indexed triangle geometry assembly."""

from __future__ import annotations

from typing import Literal

import numpy as np

from gltfiv.dedup import NormalRegistry, deduplicate
from gltfiv.errors import IndexOutOfRangeError, MalformedTriangleListError
from gltfiv.inventor import (
    END_FACE_INDEX,
    Coordinate3,
    IndexedFaceSet,
    IvNode,
    MaterialBinding,
    Normal,
    NormalBinding,
)


def _vectors(array: np.ndarray) -> list[tuple[float, float, float]]:
    return [tuple(row) for row in np.asarray(array, dtype=np.float64).tolist()]


def _terminated(corners: list[int]) -> list[int]:
    """Append END_FACE_INDEX after every third corner."""
    result: list[int] = []
    for start in range(0, len(corners), 3):
        result.extend(corners[start : start + 3])
        result.append(END_FACE_INDEX)
    return result


def assemble_triangles(
    positions: np.ndarray,
    normals: np.ndarray,
    indices: np.ndarray,
    registry: NormalRegistry,
    *,
    normal_list: Literal["delta", "snapshot"] = "delta",
) -> list[IvNode]:
    """Build the binding, coordinate, normal and face-set nodes of a primitive.

    Positions are deduplicated per primitive; normals are registered per
    corner in ``registry``, which is shared by every primitive of the run.

    Args:
        positions: (N, 3) raw vertex positions.
        normals: (N, 3) raw vertex normals, parallel to ``positions``.
        indices: (M,) triangle corner indices into the vertex arrays.
        registry: Run-wide normal registry.
        normal_list: ``"delta"`` emits only normals this primitive registered
            first; ``"snapshot"`` emits the whole registry.

    Returns:
        MaterialBinding, Coordinate3, NormalBinding, Normal and IndexedFaceSet
        nodes, in that order.
    """
    corners = np.asarray(indices, dtype=np.int64).tolist()
    if len(corners) % 3 != 0:
        raise MalformedTriangleListError(
            f"triangle list has {len(corners)} indices, not a multiple of 3"
        )

    raw_positions = _vectors(positions)
    raw_normals = _vectors(normals)
    vertex_count = min(len(raw_positions), len(raw_normals))
    for corner in corners:
        if corner >= vertex_count:
            raise IndexOutOfRangeError(
                f"vertex index {corner} out of bounds [0, {vertex_count})"
            )

    unique_positions, position_lookup = deduplicate(raw_positions)
    coord_index = [position_lookup[raw_positions[corner]] for corner in corners]

    first_new = len(registry)
    normal_index = [registry.register(raw_normals[corner]) for corner in corners]
    vectors = registry.values(0 if normal_list == "snapshot" else first_new)

    return [
        MaterialBinding(value="OVERALL"),
        Coordinate3(point=unique_positions),
        NormalBinding(value="PER_VERTEX_INDEXED"),
        Normal(vector=vectors),
        IndexedFaceSet(
            coord_index=_terminated(coord_index),
            normal_index=_terminated(normal_index),
        ),
    ]
