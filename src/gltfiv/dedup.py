"""Value deduplication for vertex attributes."""

from __future__ import annotations

from collections.abc import Iterable

Vec3 = tuple[float, float, float]


def deduplicate(values: Iterable[Vec3]) -> tuple[list[Vec3], dict[Vec3, int]]:
    """Collapse equal values, keeping first-occurrence order.

    Returns:
        The unique values and a map of value -> index into them.
    """
    unique: list[Vec3] = []
    lookup: dict[Vec3, int] = {}
    for value in values:
        if value not in lookup:
            lookup[value] = len(unique)
            unique.append(value)
    return unique, lookup


class NormalRegistry:
    """Normal vectors indexed densely in first-registration order.

    One registry spans a whole conversion run so primitives that share a
    normal share its index. Indices never change once assigned.
    """

    def __init__(self) -> None:
        self._indices: dict[Vec3, int] = {}
        self._normals: list[Vec3] = []

    def register(self, normal: Vec3) -> int:
        index = self._indices.get(normal)
        if index is None:
            index = len(self._normals)
            self._indices[normal] = index
            self._normals.append(normal)
        return index

    def values(self, start: int = 0) -> list[Vec3]:
        """Registered normals in index order, beginning at ``start``."""
        return self._normals[start:]

    def __len__(self) -> int:
        return len(self._normals)

    def __contains__(self, normal: object) -> bool:
        return normal in self._indices
