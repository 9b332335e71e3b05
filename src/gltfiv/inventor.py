"""Pydantic models for the Open Inventor output scene graph.

Every node carries a ``kind`` discriminator; :data:`IvNode` is the closed
union of all node kinds. Only :class:`Separator` has children.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Vec3 = tuple[float, float, float]

END_FACE_INDEX = -1


class Material(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["Material"] = "Material"
    ambient_color: Vec3 = (0.2, 0.2, 0.2)
    diffuse_color: Vec3 = (0.8, 0.8, 0.8)
    specular_color: Vec3 = (0.0, 0.0, 0.0)
    emissive_color: Vec3 = (0.0, 0.0, 0.0)
    shininess: float = 0.2
    transparency: float = 0.0


class MaterialBinding(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["MaterialBinding"] = "MaterialBinding"
    value: Literal["OVERALL"] = "OVERALL"


class Coordinate3(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["Coordinate3"] = "Coordinate3"
    point: list[Vec3] = Field(default_factory=list)


class Normal(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["Normal"] = "Normal"
    vector: list[Vec3] = Field(default_factory=list)


class NormalBinding(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["NormalBinding"] = "NormalBinding"
    value: Literal["PER_VERTEX_INDEXED"] = "PER_VERTEX_INDEXED"


class IndexedFaceSet(BaseModel):
    """Indexed faces; each face in both index lists ends with END_FACE_INDEX."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["IndexedFaceSet"] = "IndexedFaceSet"
    coord_index: list[int] = Field(default_factory=list)
    normal_index: list[int] = Field(default_factory=list)

    @property
    def face_count(self) -> int:
        return self.coord_index.count(END_FACE_INDEX)


class Separator(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["Separator"] = "Separator"
    children: list[IvNode] = Field(default_factory=list)

    def add_child(self, node: IvNode) -> None:
        self.children.append(node)

    def find_all(self, kind: str) -> list[IvNode]:
        """Return direct children of the given kind, in emission order."""
        return [child for child in self.children if child.kind == kind]


IvNode = Annotated[
    Union[
        Separator,
        Material,
        MaterialBinding,
        Coordinate3,
        Normal,
        NormalBinding,
        IndexedFaceSet,
    ],
    Field(discriminator="kind"),
]

Separator.model_rebuild()
