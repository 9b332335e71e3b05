"""glTF material -> Inventor material approximation."""

from __future__ import annotations

import pygltflib

from gltfiv.inventor import Material
from gltfiv.warning_policy import TEXTURE_IGNORED, WarningPolicy, emit_warning

DEFAULT_BASE_COLOR = (1.0, 1.0, 1.0, 1.0)


def diffuse_color(material: pygltflib.Material | None) -> tuple[float, float, float]:
    """Base-color RGB of a material; alpha is dropped."""
    pbr = material.pbrMetallicRoughness if material is not None else None
    factor = pbr.baseColorFactor if pbr is not None and pbr.baseColorFactor else None
    if factor is None:
        factor = DEFAULT_BASE_COLOR
    return (float(factor[0]), float(factor[1]), float(factor[2]))


def convert_material(
    material: pygltflib.Material | None,
    *,
    warning_policy: WarningPolicy | None = None,
) -> Material:
    """Build a fixed Phong-style material from a glTF material.

    Only the base color survives, as the diffuse color. ``None`` converts
    as glTF's default material.
    """
    if material is not None:
        pbr = material.pbrMetallicRoughness
        if pbr is not None and pbr.baseColorTexture is not None:
            emit_warning(
                TEXTURE_IGNORED,
                f"base color texture of material {material.name!r} is ignored",
                policy=warning_policy,
            )

    return Material(
        ambient_color=(0.2, 0.2, 0.2),
        diffuse_color=diffuse_color(material),
        specular_color=(0.0, 0.0, 0.0),
        emissive_color=(0.0, 0.0, 0.0),
        shininess=0.2,
        transparency=0.0,
    )
