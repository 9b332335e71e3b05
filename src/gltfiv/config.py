"""Conversion options and their YAML loader."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from gltfiv.errors import ConfigError
from gltfiv.warning_policy import WarningPolicy, parse_code_list


class ConversionOptions(BaseModel):
    """Options for one conversion run.

    ``binary`` is not interpreted by the converter; it is forwarded to the
    writer as-is.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    binary: bool = False
    normal_list: Literal["delta", "snapshot"] = "delta"
    warn_as_error: frozenset[str] = frozenset()
    suppress: frozenset[str] = frozenset()

    @field_validator("warn_as_error", "suppress", mode="before")
    @classmethod
    def _parse_codes(cls, value: object) -> object:
        if isinstance(value, (str, list, tuple, set, frozenset)):
            return parse_code_list(value)
        return value

    @property
    def warning_policy(self) -> WarningPolicy | None:
        if not self.warn_as_error and not self.suppress:
            return None
        return WarningPolicy(warn_as_error=self.warn_as_error, suppress=self.suppress)


def load_options(source: Path) -> ConversionOptions:
    """Parse a YAML options file.

    Args:
        source: Path to the options YAML file.

    Returns:
        Parsed ConversionOptions.

    Raises:
        ConfigError: On read, parse or schema errors.
    """
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read options file: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in options: {e}") from e

    if data is None:
        return ConversionOptions()
    if not isinstance(data, dict):
        raise ConfigError("Options top-level YAML value must be a mapping")

    try:
        return ConversionOptions(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Options schema validation failed:\n{e}") from e
