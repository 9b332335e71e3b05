"""Tests for conversion options."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from gltfiv.config import ConversionOptions, load_options
from gltfiv.errors import ConfigError


class TestConversionOptions:
    def test_defaults(self):
        options = ConversionOptions()
        assert options.binary is False
        assert options.normal_list == "delta"
        assert options.warning_policy is None

    def test_codes_from_string(self):
        options = ConversionOptions(warn_as_error="W01, W02")
        assert options.warn_as_error == frozenset({"W01", "W02"})
        assert options.warning_policy.warn_as_error == frozenset({"W01", "W02"})

    def test_unknown_code_rejected(self):
        with pytest.raises(PydanticValidationError, match="Unknown warning code"):
            ConversionOptions(suppress=["W42"])

    def test_unknown_normal_list_rejected(self):
        with pytest.raises(PydanticValidationError):
            ConversionOptions(normal_list="merged")

    def test_extra_field_rejected(self):
        with pytest.raises(PydanticValidationError):
            ConversionOptions(format="binary")


class TestLoadOptions:
    def test_load_valid(self, tmp_path):
        f = tmp_path / "gltfiv.yaml"
        f.write_text(
            "binary: true\n"
            "normal_list: snapshot\n"
            "suppress:\n"
            "  - W02\n"
            "  - W03\n"
        )
        options = load_options(f)
        assert options.binary is True
        assert options.normal_list == "snapshot"
        assert options.warning_policy.suppress == frozenset({"W02", "W03"})

    def test_empty_file_gives_defaults(self, tmp_path):
        f = tmp_path / "gltfiv.yaml"
        f.write_text("")
        assert load_options(f) == ConversionOptions()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_options(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("{{{{bad yaml")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_options(f)

    def test_non_mapping(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- binary\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_options(f)

    def test_schema_error(self, tmp_path):
        f = tmp_path / "schema.yaml"
        f.write_text("normal_list: sometimes\n")
        with pytest.raises(ConfigError, match="schema validation failed"):
            load_options(f)
