"""Tests for configuration loading."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from jsdocgen.config import (
    CONFIG_FILE_NAME,
    CustomTag,
    GeneratorConfig,
    find_config_file,
    normalize_key,
)
from jsdocgen.models.declaration_kind import DeclarationKind


class TestDefaults:
    """Test default settings."""

    def test_defaults_match_extension(self):
        config = GeneratorConfig()

        assert config.include_types is True
        assert config.include_return is True
        assert config.description_placeholder == "Description placeholder"
        assert config.function_variables_as_functions is True
        assert config.description_for_constructors == "Creates an instance of {Object}."
        assert config.custom_tags == []
        assert config.column_layout.value == 0

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        assert GeneratorConfig().api_key == "sk-env"

    def test_configured_api_key_wins(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        assert GeneratorConfig(generative_api_key="sk-file").api_key == "sk-file"

    def test_no_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert GeneratorConfig().api_key is None


class TestFromDict:
    """Test building configurations from settings mappings."""

    @pytest.mark.parametrize(
        "key",
        ["includeTypes", "include_types", "jsdoc-generator.includeTypes"],
    )
    def test_key_spellings(self, key):
        config = GeneratorConfig.from_dict({key: False})
        assert config.include_types is False

    def test_column_settings(self):
        config = GeneratorConfig.from_dict(
            {"tagValueColumnStart": 10, "tagNameColumnStart": 20, "tagDescriptionColumnStart": 30}
        )

        assert config.column_layout.value == 10
        assert config.column_layout.name == 20
        assert config.column_layout.description == 30

    def test_custom_tags(self):
        config = GeneratorConfig.from_dict(
            {"customTags": [{"tag": "@since", "placeholder": "1.0", "kinds": ["class", "function"]}]}
        )

        tag = config.custom_tags[0]
        assert tag.tag == "since"
        assert tag.placeholder == "1.0"
        assert tag.applies_to(DeclarationKind.CLASS_LIKE)
        assert tag.applies_to(DeclarationKind.METHOD)
        assert not tag.applies_to(DeclarationKind.PROPERTY)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown configuration key"):
            GeneratorConfig.from_dict({"includeEverything": True})

    @pytest.mark.parametrize(
        "data",
        [
            {"includeTypes": "yes"},
            {"tagValueColumnStart": -1},
            {"tagValueColumnStart": True},
            {"author": 5},
            {"customTags": {"tag": "since"}},
            {"customTags": [{"placeholder": "no tag"}]},
            {"customTags": [{"tag": "since", "kinds": ["module"]}]},
        ],
    )
    def test_invalid_values_rejected(self, data):
        with pytest.raises(ValueError):
            GeneratorConfig.from_dict(data)

    def test_with_overrides_ignores_none(self):
        config = GeneratorConfig().with_overrides(author="Ada", include_types=None)

        assert config.author == "Ada"
        assert config.include_types is True


class TestLoad:
    """Test loading settings files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(json.dumps({"singleLineComments": True}))

        assert GeneratorConfig.load(path).single_line_comments is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GeneratorConfig.load(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            GeneratorConfig.load(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("[]")

        with pytest.raises(ValueError, match="JSON object"):
            GeneratorConfig.load(path)

    def test_find_config_in_parent(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("{}")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        source = nested / "a.ts"
        source.write_text("")

        assert find_config_file(source) == tmp_path / CONFIG_FILE_NAME
        assert find_config_file(nested) == tmp_path / CONFIG_FILE_NAME


def test_normalize_key():
    assert normalize_key("jsdoc-generator.emptyLineAfterHeader") == "empty_line_after_header"
    assert normalize_key("generateDescriptionForReturns") == "generate_description_for_returns"


def test_custom_tag_without_kinds_applies_everywhere():
    tag = CustomTag.from_dict({"tag": "see"})
    assert all(tag.applies_to(kind) for kind in DeclarationKind)
