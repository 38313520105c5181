"""Configuration surface for JSDoc generation.

Settings are read from a JSON file (``.jsdoc-generator.json`` in the scope
root by default). Keys may be written in camelCase as in the editor
extension settings (``includeTypes``), in snake_case (``include_types``), or
with the ``jsdoc-generator.`` prefix (``jsdoc-generator.includeTypes``).
"""

import json
import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .models.declaration_kind import DeclarationKind
from .models.header import ColumnLayout

CONFIG_FILE_NAME = ".jsdoc-generator.json"
SETTINGS_PREFIX = "jsdoc-generator."
DEFAULT_MODEL = "claude-sonnet-4-20250514"


@dataclass(frozen=True)
class CustomTag:
    """A user-configured tag appended to generated headers.

    Attributes:
        tag: Tag name without '@'.
        placeholder: Initial text of the tag's editable value.
        kinds: Declaration kinds the tag applies to; None means all kinds.
    """

    tag: str
    placeholder: str = ""
    kinds: Optional[Tuple[DeclarationKind, ...]] = None

    def applies_to(self, kind: DeclarationKind) -> bool:
        return self.kinds is None or kind in self.kinds

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomTag":
        """Build a CustomTag from its JSON form.

        Args:
            data: Mapping with 'tag', optional 'placeholder' and optional
                'kinds' (list of kind names such as 'class' or 'function').

        Returns:
            The parsed CustomTag.

        Raises:
            ValueError: If 'tag' is missing or a kind name is unknown.
        """
        if not isinstance(data, dict) or not data.get("tag"):
            raise ValueError(f"Custom tag must be an object with a 'tag' name: {data!r}")
        kinds = data.get("kinds")
        return cls(
            tag=str(data["tag"]).lstrip("@"),
            placeholder=str(data.get("placeholder", "")),
            kinds=tuple(DeclarationKind.from_name(k) for k in kinds) if kinds is not None else None,
        )


@dataclass
class GeneratorConfig:
    """All settings that shape generated headers.

    Defaults match the editor extension this tool mirrors.
    """

    include_types: bool = True
    include_export: bool = True
    include_async: bool = True
    include_return: bool = True
    description_placeholder: str = "Description placeholder"
    author: str = ""
    date_format: str = ""
    single_line_comments: bool = False
    empty_line_after_header: bool = True
    function_variables_as_functions: bool = True
    description_for_constructors: str = "Creates an instance of {Object}."
    include_parenthesis_for_multiple_types: bool = True
    custom_tags: List[CustomTag] = field(default_factory=list)
    tag_value_column_start: int = 0
    tag_name_column_start: int = 0
    tag_description_column_start: int = 0
    generative_model: str = DEFAULT_MODEL
    generative_api_key: str = ""
    generative_language: str = "English"
    generate_description_for_type_parameters: bool = False
    generate_description_for_parameters: bool = False
    generate_description_for_returns: bool = False

    @property
    def column_layout(self) -> ColumnLayout:
        return ColumnLayout(
            value=self.tag_value_column_start,
            name=self.tag_name_column_start,
            description=self.tag_description_column_start,
        )

    @property
    def api_key(self) -> Optional[str]:
        """API key for the generative service, None when unavailable."""
        return self.generative_api_key or os.environ.get("ANTHROPIC_API_KEY") or None

    def with_overrides(self, **changes: Any) -> "GeneratorConfig":
        """Return a copy with the given non-None settings replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Build a configuration from a settings mapping.

        Args:
            data: Settings keyed by camelCase, snake_case or prefixed names.

        Returns:
            The configuration with unspecified settings at their defaults.

        Raises:
            ValueError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = normalize_key(raw_key)
            if key not in known:
                raise ValueError(f"Unknown configuration key: {raw_key}")
            if key == "custom_tags":
                if not isinstance(value, list):
                    raise ValueError("customTags must be a list")
                values[key] = [CustomTag.from_dict(item) for item in value]
                continue
            default = getattr(cls, key)
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    raise ValueError(f"{raw_key} must be true or false, got {value!r}")
            elif isinstance(default, int):
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise ValueError(f"{raw_key} must be a non-negative integer, got {value!r}")
            elif not isinstance(value, str):
                raise ValueError(f"{raw_key} must be a string, got {value!r}")
            values[key] = value
        return cls(**values)

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a configuration file.

        Args:
            path: Path to a JSON settings file.

        Returns:
            The parsed configuration.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a JSON object or holds bad settings.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        return cls.from_dict(data)


def normalize_key(key: str) -> str:
    """Turn 'jsdoc-generator.includeTypes' or 'includeTypes' into 'include_types'."""
    if key.startswith(SETTINGS_PREFIX):
        key = key[len(SETTINGS_PREFIX) :]
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def find_config_file(root: Path) -> Optional[Path]:
    """Return the settings file of a scope root, searching parent directories.

    Args:
        root: File or directory the request targets.

    Returns:
        Path to the nearest ``.jsdoc-generator.json``, or None.
    """
    start = root if root.is_dir() else root.parent
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
