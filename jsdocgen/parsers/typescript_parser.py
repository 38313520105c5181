"""TypeScript/JavaScript parser using Node.js and the TypeScript compiler.

This parser spawns a Node.js subprocess running ``helpers/ts-syntax-tree.js``,
which parses the file text with the TypeScript compiler API, asks the type
checker about every declaration, and prints the syntax tree as JSON.
"""

import json
import os
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..models.syntax_node import SyntaxNode
from .base_parser import BaseParser

HELPER_ENV_VAR = "JSDOCGEN_TS_HELPER_PATH"
HELPER_FILE_NAME = "ts-syntax-tree.js"

# File extension to language mapping
EXTENSION_MAP = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}


def language_of(filename: str) -> Optional[str]:
    """Return 'typescript' or 'javascript' for a supported file, else None."""
    return EXTENSION_MAP.get(Path(filename).suffix.lower())


def _utf16_index_map(text: str) -> Optional[List[int]]:
    """Map UTF-16 code unit offsets to Python string indices.

    The TypeScript compiler counts offsets in UTF-16 code units, so every
    character outside the Basic Multilingual Plane shifts later offsets by
    one. Returns None when the text has no such character and offsets can be
    used as they are.
    """
    if not text or max(text) <= "\uffff":
        return None
    mapping: List[int] = []
    for index, char in enumerate(text):
        mapping.append(index)
        if ord(char) > 0xFFFF:
            mapping.append(index)
    mapping.append(len(text))
    return mapping


def build_syntax_tree(data: Dict[str, Any], source: str) -> SyntaxNode:
    """Convert the helper's JSON tree into linked SyntaxNode objects.

    Args:
        data: JSON object for the root node, as printed by the helper.
        source: The text that was parsed.

    Returns:
        The root SyntaxNode, with parents linked and node texts sliced from
        ``source``.
    """
    mapping = _utf16_index_map(source)

    def convert(offset: int) -> int:
        return mapping[offset] if mapping is not None else offset

    return _build_node(data, source, convert, None)


def _build_node(
    data: Dict[str, Any],
    source: str,
    convert: Callable[[int], int],
    parent: Optional[SyntaxNode],
) -> SyntaxNode:
    start = convert(data["start"])
    end = convert(data["end"])
    node = SyntaxNode(
        kind=data["kind"],
        full_start=convert(data.get("pos", data["start"])),
        start=start,
        end=end,
        text=source[start:end],
        name=data.get("name"),
        property_name=data.get("propertyName"),
        modifiers=list(data.get("modifiers", [])),
        type_annotation=data.get("type"),
        inferred_type=data.get("inferredType"),
        inferred_return_type=data.get("returnType"),
        initializer=data.get("initializer"),
        question_token=bool(data.get("questionToken", False)),
        exclamation_token=bool(data.get("exclamationToken", False)),
        dot_dot_dot_token=bool(data.get("dotDotDotToken", False)),
        asterisk_token=bool(data.get("asteriskToken", False)),
        jsdoc=data.get("jsDoc"),
        token=data.get("token"),
        expression=data.get("expression"),
        type_arguments=list(data.get("typeArguments", [])),
        constraint=data.get("constraint"),
        default=data.get("default"),
        parent=parent,
    )
    node.children = [_build_node(child, source, convert, node) for child in data.get("children", [])]
    return node


class TypeScriptParser(BaseParser):
    """
    Parser for TypeScript and JavaScript files using the TypeScript compiler.

    Handles .ts, .tsx, .mts, .cts, .js, .jsx, .mjs and .cjs files. JavaScript
    files are parsed with ``allowJs`` so JSDoc types and inference still
    reach the type checker.
    """

    MAX_SUBPROCESS_OUTPUT_LEN = 200

    def __init__(self, helper_path: Path | None = None, timeout: float = 30.0):
        """Initialize the TypeScript parser and locate the Node.js helper script.

        Uses a three-tier resolution strategy:
        1. Explicit helper_path parameter (highest priority, for dependency injection)
        2. JSDOCGEN_TS_HELPER_PATH environment variable (for custom deployments)
        3. The helper bundled next to the package

        Args:
            helper_path: Optional explicit path to ts-syntax-tree.js.
                        If None, uses environment variable or auto-detection.
            timeout: Seconds to wait for the helper before giving up.

        Raises:
            FileNotFoundError: If the helper script cannot be found at the
                resolved path.
        """
        if helper_path:
            self.helper_path = helper_path
        else:
            env_path = os.environ.get(HELPER_ENV_VAR)
            self.helper_path = Path(env_path) if env_path else self._find_helper()
        self.timeout = timeout

        if not self.helper_path.exists():
            raise FileNotFoundError(
                f"TypeScript syntax tree helper not found at {self.helper_path}.\n"
                f"Options to resolve:\n"
                f"1. Install the compiler next to the helper: "
                f"'cd helpers && npm install typescript'\n"
                f"2. Set environment variable: "
                f"export {HELPER_ENV_VAR}=/path/to/{HELPER_FILE_NAME}\n"
                f"3. Pass helper_path parameter explicitly: "
                f"TypeScriptParser(helper_path=Path('/path/to/{HELPER_FILE_NAME}'))"
            )

    def _find_helper(self) -> Path:
        """Return the helper bundled with the project (may not exist)."""
        project_root = Path(__file__).parent.parent.parent
        return project_root / "helpers" / HELPER_FILE_NAME

    def _truncate_output(self, text: str) -> str:
        """Truncate subprocess output for error messages."""
        if len(text) > self.MAX_SUBPROCESS_OUTPUT_LEN:
            return text[: self.MAX_SUBPROCESS_OUTPUT_LEN] + "..."
        return text

    def parse(self, text: str, filename: str) -> SyntaxNode:
        """
        Parse TypeScript or JavaScript text into a syntax tree.

        Parameters
        ----------
        text : str
            Full text of the file
        filename : str
            File name; its extension selects TypeScript or JavaScript rules

        Returns
        -------
        SyntaxNode
            Root 'SourceFile' node

        Raises
        ------
        SyntaxError
            If the helper reports the text cannot be parsed
        RuntimeError
            If Node.js is missing, the helper times out, or its output is
            not valid JSON
        """
        try:
            result = subprocess.run(
                ["node", str(self.helper_path), filename],
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"TypeScript helper timed out while parsing {filename}")
        except FileNotFoundError:
            raise RuntimeError("Node.js executable 'node' not found. Install Node.js to parse TypeScript files.")

        try:
            tree_data = json.loads(result.stdout if result.stdout else result.stderr)
        except json.JSONDecodeError as e:
            stdout_preview = self._truncate_output(result.stdout)
            stderr_preview = self._truncate_output(result.stderr)
            raise RuntimeError(
                f"TypeScript helper returned invalid JSON "
                f"(returncode={result.returncode}).\n"
                f"JSONDecodeError: {e}\n"
                f"Stdout: {stdout_preview}\n"
                f"Stderr: {stderr_preview}"
            )

        if isinstance(tree_data, dict) and "error" in tree_data:
            raise SyntaxError(f"{filename}: {tree_data['error']}")
        if not isinstance(tree_data, dict) or tree_data.get("kind") != "SourceFile":
            raise RuntimeError(f"TypeScript helper returned an unexpected tree for {filename}")

        return build_syntax_tree(tree_data, text)
