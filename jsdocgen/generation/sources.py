"""File enumeration and text acquisition."""

import asyncio
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Set

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from ..parsers.typescript_parser import EXTENSION_MAP

DEFAULT_FILE_GLOB = "**/*.{" + ",".join(ext.lstrip(".") for ext in EXTENSION_MAP) + "}"

_BRACE_GROUP = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand '{a,b}' groups of a glob pattern into separate patterns.

    >>> expand_braces("src/*.{ts,js}")
    ['src/*.ts', 'src/*.js']
    """
    match = _BRACE_GROUP.search(pattern)
    if match is None:
        return [pattern]
    expanded = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(pattern[: match.start()] + option + pattern[match.end() :]))
    return expanded


def glob_spec(glob: str) -> PathSpec:
    """Compile a glob into a PathSpec anchored at the scope root.

    '{a,b}' groups are expanded first. A pattern without a '/' is anchored
    so that '*.ts' only matches files directly under the root, like a shell
    glob; '**/' matches any number of directories, including none.
    """
    lines = []
    for pattern in expand_braces(glob):
        lines.append(pattern if "/" in pattern else f"/{pattern}")
    return PathSpec.from_lines(GitWildMatchPattern, lines)


def glob_matches(relative_path: str, glob: str) -> bool:
    """Match a '/'-separated path, relative to the scope root, against ``glob``."""
    return glob_spec(glob).match_file(relative_path)


class FileEnumerator(ABC):
    """Finds the files of a folder or workspace scope."""

    @abstractmethod
    async def find_files(self, glob: str, root: str) -> List[str]:
        """
        Find files under ``root`` matching ``glob``.

        Parameters
        ----------
        glob : str
            Glob pattern relative to ``root``; '{a,b}' groups are allowed
        root : str
            Directory to search

        Returns
        -------
        List[str]
            File paths, in the order they should be processed
        """
        pass


class FileSystemEnumerator(FileEnumerator):
    """Enumerates files on disk, skipping dependency and build directories.

    Args:
        exclude_patterns: Directory names to skip, merged with DEFAULT_EXCLUDES.
    """

    DEFAULT_EXCLUDES = {
        "node_modules",
        "bower_components",
        "dist",
        "build",
        "out",
        "coverage",
        ".git",
        ".hg",
        ".svn",
        ".next",
        ".cache",
    }

    def __init__(self, exclude_patterns: Optional[Set[str]] = None):
        self.exclude_patterns = self.DEFAULT_EXCLUDES.copy()
        if exclude_patterns:
            self.exclude_patterns.update(exclude_patterns)

    async def find_files(self, glob: str, root: str) -> List[str]:
        return await asyncio.to_thread(self._walk, glob, Path(root))

    def _walk(self, glob: str, root: Path) -> List[str]:
        spec = glob_spec(glob)
        files: List[str] = []
        for directory, dirs, filenames in os.walk(root):
            dirs[:] = [d for d in dirs if d not in self.exclude_patterns]
            for filename in filenames:
                path = Path(directory) / filename
                relative = path.relative_to(root).as_posix()
                if spec.match_file(relative):
                    files.append(str(path))
        return sorted(files)  # Sort for deterministic ordering


class DocumentSource(ABC):
    """Supplies the current text of a file."""

    @abstractmethod
    async def read(self, file: str) -> str:
        pass


class FileSystemDocuments(DocumentSource):
    """Reads file text from disk as UTF-8, keeping line endings."""

    async def read(self, file: str) -> str:
        return await asyncio.to_thread(self._read, file)

    @staticmethod
    def _read(file: str) -> str:
        with open(file, encoding="utf-8", newline="") as f:
            return f.read()
