"""Source file enumeration for build source roots."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from scripts.buildscan.config import DEFAULT_SOURCE_EXTENSION
from scripts.buildscan.errors import FileSystemWalkError


def list_sources(
    source_directory: Path | str,
    extension: str = DEFAULT_SOURCE_EXTENSION,
) -> list[Path]:
    """List every file ending with ``extension`` below a source root.

    Directories and file names are visited in sorted order so repeated runs
    over the same tree return the same sequence.

    Args:
        source_directory: Root to walk.
        extension: File name suffix to keep (e.g. '.java').

    Returns:
        Matching file paths, or an empty list when the root does not exist.

    Raises:
        FileSystemWalkError: If walking an existing tree fails.
    """
    root = Path(source_directory)
    if not root.exists():
        return []
    if not root.is_dir():
        return [root] if root.name.endswith(extension) else []

    def _fail(error: OSError) -> None:
        raise FileSystemWalkError(f"Unable to list source files: {error}", file=str(root)) from error

    sources: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_fail):
        dirnames.sort()
        current = Path(dirpath)
        for filename in sorted(filenames):
            if filename.endswith(extension):
                sources.append(current / filename)
    return sources


class GeneratedRootSet:
    """Membership test for paths produced by code generation.

    Holds generated root directories and the files enumerated below them. A
    path is generated if it equals a known file or root, or is nested under a
    root.
    """

    def __init__(self, roots: Iterable[Path | str] = (), files: Iterable[Path | str] = ()):
        self.roots = [_normalize(r) for r in roots]
        self.paths = [Path(f) for f in files]  # enumeration order, as given
        self.files = {_normalize(f) for f in self.paths}

    @classmethod
    def from_directory(
        cls,
        directory: Optional[Path | str],
        extension: str = DEFAULT_SOURCE_EXTENSION,
    ) -> "GeneratedRootSet":
        """Enumerate a generated-output directory once."""
        if directory is None:
            return cls()
        return cls(roots=[directory], files=list_sources(directory, extension))

    def __contains__(self, path: Path | str) -> bool:
        candidate = _normalize(path)
        if candidate in self.files:
            return True
        return any(candidate == root or root in candidate.parents for root in self.roots)

    def __len__(self) -> int:
        return len(self.paths)


def _normalize(path: Path | str) -> Path:
    return Path(os.path.abspath(path))
