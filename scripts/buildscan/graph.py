"""Descriptor candidate resolution for multi-module projects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from scripts.buildscan.model import ProjectNode

logger = logging.getLogger(__name__)


def resolve_candidates(
    project: ProjectNode,
    log: Optional[logging.Logger] = None,
) -> list[Path]:
    """Collect every descriptor the batch descriptor parser needs.

    Order: the project's own descriptor, then collected child modules in
    discovery order, then ancestors from nearest to root. The list carries no
    parent/child structure; the descriptor parser rebuilds it from content.

    Args:
        project: Project whose graph is resolved.
        log: Logger for diagnostics. Defaults to the module logger.

    Returns:
        Duplicate-free list of descriptor paths.
    """
    log = log or logger
    candidates: list[Path] = []
    seen: set[Path] = set()

    def _add(path: Path) -> bool:
        if path in seen:
            return False
        seen.add(path)
        candidates.append(path)
        return True

    if project.file is not None:
        _add(Path(project.file))

    for child in project.collected_projects or []:
        if child is project or child.file is None:
            continue
        _add(Path(child.file))

    # Stop at the first ancestor without a backing file (root reached)
    ancestry: set[Path] = {Path(project.file)} if project.file is not None else set()
    parent = project.parent
    while parent is not None and parent.file is not None:
        parent_file = Path(parent.file)
        if parent_file in ancestry:
            log.warning(f"Parent cycle detected at {parent_file}, stopping ancestor walk")
            break
        ancestry.add(parent_file)
        _add(parent_file)
        parent = parent.parent

    return candidates
