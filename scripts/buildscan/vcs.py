"""Git provenance for a project directory."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from scripts.buildscan.markers import GitProvenance

logger = logging.getLogger(__name__)


def _git(directory: Path, *args: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(directory),
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        )
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None
    return result.stdout.strip() or None


def git_provenance(directory: Path | str) -> Optional[GitProvenance]:
    """Describe the git checkout containing ``directory``.

    Returns:
        GitProvenance with origin URL, branch and commit, or None when the
        directory is not inside a git work tree or git is unavailable.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None
    if _git(directory, "rev-parse", "--is-inside-work-tree") != "true":
        logger.debug(f"{directory} is not inside a git work tree")
        return None

    branch = _git(directory, "rev-parse", "--abbrev-ref", "HEAD")
    if branch == "HEAD":
        # Detached checkout
        branch = None

    return GitProvenance(
        origin=_git(directory, "config", "--get", "remote.origin.url"),
        branch=branch,
        change=_git(directory, "rev-parse", "HEAD"),
    )
