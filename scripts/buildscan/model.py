"""Project model view and source unit types."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from scripts.buildscan.markers import MarkerSet

COMPILER_SOURCE_PROPERTY = "maven.compiler.source"
COMPILER_TARGET_PROPERTY = "maven.compiler.target"
COMPILER_RELEASE_PROPERTY = "maven.compiler.release"


@dataclass
class BuildLayout:
    """Build directories of a project, as configured in its descriptor."""

    directory: str  # build output, e.g. target/
    source_directory: str
    test_source_directory: str

    @classmethod
    def conventional(cls, basedir: Path | str) -> "BuildLayout":
        """Standard Maven layout rooted at a project directory."""
        basedir = Path(basedir)
        return cls(
            directory=str(basedir / "target"),
            source_directory=str(basedir / "src" / "main" / "java"),
            test_source_directory=str(basedir / "src" / "test" / "java"),
        )


@dataclass(frozen=True)
class CompilerSettings:
    """Explicit compiler level overrides declared by a project.

    ``release`` takes precedence over ``source`` and ``target`` the same way
    the compiler plugin treats it.
    """

    source: Optional[str] = None
    target: Optional[str] = None
    release: Optional[str] = None

    @classmethod
    def from_properties(cls, properties: dict[str, str]) -> "CompilerSettings":
        """Read the maven.compiler.* properties of a project."""
        return cls(
            source=properties.get(COMPILER_SOURCE_PROPERTY),
            target=properties.get(COMPILER_TARGET_PROPERTY),
            release=properties.get(COMPILER_RELEASE_PROPERTY),
        )

    def source_or(self, default: str) -> str:
        """Effective source level, or ``default`` when nothing is declared."""
        return self.release or self.source or default

    def target_or(self, default: str) -> str:
        """Effective target level, or ``default`` when nothing is declared."""
        return self.release or self.target or default


@dataclass(eq=False)
class ProjectNode:
    """Read-only view of one module of the live project model.

    ``file`` is None for synthetic parents that have no backing descriptor
    (for example the super POM). Classpath element lists are None until the
    build resolved them.
    """

    file: Optional[Path]
    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    name: Optional[str] = None
    properties: dict[str, str] = field(default_factory=dict)
    build: Optional[BuildLayout] = None
    parent: Optional["ProjectNode"] = field(default=None, repr=False)
    collected_projects: Optional[list["ProjectNode"]] = field(default=None, repr=False)
    compile_classpath_elements: Optional[list[str]] = None
    test_classpath_elements: Optional[list[str]] = None

    @property
    def basedir(self) -> Optional[Path]:
        return self.file.parent if self.file is not None else None

    @property
    def compiler(self) -> CompilerSettings:
        return CompilerSettings.from_properties(self.properties)


@dataclass
class SourceUnit:
    """A parsed artifact and the provenance markers attached to it."""

    source_path: Path  # relative to the base directory
    content: Any = None
    markers: MarkerSet = field(default_factory=MarkerSet)
