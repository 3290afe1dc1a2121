"""Provenance markers attached to project models and source units.

Markers are immutable values. A unit holds at most one marker per kind in a
MarkerSet, and insertion through ``insert_if_absent`` never replaces an
existing entry: the first writer wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Union


@dataclass(frozen=True)
class BuildTool:
    """Build tool that produced the project model."""

    kind: ClassVar[str] = "build_tool"

    type: str
    version: str


@dataclass(frozen=True)
class JavaVersion:
    """Runtime and compatibility levels the sources are compiled under."""

    kind: ClassVar[str] = "java_version"

    created_by: str
    vm_vendor: str
    source_compatibility: str
    target_compatibility: str


@dataclass(frozen=True)
class JavaProject:
    """Coordinates of the project a unit belongs to."""

    kind: ClassVar[str] = "java_project"

    project_name: Optional[str]
    group_id: str
    artifact_id: str
    version: str


@dataclass(frozen=True)
class JavaSourceSet:
    """Source set membership with the classpath used to parse it."""

    kind: ClassVar[str] = "java_source_set"

    name: str
    classpath: tuple[Path, ...] = ()

    @classmethod
    def build(cls, name: str, classpath) -> "JavaSourceSet":
        """Create a source set marker from any iterable of classpath entries."""
        return cls(name=name, classpath=tuple(Path(p) for p in classpath))


@dataclass(frozen=True)
class Generated:
    """Flags a unit emitted by an annotation processor or code generator."""

    kind: ClassVar[str] = "generated"


@dataclass(frozen=True)
class GitProvenance:
    """Version-control origin of the working tree."""

    kind: ClassVar[str] = "vcs"

    origin: Optional[str]
    branch: Optional[str]
    change: Optional[str]


Marker = Union[BuildTool, JavaVersion, JavaProject, JavaSourceSet, Generated, GitProvenance]


@dataclass
class MarkerSet:
    """Ordered mapping from marker kind to marker."""

    _entries: dict[str, Marker] = field(default_factory=dict)

    def insert_if_absent(self, marker: Marker) -> bool:
        """Insert a marker unless one of the same kind is already present.

        Returns:
            True if the marker was inserted, False if the kind was taken.
        """
        if marker.kind in self._entries:
            return False
        self._entries[marker.kind] = marker
        return True

    def add(self, marker: Marker) -> None:
        """Set the marker for its kind, replacing any previous value."""
        self._entries[marker.kind] = marker

    def get(self, marker_type: type) -> Optional[Marker]:
        """Return the marker of the given class, or None."""
        return self._entries.get(marker_type.kind)

    def __contains__(self, marker_type: type) -> bool:
        return marker_type.kind in self._entries

    def __iter__(self) -> Iterator[Marker]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def kinds(self) -> list[str]:
        """Marker kinds in insertion order."""
        return list(self._entries)
