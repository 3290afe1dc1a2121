"""Attach provenance markers to parsed source units."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from scripts.buildscan.markers import Generated, GitProvenance, JavaSourceSet, Marker
from scripts.buildscan.model import SourceUnit
from scripts.buildscan.sources import GeneratedRootSet


class ProvenanceTagger:
    """Decorates units with project, source-set and generated markers.

    Every insertion is add-if-absent, so markers a parser already attached
    are kept.
    """

    def __init__(
        self,
        base_dir: Path | str,
        project_markers: Sequence[Marker],
        generated_roots: Optional[GeneratedRootSet] = None,
    ):
        self.base_dir = Path(base_dir)
        self.project_markers = list(project_markers)
        if generated_roots is None:
            generated_roots = GeneratedRootSet()
        self.generated_roots = generated_roots

    def tag(self, unit: SourceUnit, source_set: Optional[JavaSourceSet] = None) -> SourceUnit:
        for marker in self.project_markers:
            unit.markers.insert_if_absent(marker)
        if source_set is not None:
            unit.markers.insert_if_absent(source_set)
        if self.base_dir / unit.source_path in self.generated_roots:
            unit.markers.insert_if_absent(Generated())
        return unit

    def tag_all(
        self,
        units: Iterable[SourceUnit],
        source_set: Optional[JavaSourceSet] = None,
    ) -> list[SourceUnit]:
        return [self.tag(unit, source_set) for unit in units]


def attach_vcs(units: Iterable[SourceUnit], provenance: Optional[GitProvenance]) -> list[SourceUnit]:
    """Give every unit the run-wide version-control marker."""
    units = list(units)
    if provenance is None:
        return units
    for unit in units:
        unit.markers.add(provenance)
    return units
