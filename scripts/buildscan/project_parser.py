"""Project model resolution and tagged source listing for one Maven project.

Steps run sequentially for one invocation:

1. settings, descriptor cache and descriptor candidates feed the external
   descriptor parser, whose merged model receives project-level markers;
2. main sources (generated output first) are parsed against the compile
   classpath and tagged with the ``main`` source set;
3. test sources are parsed against the test classpath and tagged ``test``;
4. every unit receives the run-wide version-control marker.

Missing settings, an unusable persistent cache and missing source roots
degrade. Unresolved classpaths, walk failures and an empty descriptor parse
abort the whole operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence

from scripts.buildscan.config import ScanConfig, discover_config
from scripts.buildscan.context import ExecutionContext
from scripts.buildscan.errors import DependencyResolutionError, ParseAggregationError
from scripts.buildscan.graph import resolve_candidates
from scripts.buildscan.markers import (
    BuildTool,
    GitProvenance,
    JavaProject,
    JavaSourceSet,
    JavaVersion,
    Marker,
)
from scripts.buildscan.model import BuildLayout, ProjectNode, SourceUnit
from scripts.buildscan.platform_info import PlatformInfo, detect_platform_info
from scripts.buildscan.pom_cache import PomCache, initialize_cache
from scripts.buildscan.settings import load_settings
from scripts.buildscan.sources import GeneratedRootSet, list_sources
from scripts.buildscan.tagger import ProvenanceTagger, attach_vcs
from scripts.buildscan.vcs import git_provenance

logger = logging.getLogger(__name__)

MAVEN_CONFIG_PATH = Path(".mvn") / "maven.config"


@dataclass
class DescriptorParseRequest:
    """Everything the descriptor parser needs for one batch."""

    paths: list[Path]
    base_dir: Path
    cache: PomCache
    active_profiles: list[str] = field(default_factory=list)
    maven_config: Optional[Path] = None


class DescriptorParser(Protocol):
    def parse(self, request: DescriptorParseRequest, ctx: ExecutionContext) -> Iterable[SourceUnit]: ...


class SourceParser(Protocol):
    def parse(
        self,
        paths: list[Path],
        base_dir: Path,
        ctx: ExecutionContext,
        classpath: list[Path],
        styles: Sequence[Any] = (),
    ) -> Iterable[SourceUnit]: ...


VcsProvenanceFn = Callable[[Path], Optional[GitProvenance]]


def _distinct_classpath(elements: Optional[list[str]], scope: str) -> list[Path]:
    if elements is None:
        raise DependencyResolutionError(f"The {scope} classpath has not been resolved")
    return [Path(e) for e in dict.fromkeys(elements)]


class ProjectParser:
    """Resolves the project model and lists tagged sources for a project."""

    def __init__(
        self,
        project: ProjectNode,
        platform: Optional[PlatformInfo] = None,
        config: Optional[ScanConfig] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.project = project
        self.platform = platform or detect_platform_info()
        self.config = config if config is not None else discover_config(project.basedir)
        self.log = log or logger
        self.pom_cache: Optional[PomCache] = None
        self.project_provenance: list[Marker] = self._project_provenance()

    def _project_provenance(self) -> list[Marker]:
        runtime_version = self.platform.runtime_version
        compiler = self.project.compiler
        return [
            BuildTool(type="Maven", version=self.platform.build_tool_version),
            JavaVersion(
                created_by=runtime_version,
                vm_vendor=self.platform.vendor,
                source_compatibility=compiler.source_or(runtime_version),
                target_compatibility=compiler.target_or(runtime_version),
            ),
            JavaProject(
                project_name=self.project.name,
                group_id=self.project.group_id,
                artifact_id=self.project.artifact_id,
                version=self.project.version,
            ),
        ]

    def parse_project_model(
        self,
        base_dir: Path | str,
        pom_cache_enabled: Optional[bool],
        pom_cache_directory: Optional[Path | str],
        ctx: ExecutionContext,
        descriptor_parser: DescriptorParser,
    ) -> SourceUnit:
        """Parse the project's descriptors into one merged model.

        ``pom_cache_enabled`` and ``pom_cache_directory`` fall back to the
        scan configuration when None. A cache left open by an earlier call is
        closed first; the new one stays open until ``close()`` or the end of a
        ``with`` block.

        Raises:
            ParseAggregationError: If the descriptor parser yields nothing.
        """
        base_dir = Path(base_dir)
        if pom_cache_enabled is None:
            pom_cache_enabled = self.config.pom_cache.enabled
        if pom_cache_directory is None:
            pom_cache_directory = self.config.pom_cache.directory

        settings = load_settings(ctx, settings_path=self.config.settings_path, log=self.log)
        self.close()
        self.pom_cache = initialize_cache(pom_cache_enabled, pom_cache_directory, log=self.log)
        candidates = resolve_candidates(self.project, log=self.log)

        request = DescriptorParseRequest(
            paths=candidates,
            base_dir=base_dir,
            cache=self.pom_cache,
            active_profiles=list(settings.active_profiles) if settings else [],
            maven_config=base_dir / MAVEN_CONFIG_PATH,
        )
        model = next(iter(descriptor_parser.parse(request, ctx)), None)
        if model is None:
            self.close()
            raise ParseAggregationError(
                f"Descriptor parser produced no model for {len(candidates)} descriptor(s)",
                file=str(candidates[0]) if candidates else None,
            )

        for marker in self.project_provenance:
            model.markers.insert_if_absent(marker)
        return model

    def list_source_files(
        self,
        base_dir: Path | str,
        styles: Sequence[Any],
        ctx: ExecutionContext,
        source_parser: SourceParser,
        vcs_provenance: Optional[VcsProvenanceFn] = None,
    ) -> list[SourceUnit]:
        """Parse and tag the project's main and test sources.

        Raises:
            DependencyResolutionError: If a classpath was not resolved.
            FileSystemWalkError: If an existing source root cannot be walked.
        """
        base_dir = Path(base_dir)
        extension = self.config.source_extension
        build = self.project.build or BuildLayout.conventional(self.project.basedir or base_dir)

        # Some annotation processors write generated sources under the build directory
        generated = GeneratedRootSet.from_directory(build.directory, extension)
        seen: set[Path] = set()
        main_paths = self._first_occurrences(
            generated.paths + list_sources(build.source_directory, extension), seen, "main"
        )
        tagger = ProvenanceTagger(base_dir, self.project_provenance, generated)

        self.log.info("Parsing Java main files...")
        main_classpath = _distinct_classpath(self.project.compile_classpath_elements, "compile")
        main_units = source_parser.parse(main_paths, base_dir, ctx, main_classpath, styles)
        source_files = tagger.tag_all(main_units, JavaSourceSet.build("main", main_classpath))

        self.log.info("Parsing Java test files...")
        test_classpath = _distinct_classpath(self.project.test_classpath_elements, "test")
        test_paths = self._first_occurrences(
            list_sources(build.test_source_directory, extension), seen, "test"
        )
        test_units = source_parser.parse(test_paths, base_dir, ctx, test_classpath, styles)
        source_files.extend(tagger.tag_all(test_units, JavaSourceSet.build("test", test_classpath)))

        provenance = None
        if self.config.vcs.enabled:
            provenance = (vcs_provenance or git_provenance)(base_dir)
        return attach_vcs(source_files, provenance)

    def _first_occurrences(self, paths: list[Path], seen: set[Path], source_set: str) -> list[Path]:
        result = []
        for path in paths:
            key = path.resolve()
            if key in seen:
                self.log.warning(
                    f"{path} is listed by more than one source root, keeping its first occurrence "
                    f"(skipped in {source_set})"
                )
                continue
            seen.add(key)
            result.append(path)
        return result

    def close(self) -> None:
        """Release the descriptor cache opened by the last model parse."""
        if self.pom_cache is not None:
            self.pom_cache.close()
            self.pom_cache = None

    def __enter__(self) -> ProjectParser:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
