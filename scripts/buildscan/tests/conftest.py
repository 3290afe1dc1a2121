"""Shared fixtures for buildscan tests."""

from pathlib import Path

import pytest

from scripts.buildscan.config import ScanConfig, PomCacheConfig
from scripts.buildscan.model import BuildLayout, ProjectNode, SourceUnit
from scripts.buildscan.platform_info import StaticPlatformInfo


class RecordingSourceParser:
    """Source parser double producing one unit per path."""

    def __init__(self):
        self.calls = []

    def parse(self, paths, base_dir, ctx, classpath, styles=()):
        self.calls.append({"paths": list(paths), "classpath": list(classpath), "styles": styles})
        return [
            SourceUnit(source_path=Path(p).relative_to(base_dir), content=Path(p).read_text())
            for p in paths
        ]


class RecordingDescriptorParser:
    """Descriptor parser double returning a single merged model, or nothing."""

    def __init__(self, produce=True):
        self.produce = produce
        self.requests = []

    def parse(self, request, ctx):
        self.requests.append(request)
        if not self.produce:
            return []
        return [SourceUnit(source_path=Path("pom.xml"), content="merged")]


def write_java(path: Path, class_name: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"class {class_name} {{}}\n")
    return path


@pytest.fixture
def platform():
    return StaticPlatformInfo(
        runtime_version="17.0.9+9",
        vendor="Eclipse Adoptium",
        build_tool_version="3.9.6",
    )


@pytest.fixture
def scan_config(tmp_path):
    """Config that keeps the cache and settings inside the test directory."""
    return ScanConfig(
        settings_path=str(tmp_path / "home" / ".m2" / "settings.xml"),
        pom_cache=PomCacheConfig(enabled=True, directory=str(tmp_path / "cache")),
    )


@pytest.fixture
def maven_project(tmp_path):
    """Single-module project with two main sources and one test source."""
    basedir = tmp_path / "lib"
    (basedir).mkdir()
    (basedir / "pom.xml").write_text("<project/>")
    write_java(basedir / "src" / "main" / "java" / "org" / "acme" / "Api.java", "Api")
    write_java(basedir / "src" / "main" / "java" / "org" / "acme" / "internal" / "Impl.java", "Impl")
    write_java(basedir / "src" / "test" / "java" / "org" / "acme" / "ApiTest.java", "ApiTest")

    return ProjectNode(
        file=basedir / "pom.xml",
        group_id="org.acme",
        artifact_id="lib",
        version="1.0",
        name="Acme Lib",
        build=BuildLayout.conventional(basedir),
        compile_classpath_elements=[
            str(basedir / "target" / "classes"),
            "/repo/guava.jar",
            "/repo/slf4j-api.jar",
        ],
        test_classpath_elements=[
            str(basedir / "target" / "test-classes"),
            str(basedir / "target" / "classes"),
            "/repo/guava.jar",
            "/repo/junit.jar",
        ],
    )


@pytest.fixture
def java_file():
    """Writer for small Java sources."""
    return write_java


@pytest.fixture
def source_parser():
    return RecordingSourceParser()


@pytest.fixture
def descriptor_parser():
    return RecordingDescriptorParser()
