"""Runtime and build-tool information providers."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

_PROPERTY_LINE = re.compile(r"^\s*([\w.]+)\s*=\s*(.*)$")
_MAVEN_VERSION = re.compile(r"Apache Maven\s+(\S+)")


class PlatformInfo(Protocol):
    """Where runtime version, vendor and build-tool version come from."""

    runtime_version: str
    vendor: str
    build_tool_version: str


@dataclass(frozen=True)
class StaticPlatformInfo:
    """Fixed platform information."""

    runtime_version: str
    vendor: str
    build_tool_version: str


def _run(cmd: list[str]) -> Optional[subprocess.CompletedProcess]:
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"Running {cmd[0]} failed: {e}")
        return None


def parse_java_properties(output: str) -> dict[str, str]:
    """Parse the property listing printed by ``java -XshowSettings:properties``."""
    properties: dict[str, str] = {}
    for line in output.splitlines():
        match = _PROPERTY_LINE.match(line)
        if match:
            properties.setdefault(match.group(1), match.group(2).strip())
    return properties


def parse_maven_version(output: str) -> Optional[str]:
    """Extract the version from ``mvn --version`` output."""
    match = _MAVEN_VERSION.search(output)
    return match.group(1) if match else None


def detect_platform_info(java: str = "java", mvn: str = "mvn") -> StaticPlatformInfo:
    """Detect the installed JVM and Maven.

    Missing tools degrade to ``"unknown"`` values.
    """
    runtime_version = UNKNOWN
    vendor = UNKNOWN
    build_tool_version = UNKNOWN

    # The JVM prints its settings to stderr
    result = _run([java, "-XshowSettings:properties", "-version"])
    if result is not None:
        properties = parse_java_properties(result.stderr + "\n" + result.stdout)
        runtime_version = properties.get("java.runtime.version", UNKNOWN)
        vendor = properties.get("java.vm.vendor", UNKNOWN)

    result = _run([mvn, "--version"])
    if result is not None and result.returncode == 0:
        build_tool_version = parse_maven_version(result.stdout) or UNKNOWN

    return StaticPlatformInfo(
        runtime_version=runtime_version,
        vendor=vendor,
        build_tool_version=build_tool_version,
    )
