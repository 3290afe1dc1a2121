"""Error taxonomy for build scanning."""

from __future__ import annotations

from typing import Any, Optional


class BuildScanError(Exception):
    """Base error for project model resolution and source listing.

    Attributes:
        message: Human-readable error description.
        file: Path to the file or directory involved, if any.
        error_type: Machine-readable error category.
    """

    default_error_type = "buildscan_error"

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        self.error_type = error_type or self.default_error_type

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        return result

    def __str__(self) -> str:
        if self.file:
            return f"{self.message} | file: {self.file}"
        return self.message


class ConfigurationError(BuildScanError):
    """Settings or scan configuration is unreadable or malformed."""

    default_error_type = "config_invalid"


class CacheInitializationError(BuildScanError):
    """The persistent descriptor cache could not be constructed."""

    default_error_type = "cache_init_failed"


class DependencyResolutionError(BuildScanError):
    """A classpath was not resolved before source listing."""

    default_error_type = "dependency_resolution_required"


class FileSystemWalkError(BuildScanError):
    """An I/O failure occurred while walking an existing source tree."""

    default_error_type = "filesystem_walk_failed"


class ParseAggregationError(BuildScanError):
    """An external parser produced no result for a required input."""

    default_error_type = "parse_no_result"
