"""User-level Maven settings loading.

Only the parts that influence descriptor resolution are extracted: the
local repository, active profiles, profile activation defaults, mirrors and
server ids.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from scripts.buildscan.config import SETTINGS_RELATIVE_PATH
from scripts.buildscan.context import ExecutionContext
from scripts.buildscan.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    """A settings profile and whether it activates when no other is active."""

    id: str
    active_by_default: bool = False


@dataclass
class Mirror:
    """Repository mirror; ``mirror_of`` is the repository pattern it replaces."""

    id: str
    url: Optional[str] = None
    mirror_of: Optional[str] = None


@dataclass
class Server:
    """Server credentials entry. Only the id and username are kept."""

    id: str
    username: Optional[str] = None


@dataclass
class MavenSettings:
    """Effective user settings.

    ``active_profiles`` holds only the explicitly listed ``<activeProfile>``
    names. Profiles active by default stay in ``profiles``; the descriptor
    parser applies Maven's activation rules to them.
    """

    local_repository: Optional[str] = None
    active_profiles: list[str] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)
    mirrors: list[Mirror] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)


def _local(tag: str) -> str:
    # settings.xml is usually namespaced: {http://maven.apache.org/SETTINGS/1.0.0}settings
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: Optional[ET.Element], name: str) -> Optional[str]:
    if element is None:
        return None
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def parse_settings(content: bytes | str, source: Optional[str] = None) -> MavenSettings:
    """Parse a settings document.

    Args:
        content: Raw document. Pass bytes so the XML declaration picks the
            encoding.
        source: Path reported in errors.

    Raises:
        ConfigurationError: If the document is not well-formed settings XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ConfigurationError(f"Malformed settings XML: {e}", file=source)

    if _local(root.tag) != "settings":
        raise ConfigurationError(
            f"Unexpected root element <{_local(root.tag)}>, expected <settings>", file=source
        )

    active_profiles = [
        p.text.strip()
        for p in _children(_child(root, "activeProfiles"), "activeProfile")
        if p.text and p.text.strip()
    ]

    profiles = []
    for profile in _children(_child(root, "profiles"), "profile"):
        profile_id = _text(profile, "id")
        if not profile_id:
            continue
        active_by_default = _text(_child(profile, "activation"), "activeByDefault") == "true"
        profiles.append(Profile(id=profile_id, active_by_default=active_by_default))

    mirrors = [
        Mirror(id=_text(m, "id") or "", url=_text(m, "url"), mirror_of=_text(m, "mirrorOf"))
        for m in _children(_child(root, "mirrors"), "mirror")
    ]
    servers = [
        Server(id=_text(s, "id") or "", username=_text(s, "username"))
        for s in _children(_child(root, "servers"), "server")
    ]

    return MavenSettings(
        local_repository=_text(root, "localRepository"),
        active_profiles=active_profiles,
        profiles=profiles,
        mirrors=mirrors,
        servers=servers,
    )


def default_settings_path(home: Optional[Path | str] = None) -> Path:
    """Location of ``settings.xml`` under ``home`` (the current user's by default)."""
    return Path(home if home is not None else Path.home()) / SETTINGS_RELATIVE_PATH


def load_settings(
    ctx: ExecutionContext,
    home: Optional[Path | str] = None,
    settings_path: Optional[Path | str] = None,
    log: Optional[logging.Logger] = None,
) -> Optional[MavenSettings]:
    """Load user settings and record them in the run context.

    Args:
        ctx: Run context the descriptor parser reads settings from.
        home: User home directory. Defaults to the current user's.
        settings_path: Explicit settings file overriding ``~/.m2/settings.xml``.
        log: Logger for diagnostics. Defaults to the module logger.

    Returns:
        Parsed settings, or None when the file is absent, unreadable or
        malformed.
    """
    log = log or logger
    path = Path(settings_path) if settings_path is not None else default_settings_path(home)
    if not path.exists():
        return None

    try:
        if not path.is_file():
            raise ConfigurationError("Settings path is not a file", file=str(path))
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Unable to read settings: {e}", file=str(path))
        settings = parse_settings(content, source=str(path))
    except ConfigurationError as e:
        log.warning(f"Unable to load Maven settings from {path}. Skipping. ({e.message})")
        return None

    ctx.set_maven_settings(settings)
    ctx.set_active_profiles(settings.active_profiles)
    return settings
