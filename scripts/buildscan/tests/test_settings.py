"""Tests for user settings loading."""

import logging

import pytest

from scripts.buildscan.context import ExecutionContext
from scripts.buildscan.errors import ConfigurationError
from scripts.buildscan.settings import load_settings, parse_settings

SETTINGS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">
  <localRepository>/data/m2</localRepository>
  <mirrors>
    <mirror>
      <id>corp</id>
      <mirrorOf>*</mirrorOf>
      <url>https://repo.acme.org/maven</url>
    </mirror>
  </mirrors>
  <servers>
    <server>
      <id>corp</id>
      <username>deployer</username>
      <password>secret</password>
    </server>
  </servers>
  <profiles>
    <profile>
      <id>ci</id>
    </profile>
    <profile>
      <id>defaults</id>
      <activation><activeByDefault>true</activeByDefault></activation>
    </profile>
  </profiles>
  <activeProfiles>
    <activeProfile>ci</activeProfile>
    <activeProfile>release</activeProfile>
  </activeProfiles>
</settings>
"""


def write_settings(home, content):
    path = home / ".m2" / "settings.xml"
    path.parent.mkdir(parents=True)
    path.write_text(content)
    return path


class TestParseSettings:
    """Tests for settings document parsing."""

    def test_parse_full_document(self):
        """Namespaced settings are read completely."""
        settings = parse_settings(SETTINGS_XML)

        assert settings.local_repository == "/data/m2"
        assert settings.active_profiles == ["ci", "release"]
        assert [p.id for p in settings.profiles] == ["ci", "defaults"]
        assert settings.mirrors[0].url == "https://repo.acme.org/maven"
        assert settings.mirrors[0].mirror_of == "*"
        assert settings.servers[0].username == "deployer"

    def test_default_profiles_not_forced_active(self):
        """Profiles active by default are kept apart from the explicit list."""
        settings = parse_settings(SETTINGS_XML)

        assert settings.active_profiles == ["ci", "release"]
        assert [p.id for p in settings.profiles if p.active_by_default] == ["defaults"]

    def test_empty_settings(self):
        """A bare settings element has no profiles."""
        settings = parse_settings("<settings/>")

        assert settings.active_profiles == []
        assert settings.local_repository is None

    def test_malformed_xml_raises(self):
        """Broken XML is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_settings("<settings><activeProfiles>")
        assert exc_info.value.error_type == "config_invalid"

    def test_wrong_root_raises(self):
        """A document that is not settings is rejected."""
        with pytest.raises(ConfigurationError, match="expected <settings>"):
            parse_settings("<project/>")


class TestLoadSettings:
    """Tests for loading settings from the user's home directory."""

    def test_missing_file_returns_none(self, tmp_path):
        """No settings file is not an error."""
        ctx = ExecutionContext()

        assert load_settings(ctx, home=tmp_path) is None
        assert ctx.get_maven_settings() is None

    def test_loads_and_records_in_context(self, tmp_path):
        """Parsed settings and active profiles are stored in the context."""
        write_settings(tmp_path, SETTINGS_XML)
        ctx = ExecutionContext()

        settings = load_settings(ctx, home=tmp_path)

        assert settings is not None
        assert ctx.get_maven_settings() is settings
        assert ctx.get_active_profiles() == ["ci", "release"]

    def test_malformed_file_degrades_to_none(self, tmp_path, caplog):
        """Malformed settings are logged and ignored."""
        write_settings(tmp_path, "<settings><oops></settings>")
        ctx = ExecutionContext()

        with caplog.at_level(logging.WARNING):
            settings = load_settings(ctx, home=tmp_path)

        assert settings is None
        assert ctx.get_maven_settings() is None
        assert "Unable to load Maven settings" in caplog.text

    def test_undecodable_file_degrades_to_none(self, tmp_path):
        """Bytes that match no encoding the document could declare are rejected."""
        path = tmp_path / ".m2" / "settings.xml"
        path.parent.mkdir(parents=True)
        path.write_bytes(b'<?xml version="1.0" encoding="UTF-8"?>\n<settings>\xff\xfe</settings>')

        assert load_settings(ExecutionContext(), home=tmp_path) is None

    def test_declared_encoding_is_honoured(self, tmp_path):
        """A latin-1 document with non-ASCII text loads completely."""
        path = tmp_path / ".m2" / "settings.xml"
        path.parent.mkdir(parents=True)
        path.write_bytes(
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            "<settings>\n"
            "  <!-- Paramètres de l'équipe -->\n"
            "  <activeProfiles><activeProfile>ci</activeProfile></activeProfiles>\n"
            "</settings>\n".encode("latin-1")
        )
        ctx = ExecutionContext()

        settings = load_settings(ctx, home=tmp_path)

        assert settings is not None
        assert ctx.get_active_profiles() == ["ci"]

    def test_directory_in_place_of_file_is_logged(self, tmp_path, caplog):
        """A settings path that exists but is not a file is reported and ignored."""
        (tmp_path / ".m2" / "settings.xml").mkdir(parents=True)

        with caplog.at_level(logging.WARNING):
            settings = load_settings(ExecutionContext(), home=tmp_path)

        assert settings is None
        assert "not a file" in caplog.text

    def test_explicit_path_overrides_home(self, tmp_path):
        """An explicit settings path wins over the home directory."""
        custom = tmp_path / "custom-settings.xml"
        custom.write_text(SETTINGS_XML)

        settings = load_settings(ExecutionContext(), home=tmp_path / "nohome", settings_path=custom)

        assert settings is not None
        assert settings.local_repository == "/data/m2"
