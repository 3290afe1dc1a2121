"""Tests for git provenance."""

import subprocess
from unittest.mock import patch

from scripts.buildscan.vcs import git_provenance


def fake_git(responses):
    """Build a subprocess.run replacement answering git commands by argument tuple."""
    def run(cmd, **kwargs):
        key = tuple(cmd[1:])
        if key not in responses:
            raise subprocess.CalledProcessError(1, cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=responses[key] + "\n", stderr="")
    return run


class TestGitProvenance:
    """Tests for reading git metadata."""

    def test_inside_work_tree(self, tmp_path):
        """Origin, branch and commit are collected."""
        responses = {
            ("rev-parse", "--is-inside-work-tree"): "true",
            ("config", "--get", "remote.origin.url"): "https://github.com/acme/lib.git",
            ("rev-parse", "--abbrev-ref", "HEAD"): "main",
            ("rev-parse", "HEAD"): "0123abcd",
        }
        with patch("scripts.buildscan.vcs.subprocess.run", side_effect=fake_git(responses)):
            provenance = git_provenance(tmp_path)

        assert provenance.origin == "https://github.com/acme/lib.git"
        assert provenance.branch == "main"
        assert provenance.change == "0123abcd"

    def test_detached_head_without_origin(self, tmp_path):
        """Detached checkouts have no branch; missing remotes have no origin."""
        responses = {
            ("rev-parse", "--is-inside-work-tree"): "true",
            ("rev-parse", "--abbrev-ref", "HEAD"): "HEAD",
            ("rev-parse", "HEAD"): "0123abcd",
        }
        with patch("scripts.buildscan.vcs.subprocess.run", side_effect=fake_git(responses)):
            provenance = git_provenance(tmp_path)

        assert provenance.branch is None
        assert provenance.origin is None
        assert provenance.change == "0123abcd"

    def test_outside_work_tree(self, tmp_path):
        """Directories outside git produce no marker."""
        with patch("scripts.buildscan.vcs.subprocess.run", side_effect=fake_git({})):
            assert git_provenance(tmp_path) is None

    def test_git_not_installed(self, tmp_path):
        """Missing git produces no marker."""
        with patch("scripts.buildscan.vcs.subprocess.run", side_effect=FileNotFoundError("git")):
            assert git_provenance(tmp_path) is None

    def test_missing_directory(self, tmp_path):
        """A directory that does not exist produces no marker."""
        assert git_provenance(tmp_path / "missing") is None
