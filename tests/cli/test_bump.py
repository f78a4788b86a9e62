import shutil

import pytest
from click.testing import CliRunner

from versionguard.cli.main import cli

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)

CLEAN_ENV = {"GITHUB_TOKEN": None, "GITHUB_ACTIONS": None}


def invoke(args):
    return CliRunner().invoke(cli, args, env=CLEAN_ENV)


@pytest.mark.short
def test_bump_without_tags(tmp_path, manifest_file):
    path = manifest_file("1.2.3+4")

    result = invoke(["bump", "--repo", str(tmp_path), "--no-from-tags", "-t", "minor"])

    assert result.exit_code == 0, result.output
    assert "version: 1.3.0+1" in path.read_text()


@pytest.mark.short
def test_bump_dry_run(tmp_path, manifest_file):
    path = manifest_file("1.2.3+4")

    result = invoke(["bump", "--repo", str(tmp_path), "--no-from-tags", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "version: 1.2.3+4" in path.read_text()


@pytest.mark.short
def test_bump_missing_manifest(tmp_path):
    result = invoke(["bump", "--repo", str(tmp_path), "--no-from-tags"])
    assert result.exit_code == 1


@requires_git
@pytest.mark.integration
class TestBumpFromTags:
    """Test bumping against release tags of a real repository."""

    def test_bumps_from_latest_tag(self, git_workspace):
        git_workspace.commit_version("1.0.0+1")
        git_workspace.git("tag", "v1.2.0+3")

        result = invoke(["bump", "--repo", str(git_workspace.path)])

        assert result.exit_code == 0, result.output
        assert "version: 1.2.1+1" in (git_workspace.path / "pubspec.yaml").read_text()

    def test_no_bump_when_ahead(self, git_workspace):
        git_workspace.commit_version("2.0.0+1")
        git_workspace.git("tag", "v1.0.0+1")

        result = invoke(["bump", "--repo", str(git_workspace.path)])

        assert result.exit_code == 0, result.output
        assert "version: 2.0.0+1" in (git_workspace.path / "pubspec.yaml").read_text()

    def test_no_bump_without_tags(self, git_workspace):
        git_workspace.commit_version("2.0.0+1")

        result = invoke(["bump", "--repo", str(git_workspace.path)])

        assert result.exit_code == 0, result.output
        assert "version: 2.0.0+1" in (git_workspace.path / "pubspec.yaml").read_text()

    def test_bump_and_tag(self, git_workspace):
        git_workspace.commit_version("1.2.0+3")
        git_workspace.git("tag", "v1.2.0+3")

        result = invoke(["bump", "--repo", str(git_workspace.path), "--tag"])

        assert result.exit_code == 0, result.output
        assert git_workspace.remote_git("tag", "--list") == "v1.2.0+4"
        subject = git_workspace.git("log", "-1", "--format=%s")
        assert subject == "Bump version to 1.2.0+4"
