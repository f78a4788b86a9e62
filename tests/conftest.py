import io
import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from versionguard.versioning.exceptions import HistoryError, TagPushError


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("versionguard")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


class FakeProvider:
    """
    In-memory history provider.

    ``history`` lists manifest contents newest first; None means the manifest
    is absent at that commit. Side effects are recorded in ``calls``.
    """

    def __init__(
        self,
        history: Sequence[Optional[str]] = (),
        manifest_path: str = "pubspec.yaml",
        fail_list: bool = False,
        commit_error: Optional[Exception] = None,
        push_error: Optional[Exception] = None,
        tag_push_error: bool = False,
    ):
        self.manifest_path = manifest_path
        self.commits: List[str] = [f"{i:040x}" for i in range(len(history), 0, -1)]
        self.blobs: Dict[str, Optional[bytes]] = {
            commit: (content.encode("utf-8") if content is not None else None)
            for commit, content in zip(self.commits, history)
        }
        self.fail_list = fail_list
        self.commit_error = commit_error
        self.push_error = push_error
        self.tag_push_error = tag_push_error
        self.calls: List[tuple] = []

    def list_ancestors(self, ref: str, limit: int) -> List[str]:
        if self.fail_list:
            raise HistoryError(f"unknown ref {ref}")
        return self.commits[:limit]

    def read_file_at(self, commit_id: str, path: str) -> Optional[bytes]:
        if path != self.manifest_path:
            return None
        return self.blobs.get(commit_id)

    def commit_and_tag(self, paths, message, tag_name, tag_message) -> str:
        if self.commit_error is not None:
            raise self.commit_error
        self.calls.append(("commit_and_tag", list(paths), message, tag_name, tag_message))
        return "f" * 40

    def push(self, branch: str) -> None:
        if self.push_error is not None:
            raise self.push_error
        self.calls.append(("push", branch))

    def push_tag(self, tag_name: str) -> None:
        self.calls.append(("push_tag", tag_name))
        if self.tag_push_error:
            raise TagPushError(tag_name, "remote rejected")

    @property
    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


def manifest_text(version: str) -> str:
    return f"name: demo_app\ndescription: A demo app.\nversion: {version}\n"


@pytest.fixture
def fake_provider():
    """Factory for in-memory providers built from a list of historical versions."""

    def _make(versions: Sequence[Optional[str]], **kwargs) -> FakeProvider:
        history = [manifest_text(v) if v is not None else None for v in versions]
        return FakeProvider(history, **kwargs)

    return _make


@pytest.fixture
def manifest_file(tmp_path) -> Path:
    """Factory writing a pubspec.yaml with the given version."""

    def _make(version: str, directory: Optional[Path] = None) -> Path:
        path = (directory or tmp_path) / "pubspec.yaml"
        path.write_text(manifest_text(version))
        return path

    return _make


# git fixtures


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout.strip()


class GitWorkspace:
    """A working clone with a bare ``origin`` remote, both on branch main."""

    def __init__(self, root: Path):
        self.remote_path = root / "origin.git"
        self.path = root / "work"
        _git(root, "init", "--bare", "--initial-branch=main", str(self.remote_path))
        _git(root, "init", "--initial-branch=main", str(self.path))
        self.git("config", "user.name", "Test User")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")
        self.git("remote", "add", "origin", str(self.remote_path))

    def git(self, *args: str) -> str:
        return _git(self.path, *args)

    def commit_version(self, version: str, push: bool = True) -> str:
        (self.path / "pubspec.yaml").write_text(manifest_text(version))
        self.git("add", "pubspec.yaml")
        self.git("commit", "--allow-empty", "-m", f"Set version {version}")
        if push:
            self.git("push", "origin", "HEAD:main")
        return self.git("rev-parse", "HEAD")

    def remote_git(self, *args: str) -> str:
        return _git(self.remote_path, *args)


@pytest.fixture
def git_workspace(tmp_path) -> GitWorkspace:
    """Fixture providing a real git repository with a bare remote."""
    return GitWorkspace(tmp_path)
