"""
Manifest access: read and rewrite the version field of a YAML document.

Only the scalar under the version key is touched on write. Comments, key
order, quoting and line endings of the rest of the document are kept as they
are. The edited text is written to a temporary file next to the manifest and
swapped in with an atomic replace, so a failure never leaves a partial file.
"""

import hashlib
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from filelock import FileLock, Timeout

from .exceptions import ManifestError

logger = logging.getLogger("versionguard")

DEFAULT_MANIFEST = "pubspec.yaml"
DEFAULT_KEY = "version"


def _scalar_to_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def version_from_text(
    content: Union[str, bytes, None], key: str = DEFAULT_KEY
) -> Optional[str]:
    """
    Extract the version field from manifest content.

    Returns None for missing, undecodable or malformed content instead of
    raising, so historical blobs can be skipped quietly.
    """
    if content is None:
        return None
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    return _scalar_to_str(data.get(key))


class Manifest:
    """A YAML manifest holding the authoritative version string."""

    def __init__(
        self,
        path: Union[str, Path] = DEFAULT_MANIFEST,
        key: str = DEFAULT_KEY,
        lock_dir: Optional[Path] = None,
        lock_timeout: float = 30.0,
    ):
        self.path = Path(path)
        self.key = key
        self.lock_timeout = lock_timeout

        # Locks live outside the working tree so they never show up in git status
        if lock_dir is None:
            lock_dir = Path(tempfile.gettempdir()) / "versionguard_locks"
        self.lock_dir = Path(lock_dir)

        self._line_pattern = re.compile(
            rf"^(?P<prefix>{re.escape(key)}[ \t]*:[ \t]*)"
            r"(?P<quote>[\"']?)(?P<value>[^\"'#\r\n]+?)(?P=quote)"
            r"(?P<suffix>[ \t]*(?:#[^\r\n]*)?)\r?$",
            re.MULTILINE,
        )

    @property
    def lock_file(self) -> Path:
        digest = hashlib.sha1(str(self.path.resolve()).encode("utf-8")).hexdigest()
        return self.lock_dir / f"{self.path.name}.{digest[:12]}.lock"

    def _read_text(self) -> str:
        if not self.path.exists():
            raise ManifestError(str(self.path), "manifest not found")
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(str(self.path), f"cannot read manifest: {e}") from e

    def _load(self, text: str) -> dict:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestError(str(self.path), f"invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(str(self.path), "manifest is not a mapping")
        return data

    def read_version(self) -> str:
        """
        Read the version field.

        Raises:
            ManifestError: If the manifest is missing, malformed or has no version
        """
        data = self._load(self._read_text())
        value = _scalar_to_str(data.get(self.key))
        if value is None:
            raise ManifestError(
                str(self.path), f"no '{self.key}' field found in manifest"
            )
        return value

    def render_version(self, text: str, new_version: str) -> str:
        """Return ``text`` with the version value replaced by ``new_version``."""
        match = self._line_pattern.search(text)
        if match is not None:
            return (
                text[: match.start("value")] + new_version + text[match.end("value") :]
            )

        # Flow style or otherwise unusual layout: fall back to a full dump
        logger.debug(
            f"No top-level '{self.key}:' line in {self.path}, re-serializing document"
        )
        data = self._load(text)
        data[self.key] = new_version
        return yaml.safe_dump(
            data, sort_keys=False, default_flow_style=False, allow_unicode=True
        )

    def write_version(self, new_version: str) -> None:
        """
        Replace the version field, leaving the rest of the document untouched.

        Raises:
            ManifestError: If the document cannot be edited or written
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        try:
            with FileLock(self.lock_file, timeout=self.lock_timeout):
                text = self._read_text()
                new_text = self.render_version(text, new_version)

                written = version_from_text(new_text, self.key)
                if written != new_version:
                    raise ManifestError(
                        str(self.path),
                        f"edited manifest reads back '{written}', "
                        f"expected '{new_version}'",
                    )

                self._replace(new_text)
        except Timeout as e:
            raise ManifestError(
                str(self.path), f"could not lock manifest within {self.lock_timeout}s"
            ) from e

        logger.debug(f"Wrote {self.key} {new_version} to {self.path}")

    def _replace(self, new_text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(new_text)
                f.flush()
                os.fsync(f.fileno())
            shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ManifestError(str(self.path), f"cannot write manifest: {e}") from e
