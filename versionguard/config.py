"""Configuration defaults for versionguard runs, with user and project overrides"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, List, Optional

APP_NAME = "versionguard"
PROJECT_CONFIG = f".{APP_NAME}.cfg"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

default_cfg = {
    "check": {
        "branch": "main",
        "manifest": "pubspec.yaml",
        "max_commits": "100",
        "remote": "origin",
        "tag_prefix": "v",
    },
    "author": {},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/versionguard").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))

logger = logging.getLogger(APP_NAME)


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    The user config file is read first, then the project file
    (``.versionguard.cfg`` in the project directory), so project settings win.
    Missing sections or keys fall back to the built-in defaults.

    Usage:
        config = ConfigAccessor(project_dir=Path("."))
        branch = config.get("check", "branch")
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        project_dir: Optional[Path] = None,
    ):
        """
        Args:
            config_path: User configuration file. If None, uses the default path.
            project_dir: Directory holding the project configuration file.
        """
        self.config_path = config_path if config_path is not None else get_config_file()
        self.paths: List[Path] = [self.config_path]
        if project_dir is not None:
            self.paths.append(Path(project_dir) / PROJECT_CONFIG)

        self.config = configparser.ConfigParser(interpolation=None)
        for path in self.paths:
            if not path.exists():
                continue
            try:
                self.config.read(path)
            except configparser.Error as e:
                logger.warning(f"Ignoring unreadable configuration {path}: {e}")

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value, falling back to the built-in defaults and
        then to ``default``.
        """
        try:
            return self.config[section][key]
        except KeyError:
            return default_cfg.get(section, {}).get(key, default)

    def getint(
        self, section: str, key: str, default: Optional[int] = None
    ) -> Optional[int]:
        value = self.get(section, key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid integer for [{section}] {key}: {value!r}, using {default}"
            )
            return default
