"""Error formatting for CLI output."""

import click

from versionguard.versioning.exceptions import (
    CommitError,
    ManifestError,
    PushError,
    VersioningError,
)


def format_fatal_error(error: VersioningError, color: bool = True) -> str:
    """Format a fatal versioning error as a single, actionable message.

    Example output:
        [ERROR] Could not read version from manifest: pubspec.yaml: manifest not found
    """
    if isinstance(error, ManifestError):
        message = f"Could not read version from manifest: {error}"
    elif isinstance(error, CommitError):
        message = f"{error}. No tag was created."
    elif isinstance(error, PushError):
        message = (
            f"{error}. The version commit is kept locally and must be pushed manually."
        )
    else:
        message = str(error)

    label = click.style("[ERROR]", fg="red", bold=True) if color else "[ERROR]"
    return f"{label} {message}"
