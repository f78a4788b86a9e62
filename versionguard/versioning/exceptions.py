"""
Exception classes for the versioning module.
"""


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class VersionFormatError(VersioningError):
    """Raised when a version string has an invalid format."""

    def __init__(self, version_string: str, expected_format: str = "x.y.z+build"):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class ManifestError(VersioningError):
    """Raised when the manifest cannot provide a usable version baseline."""

    def __init__(self, manifest_path: str, message: str):
        self.manifest_path = manifest_path
        super().__init__(f"{manifest_path}: {message}")


class HistoryError(VersioningError):
    """Raised when history cannot be enumerated or read. Always recoverable."""

    pass


class CommitError(VersioningError):
    """Raised when the version bump cannot be committed or tagged."""

    pass


class PushError(VersioningError):
    """Raised when the branch cannot be pushed after all fallbacks."""

    def __init__(self, target: str, message: str = ""):
        self.target = target
        if message:
            super().__init__(f"Failed to push {target}: {message}")
        else:
            super().__init__(f"Failed to push {target}")


class TagPushError(PushError):
    """Raised when a tag cannot be pushed. The version commit is already in place."""

    pass
