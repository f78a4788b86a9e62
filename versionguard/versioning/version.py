"""
Version utility module for the two-part version scheme.

A version string is made of a semantic base and a monotonic build counter,
``major.minor.patch+build`` (e.g. ``50.8.47+177``). The base is ordered with
the standard release precedence from packaging.version; the build counter
breaks ties.
"""

import re
from enum import Enum
from typing import Optional, Union

from packaging.version import Version as PackagingVersion

from .exceptions import VersionFormatError

STRICT_VERSION_PATTERN = r"^\d+\.\d+\.\d+(\+\d+)?$"
BOOTSTRAP_VERSION = "1.0.0+1"

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


class Comparison(Enum):
    GREATER = 1
    EQUAL = 0
    LESS = -1


def _coerce_component(text: Optional[str]) -> int:
    # Best effort: keep leading digits, anything else collapses to 0.
    if not text:
        return 0
    match = _LEADING_DIGITS.match(text)
    return int(match.group(1)) if match else 0


class Version:
    """
    An immutable ``major.minor.patch+build`` version.

    Parsing is permissive: missing or malformed components become ``0``
    instead of failing the whole string. Only an empty input is rejected.
    """

    __slots__ = ("_major", "_minor", "_patch", "_build", "_original")

    def __init__(self, version_string: Union[str, int, float]):
        """
        Initialize a Version from a string.

        Args:
            version_string: Version string such as "1.2.3+4" or "1.2.3"

        Raises:
            ValueError: If the version string is empty
        """
        # Handle numeric inputs (float/int from YAML)
        if isinstance(version_string, (int, float)) and not isinstance(
            version_string, bool
        ):
            version_string = str(version_string)
        if version_string is None or not isinstance(version_string, str):
            raise ValueError(f"Invalid version: {version_string!r}")

        original = version_string.strip()
        if not original:
            raise ValueError("Empty version string")

        base, _, build = original.partition("+")
        parts = base.split(".")
        parts += [""] * (3 - len(parts))

        self._major = _coerce_component(parts[0])
        self._minor = _coerce_component(parts[1])
        self._patch = _coerce_component(parts[2])
        self._build = _coerce_component(build)
        self._original = original

    @classmethod
    def from_components(
        cls, major: int, minor: int, patch: int, build: int = 0
    ) -> "Version":
        """Build a Version from its integer components."""
        for value in (major, minor, patch, build):
            if value < 0:
                raise ValueError(f"Version components must be non-negative: {value}")
        return cls(f"{major}.{minor}.{patch}+{build}")

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor

    @property
    def patch(self) -> int:
        return self._patch

    @property
    def build(self) -> int:
        """Build counter (0 when the string carried no ``+build`` suffix)."""
        return self._build

    @property
    def base(self) -> str:
        """The ``major.minor.patch`` portion, independent of the build counter."""
        return f"{self._major}.{self._minor}.{self._patch}"

    @property
    def original(self) -> str:
        """The string this version was parsed from."""
        return self._original

    def _key(self):
        return (PackagingVersion(self.base), self._build)

    def __str__(self) -> str:
        return f"{self.base}+{self._build}"

    def __repr__(self) -> str:
        return f"Version('{str(self)}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return (self._major, self._minor, self._patch, self._build) == (
            other._major,
            other._minor,
            other._patch,
            other._build,
        )

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash((self._major, self._minor, self._patch, self._build))

    def increment_major(self) -> "Version":
        """Return a new Version with incremented major version and build reset to 1."""
        return Version.from_components(self._major + 1, 0, 0, 1)

    def increment_minor(self) -> "Version":
        """Return a new Version with incremented minor version and build reset to 1."""
        return Version.from_components(self._major, self._minor + 1, 0, 1)

    def increment_patch(self) -> "Version":
        """Return a new Version with incremented patch version and build reset to 1."""
        return Version.from_components(self._major, self._minor, self._patch + 1, 1)

    def increment_build(self) -> "Version":
        """Return a new Version with only the build counter incremented."""
        return Version.from_components(
            self._major, self._minor, self._patch, self._build + 1
        )


def parse_version(version_string) -> Optional[Version]:
    """
    Parse a version string into a Version object.

    Args:
        version_string: Version string to parse (str, or a number read from YAML)

    Returns:
        Version object, or None for empty/missing input
    """
    try:
        return Version(version_string)
    except ValueError:
        return None


def strict_parse_version(version_string: str) -> Version:
    """
    Parse a version string, requiring the canonical ``x.y.z`` or ``x.y.z+n`` form.

    Raises:
        VersionFormatError: If the string does not match the canonical form
    """
    text = str(version_string).strip() if version_string is not None else ""
    if not re.match(STRICT_VERSION_PATTERN, text):
        raise VersionFormatError(text, "x.y.z or x.y.z+build")
    return Version(text)


def compare_versions(
    version1: Union[str, Version], version2: Union[str, Version]
) -> Comparison:
    """
    Compare two versions: base precedence first, then the build counter.

    Raises:
        ValueError: If either version string is empty
    """
    v1 = version1 if isinstance(version1, Version) else Version(version1)
    v2 = version2 if isinstance(version2, Version) else Version(version2)

    if v1 < v2:
        return Comparison.LESS
    elif v1 > v2:
        return Comparison.GREATER
    else:
        return Comparison.EQUAL


def next_version(previous: Union[str, Version, None]) -> Version:
    """
    Return the corrected version that follows ``previous``.

    Patch and build are incremented together: any corrective bump also
    invalidates the current build counter. An unusable ``previous`` yields
    the bootstrap version ``1.0.0+1``.
    """
    if isinstance(previous, Version):
        parsed: Optional[Version] = previous
    else:
        parsed = parse_version(previous)
    if parsed is None:
        return Version(BOOTSTRAP_VERSION)

    return Version.from_components(
        parsed.major, parsed.minor, parsed.patch + 1, parsed.build + 1
    )


def increment_version(
    version: Union[str, Version], component: str = "patch"
) -> Version:
    """
    Increment one component of a version.

    Args:
        version: Current version
        component: "major", "minor", "patch" or "build"

    Returns:
        Incremented Version

    Raises:
        ValueError: If the version is empty or the component is unknown
    """
    v = version if isinstance(version, Version) else Version(version)

    component = component.lower()
    if component == "major":
        return v.increment_major()
    elif component == "minor":
        return v.increment_minor()
    elif component == "patch":
        return v.increment_patch()
    elif component == "build":
        return v.increment_build()
    else:
        raise ValueError(f"Unknown version component: {component}")


def suggest_component(current: Version, baseline: Version) -> str:
    """
    Pick the bump component for ``current`` relative to a released ``baseline``.

    Returns "build" when the bases match or current is already ahead, else "patch".
    """
    if current.base == baseline.base:
        return "build"
    if compare_versions(current, baseline) is Comparison.GREATER:
        return "build"
    return "patch"
