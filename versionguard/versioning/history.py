"""
History scanning: reconstruct the most relevant prior version from git history.

The scanner walks a bounded window of commits on a ref, newest first, reads
the manifest at each commit and stops at the first version that differs from
the working-copy version. Commits where the manifest is missing or does not
parse are skipped.

Reuse detection takes priority over the first differing version: when the
current version was committed more than once before anything else shows up,
the manifest was not bumped between releases and must be corrected even if
an older, legitimately different version exists further back.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Protocol, Sequence

from .exceptions import HistoryError
from .manifest import DEFAULT_KEY, DEFAULT_MANIFEST, version_from_text
from .version import Version, parse_version

logger = logging.getLogger("versionguard")

DEFAULT_MAX_COMMITS = 100


class HistoryProvider(Protocol):
    """Version-control collaborator consumed by the scanner and the reconciler."""

    def list_ancestors(self, ref: str, limit: int) -> Sequence[str]:
        """Commit ids reachable from ``ref``, newest first, at most ``limit``."""
        ...

    def read_file_at(self, commit_id: str, path: str) -> Optional[bytes]:
        """Content of ``path`` at ``commit_id``, or None if absent."""
        ...

    def commit_and_tag(
        self, paths: Sequence[str], message: str, tag_name: str, tag_message: str
    ) -> str:
        """Stage ``paths``, commit, create an annotated tag; return the commit id."""
        ...

    def push(self, branch: str) -> None: ...

    def push_tag(self, tag_name: str) -> None: ...


class Relation(Enum):
    FIRST_BUILD = "first-build"
    REUSE = "reuse"
    ADVANCE_OR_REGRESS = "advance-or-regress"


@dataclass(frozen=True)
class HistoryObservation:
    commit_id: str
    version: Optional[Version]

    @property
    def short_id(self) -> str:
        return self.commit_id[:8]

    def describe(self) -> str:
        version = self.version.original if self.version is not None else "absent"
        return f"{self.short_id} {version}"


@dataclass
class Classification:
    relation: Relation
    reference_version: Optional[Version]
    same_version_count: int = 0
    observations: List[HistoryObservation] = field(default_factory=list)


class HistoryScanner:
    """
    Classifies the working-copy version against the history of a ref.

    Args:
        provider: History provider used to list commits and read blobs
        manifest_path: Manifest path relative to the repository root
        key: Manifest field holding the version
    """

    def __init__(
        self,
        provider: HistoryProvider,
        manifest_path: str = DEFAULT_MANIFEST,
        key: str = DEFAULT_KEY,
    ):
        self.provider = provider
        self.manifest_path = manifest_path
        self.key = key

    def _ancestors(self, ref: str, max_commits: int) -> List[str]:
        try:
            commits = self.provider.list_ancestors(ref, max_commits)
        except HistoryError as e:
            logger.warning(f"Could not list history of {ref}: {e}")
            return []
        return [c.strip() for c in commits if c and c.strip()][:max_commits]

    def _version_at(self, commit_id: str) -> Optional[Version]:
        try:
            blob = self.provider.read_file_at(commit_id, self.manifest_path)
        except HistoryError as e:
            logger.debug(f"Skipping {commit_id[:8]}: {e}")
            return None
        return parse_version(version_from_text(blob, self.key))

    def scan(
        self, ref: str, max_commits: int = DEFAULT_MAX_COMMITS
    ) -> Iterator[HistoryObservation]:
        """Yield one observation per commit on ``ref``, newest first."""
        commits = self._ancestors(ref, max_commits)
        logger.info(f"Checking {len(commits)} commits for version history...")
        for commit_id in commits:
            yield HistoryObservation(commit_id, self._version_at(commit_id))

    def classify(
        self,
        ref: str,
        current_version: Version,
        max_commits: int = DEFAULT_MAX_COMMITS,
    ) -> Classification:
        """
        Classify ``current_version`` against the history of ``ref``.

        Returns:
            Classification with relation and reference version:
            - REUSE, reference = current, when current appears more than once
              before any other version
            - ADVANCE_OR_REGRESS, reference = first differing version
            - FIRST_BUILD, reference = None, when no distinct prior version exists
        """
        logger.info(f"Searching for previous version in {ref} history...")

        same_count = 0
        observations: List[HistoryObservation] = []

        for observation in self.scan(ref, max_commits):
            observations.append(observation)
            found = observation.version
            if found is None:
                continue

            if found == current_version:
                same_count += 1
                logger.info(
                    f"Found same version: {found.original} "
                    f"(commit {observation.short_id}) - count: {same_count}"
                )
                continue

            logger.info(
                f"Found different version: {found.original} "
                f"(commit {observation.short_id})"
            )
            if same_count > 1:
                logger.warning(
                    f"Version {current_version.original} was found in {same_count} "
                    "commits before any other version; this indicates version reuse"
                )
                return Classification(
                    Relation.REUSE, current_version, same_count, observations
                )
            return Classification(
                Relation.ADVANCE_OR_REGRESS, found, same_count, observations
            )

        if same_count > 1:
            logger.warning(
                f"Found {same_count} commits with the same version "
                f"{current_version.original} and no other version"
            )
            return Classification(
                Relation.REUSE, current_version, same_count, observations
            )

        logger.info("No previous version found in commit history")
        return Classification(Relation.FIRST_BUILD, None, same_count, observations)
