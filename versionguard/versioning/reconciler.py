"""
Version reconciliation: keep the manifest version ahead of branch history.

One run reads the manifest, classifies its version against the history of
the target branch and, when the version did not advance, writes the
corrected version, commits it, tags it and pushes both.

Side effects always happen in order: manifest write, commit, tag, branch
push, tag push. A failed commit leaves no tag behind. A failed tag push is
logged and does not fail the run. A failed branch push is fatal, but the
local manifest and commit are left in place for manual resolution.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .exceptions import ManifestError, TagPushError
from .history import (
    DEFAULT_MAX_COMMITS,
    Classification,
    HistoryObservation,
    HistoryProvider,
    HistoryScanner,
    Relation,
)
from .manifest import Manifest
from .version import Comparison, Version, compare_versions, next_version, parse_version

logger = logging.getLogger("versionguard")

DEFAULT_COMMIT_MESSAGE = (
    "Auto-increment version to {new_version}\n"
    "\n"
    "Previous version: {previous_version}\n"
    "New version: {new_version}\n"
    "Auto-generated by GitHub Actions"
)
DEFAULT_TAG_MESSAGE = "Release {tag}"


class ReconciliationState(Enum):
    NO_HISTORY = "no-history"
    ADVANCED = "advanced"
    REUSE = "reuse"
    REGRESSED = "regressed"
    EQUAL = "equal"
    CORRECTED = "corrected"


@dataclass(frozen=True)
class ReconciliationOutcome:
    previous_version: Optional[Version]
    current_version: Version
    updated: bool
    new_version: Optional[Version] = None
    state: ReconciliationState = ReconciliationState.NO_HISTORY
    tag: Optional[str] = None
    observations: Tuple[HistoryObservation, ...] = ()

    @property
    def final_version(self) -> Version:
        """The version the manifest holds once the run is over."""
        if self.new_version is not None:
            return self.new_version
        return self.current_version

    def as_outputs(self) -> dict:
        """Run outputs as plain strings, keyed the way CI hosts expect them."""
        outputs = {
            "previous-version": (
                str(self.previous_version) if self.previous_version else "none"
            ),
            "current-version": str(self.final_version),
            "version-updated": "true" if self.updated else "false",
        }
        if self.new_version is not None:
            outputs["new-version"] = str(self.new_version)
        return outputs


def tag_for(version: Version, prefix: str = "v") -> str:
    return f"{prefix}{version}"


def render_message(template: str, fields: dict) -> str:
    """Fill ``template`` with ``fields``; a template that does not format is kept."""
    try:
        return template.format(**fields)
    except (KeyError, IndexError, ValueError, AttributeError):
        logger.debug("Commit message template does not format, using it verbatim")
        return template


def decide(
    current: Version, classification: Classification
) -> Tuple[ReconciliationState, Optional[Version]]:
    """
    Map a history classification onto a reconciliation state.

    Returns:
        (state, corrected version) where the corrected version is None when
        the current version is accepted as-is
    """
    if classification.relation is Relation.FIRST_BUILD:
        return ReconciliationState.NO_HISTORY, None

    if classification.relation is Relation.REUSE:
        return ReconciliationState.REUSE, next_version(current)

    reference = classification.reference_version
    if reference is None:
        raise ValueError(
            f"Classification {classification.relation.value} has no reference version"
        )

    comparison = compare_versions(current, reference)
    if comparison is Comparison.GREATER:
        return ReconciliationState.ADVANCED, None
    if comparison is Comparison.LESS:
        return ReconciliationState.REGRESSED, next_version(reference)
    # Matching the most recent distinct version still means nothing advanced
    return ReconciliationState.EQUAL, next_version(reference)


class Reconciler:
    """
    Orchestrates one reconciliation run.

    Args:
        manifest: Manifest holding the working-copy version
        provider: History provider for the repository
        manifest_path: Manifest path relative to the repository root, used
            for history lookups and staging
        commit_message: Optional ``str.format`` template for the bump commit
        tag_prefix: Prefix of release tag names
    """

    def __init__(
        self,
        manifest: Manifest,
        provider: HistoryProvider,
        manifest_path: Optional[str] = None,
        commit_message: Optional[str] = None,
        tag_prefix: str = "v",
    ):
        self.manifest = manifest
        self.provider = provider
        self.manifest_path = manifest_path or manifest.path.as_posix()
        self.commit_message = commit_message or DEFAULT_COMMIT_MESSAGE
        self.tag_prefix = tag_prefix
        self.scanner = HistoryScanner(provider, self.manifest_path, manifest.key)

    def read_current_version(self) -> Version:
        """
        Raises:
            ManifestError: If the manifest has no usable version
        """
        logger.info(f"Reading version from {self.manifest.path}...")
        raw = self.manifest.read_version()
        current = parse_version(raw)
        if current is None:
            raise ManifestError(str(self.manifest.path), f"unparsable version '{raw}'")
        logger.info(f"Current version in {self.manifest.path}: {raw}")
        return current

    def run(
        self,
        ref: str,
        max_commits: int = DEFAULT_MAX_COMMITS,
        dry_run: bool = False,
    ) -> ReconciliationOutcome:
        """
        Reconcile the manifest version against the history of ``ref``.

        Raises:
            ManifestError: If the manifest cannot be read or written
            CommitError: If the bump cannot be committed or tagged
            PushError: If the branch cannot be pushed
        """
        current = self.read_current_version()
        classification = self.scanner.classify(ref, current, max_commits)
        logger.info(f"History classification: {classification.relation.value}")

        state, corrected = decide(current, classification)
        previous = classification.reference_version
        observations = tuple(classification.observations)

        if corrected is None:
            if state is ReconciliationState.NO_HISTORY:
                logger.info(
                    "Version check passed: no previous version found (first build)"
                )
            else:
                logger.info(
                    f"Version check passed: {current.original} is greater than "
                    f"previous version {previous}"
                )
            return ReconciliationOutcome(
                previous, current, False, None, state, observations=observations
            )

        if state is ReconciliationState.REUSE:
            logger.warning(
                f"Version reuse detected: {current.original} "
                "was already used in previous commits"
            )
        else:
            logger.warning(
                f"Version {current.original} is not greater than "
                f"previous version {previous}"
            )

        tag = tag_for(corrected, self.tag_prefix)
        logger.info(f"Auto-incrementing version: {current.original} -> {corrected}")

        if dry_run:
            logger.info(f"Dry run: would write {corrected} and create tag {tag}")
            return ReconciliationOutcome(
                previous, current, False, None, state, tag, observations
            )

        self.apply(current, previous, corrected, tag, ref, state)
        return ReconciliationOutcome(
            previous,
            current,
            True,
            corrected,
            ReconciliationState.CORRECTED,
            tag,
            observations,
        )

    def apply(
        self,
        current: Version,
        previous: Optional[Version],
        corrected: Version,
        tag: str,
        branch: str,
        state: ReconciliationState,
    ) -> None:
        """Write, commit, tag and push the corrected version, in that order."""
        # For reuse the version being replaced is the current one
        replaced = current if state is ReconciliationState.REUSE else previous
        fields = {
            "previous_version": str(replaced) if replaced else "none",
            "current_version": current.original,
            "new_version": str(corrected),
            "tag": tag,
        }
        message = render_message(self.commit_message, fields)
        tag_message = render_message(DEFAULT_TAG_MESSAGE, fields)

        self.manifest.write_version(str(corrected))
        logger.info(f"Updated {self.manifest.path} with version: {corrected}")

        logger.info(f"Committing version update and creating tag {tag}...")
        commit_id = self.provider.commit_and_tag(
            [self.manifest_path], message, tag, tag_message
        )
        logger.debug(f"Version commit: {commit_id}")

        logger.info(f"Pushing changes to {branch}...")
        self.provider.push(branch)

        logger.info(f"Pushing tag {tag}...")
        try:
            self.provider.push_tag(tag)
        except TagPushError as e:
            logger.warning(f"{e}; the version commit was pushed")
        else:
            logger.info("Successfully pushed version update and tag")
