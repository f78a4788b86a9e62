"""
Tag-based version bump planning.

Decides which component to bump and from which baseline, given the manifest
version and the highest release tag. When the manifest is behind the latest
tag the tag becomes the baseline, so a bump never produces a version that
was already released.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .version import (
    Comparison,
    Version,
    compare_versions,
    increment_version,
    suggest_component,
)

logger = logging.getLogger("versionguard")

BUMP_TYPES = ("auto", "major", "minor", "patch", "build")


@dataclass(frozen=True)
class BumpPlan:
    current_version: Version
    baseline: Version
    component: str
    new_version: Optional[Version]
    reason: str = ""

    @property
    def needed(self) -> bool:
        return self.new_version is not None


def plan_bump(
    current: Version,
    latest_tag: Optional[Version],
    bump_type: str = "auto",
    force: bool = False,
) -> BumpPlan:
    """
    Plan a bump of ``current`` against the latest released tag.

    Args:
        current: Version in the manifest
        latest_tag: Highest tagged version, or None when there are no tags
        bump_type: One of BUMP_TYPES
        force: Bump even when no tag exists or current is already ahead

    Returns:
        A BumpPlan; ``new_version`` is None when no bump is needed
    """
    bump_type = bump_type.lower()
    if bump_type not in BUMP_TYPES:
        raise ValueError(f"Unknown version component: {bump_type}")

    if latest_tag is None:
        if not force:
            return BumpPlan(current, current, bump_type, None, "no tags found")
        component = "patch" if bump_type == "auto" else bump_type
        return BumpPlan(
            current, current, component, increment_version(current, component)
        )

    comparison = compare_versions(current, latest_tag)
    if comparison is Comparison.GREATER and bump_type == "auto" and not force:
        return BumpPlan(
            current, latest_tag, "build", None, "current version is ahead of latest tag"
        )

    if bump_type == "auto":
        component = suggest_component(current, latest_tag)
        logger.info(f"Auto-determined bump type: {component}")
    else:
        component = bump_type

    baseline = current
    if not force and comparison is not Comparison.GREATER:
        baseline = latest_tag
        logger.info(f"Using latest tag version as base: {baseline}")

    return BumpPlan(
        current, baseline, component, increment_version(baseline, component)
    )
