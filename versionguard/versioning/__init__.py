"""
Versioning Module for versionguard.

All version logic lives in this package: parsing and ordering of the
``major.minor.patch+build`` scheme, reading the history of the manifest from
git, and reconciling the working-copy version against that history.

ARCHITECTURAL LAYERS:
====================

1. **Core Version Logic** (version.py):
   - Version: immutable two-part version with total ordering
   - parse_version / compare_versions / next_version / increment_version

2. **Manifest Access** (manifest.py):
   - Manifest: reads the version field of a YAML manifest and rewrites it
     atomically without touching the rest of the document

3. **History Scanning** (history.py):
   - HistoryProvider: protocol for the version-control collaborator
   - HistoryScanner: classifies the current version as first build, reuse,
     or advance/regression against a bounded window of commits

4. **Reconciliation** (reconciler.py):
   - Reconciler: reads, classifies, corrects, commits, tags and pushes
   - ReconciliationOutcome: the result of one run

5. **Git Integration** (git.py):
   - GitHistoryProvider: GitPython implementation of HistoryProvider
   - GitContext: explicit credentials/identity for one run

6. **Tag-based bumps** (bump.py):
   - plan_bump: pick bump component and baseline from the latest release tag

7. **Exception Hierarchy** (exceptions.py):
   - VersioningError and its fatal/recoverable subclasses

DESIGN NOTES:
=============

Reuse detection beats the first differing version when scanning history: a
version committed more than once in a row is corrected even when an older,
different version exists further back. This is a deliberate policy, kept
reviewable in HistoryScanner.classify.
"""

from .bump import BumpPlan, plan_bump
from .exceptions import (
    CommitError,
    HistoryError,
    ManifestError,
    PushError,
    TagPushError,
    VersionFormatError,
    VersioningError,
)
from .git import GitContext, GitHistoryProvider
from .history import (
    Classification,
    HistoryObservation,
    HistoryProvider,
    HistoryScanner,
    Relation,
)
from .manifest import Manifest
from .reconciler import ReconciliationOutcome, ReconciliationState, Reconciler
from .version import (
    Comparison,
    Version,
    compare_versions,
    increment_version,
    next_version,
    parse_version,
    strict_parse_version,
)

__all__ = [
    # Core version utilities
    "Version",
    "Comparison",
    "parse_version",
    "strict_parse_version",
    "compare_versions",
    "next_version",
    "increment_version",
    # History and reconciliation
    "HistoryProvider",
    "HistoryObservation",
    "HistoryScanner",
    "Classification",
    "Relation",
    "Reconciler",
    "ReconciliationOutcome",
    "ReconciliationState",
    "Manifest",
    "GitContext",
    "GitHistoryProvider",
    "BumpPlan",
    "plan_bump",
    # Exception hierarchy
    "VersioningError",
    "VersionFormatError",
    "ManifestError",
    "HistoryError",
    "CommitError",
    "PushError",
    "TagPushError",
]
