from pathlib import Path


def resolve_manifest(repo: Path, manifest: str) -> Path:
    """
    Resolve a ``--manifest`` value against the ``--repo`` directory.

    Absolute paths are used as given.
    """
    path = Path(manifest)
    return path if path.is_absolute() else repo / path
