"""Publishing run outputs to the CI host."""

import uuid
from pathlib import Path
from typing import Dict, Union

from versionguard.cli.utils.logging import logger


def format_outputs(outputs: Dict[str, str]) -> str:
    """Render outputs in the ``name=value`` file format of GitHub Actions.

    Multi-line values use the heredoc form with a random delimiter.
    """
    lines = []
    for name, value in outputs.items():
        value = str(value)
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            lines.append(f"{name}<<{delimiter}")
            lines.append(value)
            lines.append(delimiter)
        else:
            lines.append(f"{name}={value}")
    return "\n".join(lines) + "\n"


def write_outputs(outputs: Dict[str, str], path: Union[str, Path]) -> bool:
    """Append outputs to ``path``. Returns False when the file cannot be written."""
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(format_outputs(outputs))
    except OSError as e:
        logger.warning(f"Could not write outputs to {path}: {e}")
        return False
    logger.debug(f"Wrote {len(outputs)} outputs to {path}")
    return True
