import logging
import os
import sys
from typing import Optional


logger = logging.getLogger("versionguard")

_ANNOTATIONS = {
    logging.DEBUG: "::debug::",
    logging.WARNING: "::warning::",
    logging.ERROR: "::error::",
    logging.CRITICAL: "::error::",
}


class ActionsFormatter(logging.Formatter):
    """Render warnings and errors as GitHub Actions workflow annotations."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = _ANNOTATIONS.get(record.levelno, "")
        if not prefix:
            return message
        # Annotations are single-line; escape as the runner expects
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"{prefix}{message}"


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def configure_logging(debug: bool, annotations: Optional[bool] = None):
    """
    Configures the logging system based on the debug flag.

    Inside GitHub Actions, warnings and errors are emitted as workflow
    annotations unless ``annotations`` says otherwise.
    """
    if annotations is None:
        annotations = running_in_actions()

    handler = logging.StreamHandler(sys.stdout)
    formatter = (
        ActionsFormatter("%(message)s")
        if annotations
        else logging.Formatter("%(message)s")
    )
    handler.setFormatter(formatter)

    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.hasHandlers():
        logger.addHandler(handler)
