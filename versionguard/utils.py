"""General utils functions"""

import logging
from typing import Callable, Sequence, Tuple, Type, TypeVar

logger = logging.getLogger("versionguard")

T = TypeVar("T")

Strategy = Tuple[str, Callable[[], T]]


def first_success(
    strategies: Sequence[Strategy],
    description: str,
    errors: Tuple[Type[BaseException], ...] = (Exception,),
) -> T:
    """Run candidate operations in order and return the first one that succeeds.

    Args:
        strategies: (label, callable) pairs, tried in order
        description: What is being attempted, for log messages
        errors: Exception types that count as a failed attempt

    Returns:
        The result of the first successful strategy

    Raises:
        The last error when every strategy fails, or ValueError when there
        are no strategies at all.
    """
    if not strategies:
        raise ValueError(f"No strategies given for {description}")

    last_error: BaseException = RuntimeError(description)
    for label, attempt in strategies:
        try:
            result = attempt()
        except errors as e:
            logger.debug(f"{description}: '{label}' failed: {e}")
            last_error = e
            continue
        logger.debug(f"{description}: '{label}' succeeded")
        return result

    raise last_error
