# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# This module provides the single waiting primitive used by the page object
# runtime: a bounded, single-threaded poll loop.
#
# Key Features:
#   - Fixed poll interval (default 200ms)
#   - Monotonic timeout management
#   - Descriptive timeout errors with elapsed duration
#   - Predicate errors propagate to the caller
#
# Usage:
#   wait_for(lambda: handle.check_element_exists(), timeout=10)
#   Waiter(timeout=5).wait_for(check_fn, description="list items")
#
# ================================================================================

import time
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger


DEFAULT_TIMEOUT = 30.0
DEFAULT_INTERVAL = 0.2


@dataclass
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        timeout: Total timeout in seconds
        interval: Sleep between predicate evaluations in seconds
    """
    timeout: float = DEFAULT_TIMEOUT
    interval: float = DEFAULT_INTERVAL


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""

    def __init__(self, message: str, timeout: float = 0.0, elapsed: float = 0.0):
        super().__init__(message)
        self.timeout = timeout
        self.elapsed = elapsed


def wait_for(
    predicate: Callable[[], bool],
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
    description: str = "condition",
) -> float:
    """
    Poll a predicate until it returns True or the timeout elapses.

    The predicate is evaluated immediately, then after every interval. The
    last sleep is shortened so that the final evaluation happens at the
    timeout boundary rather than past it.

    Args:
        predicate: Function returning True once the awaited state is reached
        timeout: Total timeout in seconds
        interval: Sleep between evaluations in seconds
        description: Human-readable description for logging

    Returns:
        Elapsed time in seconds when the predicate succeeded

    Raises:
        WaitTimeoutError: If the predicate never succeeded within the timeout
    """
    start_time = time.monotonic()
    attempts = 0

    while True:
        attempts += 1
        if predicate():
            elapsed = time.monotonic() - start_time
            logger.debug(
                f"Wait for {description} succeeded after {attempts} attempt(s) "
                f"in {elapsed:.2f}s"
            )
            return elapsed

        elapsed = time.monotonic() - start_time
        remaining = timeout - elapsed
        if remaining <= 0:
            break

        time.sleep(min(interval, remaining))

    message = f"Timed out after {elapsed:.2f}s waiting for: {description}"
    logger.warning(f"⚠️ {message} ({attempts} attempts)")
    raise WaitTimeoutError(message, timeout=timeout, elapsed=elapsed)


class Waiter:
    """
    Reusable poll loop bound to one wait configuration.

    Example:
        waiter = Waiter(timeout=10)
        waiter.wait_for(lambda: page_is_ready(), description="dashboard")
    """

    def __init__(self, timeout: Optional[float] = None, interval: Optional[float] = None):
        """
        Initialize the waiter.

        Args:
            timeout: Total timeout in seconds (DEFAULT_TIMEOUT if omitted)
            interval: Poll interval in seconds (DEFAULT_INTERVAL if omitted)
        """
        self.config = WaitConfig(
            timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
            interval=DEFAULT_INTERVAL if interval is None else interval,
        )

    @property
    def timeout(self) -> float:
        return self.config.timeout

    def wait_for(self, predicate: Callable[[], bool], description: str = "condition") -> float:
        """Poll `predicate` with this waiter's configuration."""
        return wait_for(
            predicate,
            timeout=self.config.timeout,
            interval=self.config.interval,
            description=description,
        )

    def try_wait_for(self, predicate: Callable[[], bool], description: str = "condition") -> bool:
        """Poll `predicate`, returning False instead of raising on timeout."""
        try:
            self.wait_for(predicate, description=description)
            return True
        except WaitTimeoutError:
            return False


__all__ = [
    "WaitConfig",
    "WaitTimeoutError",
    "Waiter",
    "wait_for",
    "DEFAULT_TIMEOUT",
    "DEFAULT_INTERVAL",
]
