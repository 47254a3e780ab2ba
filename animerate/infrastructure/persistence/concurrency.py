"""Locking and retry helpers shared by the rating stores."""
import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple, Type, TypeVar

from animerate.core.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def hold_lock(lock: threading.Lock, timeout: float, operation: str) -> Iterator[None]:
    """Acquire ``lock`` within ``timeout`` seconds or raise StorageError."""
    if not lock.acquire(timeout=timeout):
        logger.error(f"Timed out after {timeout}s waiting to {operation}")
        raise StorageError(f"Timed out waiting to {operation}")
    try:
        yield
    finally:
        lock.release()


def run_with_retries(
    func: Callable[[], T],
    operation: str,
    attempts: int = 3,
    base_delay: float = 0.05,
    retry_on: Tuple[Type[BaseException], ...] = (OSError,),
) -> T:
    """Call ``func``, retrying transient failures with exponential backoff.

    Raises:
        StorageError: When every attempt failed
    """
    attempts = max(1, attempts)
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except retry_on as e:
            last_error = e
            if attempt < attempts:
                wait_time = base_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"{operation} failed (attempt {attempt}/{attempts}): {e}; retrying in {wait_time:.2f}s"
                )
                time.sleep(wait_time)
    logger.error(f"{operation} failed after {attempts} attempts: {last_error}")
    raise StorageError(f"Could not {operation}: {last_error}") from last_error
