# ABOUTME: Caller-side retry policy for asset lookups using the tenacity library
# ABOUTME: Only transient LookupFailures are retried, with exponential backoff

from collections.abc import Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from commons_attribution.errors import LookupFailure
from commons_attribution.utils.logging import get_logger

logger = get_logger(__name__)

# Counters for diagnostics
_retry_state = {
    "calls": 0,
    "retries": 0,
    "failures": 0,
}


def is_transient_failure(exc: BaseException) -> bool:
    """Whether a failed lookup is worth another attempt."""
    return isinstance(exc, LookupFailure) and exc.transient


def _log_retry(retry_state: RetryCallState) -> None:
    _retry_state["retries"] += 1
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying lookup",
        attempt=retry_state.attempt_number,
        error=str(exc),
        filename=getattr(exc, "filename", None),
    )


def lookup_retry(max_attempts: int = 3, min_wait: float = 0.5, max_wait: float = 8.0, multiplier: float = 1.0):
    """Retry decorator for coroutines performing asset lookups.

    Non-transient failures (missing files, client errors, invalid input) are raised immediately;
    after the last attempt the final LookupFailure is re-raised unchanged.
    """

    def decorator(func: Callable):
        async def wrapper(*args, **kwargs):
            _retry_state["calls"] += 1

            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
                retry=retry_if_exception(is_transient_failure),
                before_sleep=_log_retry,
                reraise=True,
            )

            try:
                async for attempt in retrying:
                    with attempt:
                        return await func(*args, **kwargs)
            except LookupFailure:
                _retry_state["failures"] += 1
                raise

        return wrapper

    return decorator


def get_retry_status() -> dict[str, Any]:
    """Get counters of the lookups run through ``lookup_retry``."""
    return dict(_retry_state)


def reset_retry_status() -> None:
    """Reset the counters (useful for testing)."""
    _retry_state.update({"calls": 0, "retries": 0, "failures": 0})
