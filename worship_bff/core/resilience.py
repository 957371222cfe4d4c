"""
Resilience Infrastructure.

Structured logging for tenacity retries. The only automatic retry in this
service is the document store connection loop (core.database), which
retries forever on a fixed delay:

    async for attempt in AsyncRetrying(
        wait=wait_fixed(5),
        stop=stop_never,
        retry=retry_if_exception_type(StorageConnectionError),
        before_sleep=log_retry,
    ):
        with attempt:
            await ping()
"""

from typing import Any

from worship_bff.core.logging import get_logger

logger = get_logger(__name__)


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", None) or "document_store"

    next_sleep = None
    if retry_state.next_action is not None:
        next_sleep = retry_state.next_action.sleep

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "next_sleep_seconds": next_sleep,
            "error": error,
        },
    )
