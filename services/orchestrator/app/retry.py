from __future__ import annotations

import logging
import os
import time
from typing import Callable, TypeVar

from shared.errors import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_attempts() -> int:
    raw = os.getenv("BENTO_RETRY_ATTEMPTS", "3")
    try:
        return max(0, int(raw))
    except ValueError:
        return 3


def retry_backoff_s() -> float:
    raw = os.getenv("BENTO_RETRY_BACKOFF_S", "1.0")
    try:
        return max(0.0, float(raw))
    except ValueError:
        return 1.0


def retry_with_backoff(fn: Callable[[], T], retries: int | None = None, delay_s: float | None = None) -> T:
    """Call ``fn`` and retry on ``UpstreamError`` with doubling delays.

    With the defaults that is one call plus three retries spaced 1s, 2s and
    4s apart. No jitter is added. Once retries are exhausted the last error
    propagates unchanged.
    """
    retries = retry_attempts() if retries is None else retries
    delay = retry_backoff_s() if delay_s is None else delay_s
    for attempt in range(retries + 1):
        try:
            return fn()
        except UpstreamError as exc:
            if attempt >= retries:
                logger.error("upstream call failed after %d attempts: %s", attempt + 1, exc)
                raise
            sleep_s = delay * (2**attempt)
            logger.warning(
                "upstream call failed (attempt %d/%d), retrying in %.1fs: %s",
                attempt + 1,
                retries + 1,
                sleep_s,
                exc,
            )
            if sleep_s > 0:
                time.sleep(sleep_s)
    raise RuntimeError("retry loop exited without result")
