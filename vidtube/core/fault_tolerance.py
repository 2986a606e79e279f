"""Retry with exponential backoff for calls to flaky collaborators."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger("vidtube.fault_tolerance")

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Retry policy.

    Attributes:
        max_attempts: attempts including the first call
        initial_delay: delay before the second attempt, in seconds
        max_delay: upper bound for any single delay
        exponential_base: growth factor between delays
        jitter: scale each delay by a random factor in [0.5, 1.0)
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = True

    def delay_for(self, attempt: int) -> float:
        delay = min(self.initial_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random() * 0.5)
        return delay


def retry(
    config: Optional[RetryConfig] = None,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a blocking call on ``exceptions``; the last failure is re-raised.

    Example:
        @retry(RetryConfig(max_attempts=3, initial_delay=0.5), exceptions=(S3Error,))
        def upload_file(...): ...
    """
    policy = config or RetryConfig()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    if attempt >= policy.max_attempts:
                        logger.error(
                            "Retry exhausted for %s after %s attempts: %s",
                            func.__name__,
                            attempt,
                            exc,
                        )
                        raise
                    delay = policy.delay_for(attempt)
                    logger.warning(
                        "Retry %s/%s for %s after %.2fs: %s",
                        attempt,
                        policy.max_attempts,
                        func.__name__,
                        delay,
                        exc,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
