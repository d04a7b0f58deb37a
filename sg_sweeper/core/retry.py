"""
Retry Module
============

Fixed-delay retry for AWS API calls that are rejected with a throttling
error.

This is the only resilience mechanism in SG Sweeper: boto3 clients are
created with SDK retries disabled (see :class:`AWSClient`) and every
describe, list and delete call is routed through :func:`retry_operation`.

Functions
---------
retry_operation
    Call an operation, retrying on throttling with a fixed delay.

Example
-------
>>> from sg_sweeper.core.retry import retry_operation
>>>
>>> response = retry_operation(
...     lambda: ec2.delete_security_group(GroupId="sg-123"),
...     max_attempts=5,
...     delay_ms=2000,
... )
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sg_sweeper.core.exceptions import ErrorKind, RetryExhaustedError, classify_error

# Module logger
logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_DELAY_MS = 2000


def retry_operation(
    operation: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_ms: int = DEFAULT_DELAY_MS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Execute ``operation``, retrying only when AWS throttles the call.

    Parameters
    ----------
    operation : callable
        Zero-argument callable performing one remote call.
    max_attempts : int, default=5
        Total number of attempts, including the first one.
    delay_ms : int, default=2000
        Fixed delay between attempts in milliseconds. The delay does
        not grow between attempts.
    sleep : callable, default=time.sleep
        Function used to wait, taking seconds.

    Returns
    -------
    Any
        Whatever ``operation`` returns.

    Raises
    ------
    Exception
        The operation's own exception when it is not a throttling error,
        or when the final attempt is throttled.
    RetryExhaustedError
        If ``max_attempts`` is less than 1 and the operation never ran.

    Example
    -------
    >>> page = retry_operation(lambda: lambda_client.list_functions())
    """
    attempt = 0
    while attempt < max_attempts:
        try:
            return operation()
        except Exception as e:
            attempt += 1
            if classify_error(e) is ErrorKind.THROTTLING and attempt < max_attempts:
                logger.warning(
                    f"Throttled. Retrying ({attempt}/{max_attempts}) "
                    f"in {delay_ms}ms..."
                )
                sleep(delay_ms / 1000.0)
                continue
            raise

    raise RetryExhaustedError(max_attempts)
