"""
Pagination helper for token-driven AWS list and describe calls.

Every page request is made through :func:`retry_operation`, so a throttled
page is retried on its own without restarting the listing.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from sg_sweeper.core.retry import DEFAULT_DELAY_MS, DEFAULT_MAX_ATTEMPTS, retry_operation

# Module logger
logger = logging.getLogger(__name__)


def list_all_pages(
    fetch_page: Callable[..., Dict[str, Any]],
    items_key: str,
    token_param: str = "NextToken",
    next_token_key: str = "NextToken",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_ms: int = DEFAULT_DELAY_MS,
    sleep: Optional[Callable[[float], None]] = None,
    **kwargs: Any,
) -> List[Dict[str, Any]]:
    """
    Fetch every page of a paginated call and concatenate the items.

    The first request is sent without a token. The returned token is
    passed back until a response omits it.

    Parameters
    ----------
    fetch_page : callable
        A boto3 client method, e.g. ``lambda_client.list_functions``.
    items_key : str
        Response key holding the page items, e.g. ``"Functions"``.
    token_param : str, default="NextToken"
        Request parameter carrying the continuation token
        (``"Marker"`` for Lambda).
    next_token_key : str, default="NextToken"
        Response key holding the next token (``"NextMarker"`` for Lambda).
    max_attempts, delay_ms : int
        Passed to :func:`retry_operation` for each page.
    sleep : callable, optional
        Wait function forwarded to :func:`retry_operation`.
    **kwargs
        Extra request parameters sent with every page.

    Returns
    -------
    list of dict
        All items across all pages, in page order.

    Example
    -------
    >>> functions = list_all_pages(
    ...     lambda_client.list_functions,
    ...     "Functions",
    ...     token_param="Marker",
    ...     next_token_key="NextMarker",
    ... )
    """
    retry_kwargs: Dict[str, Any] = {"max_attempts": max_attempts, "delay_ms": delay_ms}
    if sleep is not None:
        retry_kwargs["sleep"] = sleep

    items: List[Dict[str, Any]] = []
    token: Optional[str] = None
    pages = 0

    while True:
        request = dict(kwargs)
        if token:
            request[token_param] = token

        response = retry_operation(lambda: fetch_page(**request), **retry_kwargs)
        pages += 1
        items.extend(response.get(items_key) or [])

        token = response.get(next_token_key)
        if not token:
            break

    logger.debug(f"Fetched {len(items)} {items_key} across {pages} page(s)")
    return items
