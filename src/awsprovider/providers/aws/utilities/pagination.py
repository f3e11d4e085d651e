"""Paged listing helpers over boto3 clients."""
from typing import Any, Callable, Dict, List

from awsprovider.infrastructure.logging import get_logger

logger = get_logger(__name__)

# fn(page, last_page) -> keep going?
PageFunc = Callable[[Dict[str, Any], bool], bool]

_TOKEN_KEYS = ("NextToken", "nextToken")


def list_pages(client: Any, operation: str, fn: PageFunc, **kwargs: Any) -> None:
    """
    Call ``fn`` for each page of ``operation`` until it returns False.

    Uses the boto3 paginator where the service defines one and falls back to
    following ``NextToken``/``nextToken`` by hand otherwise. Errors from the
    SDK propagate unchanged so callers can classify them.

    Args:
        client: boto3 client
        operation: Snake-case operation name, e.g. ``list_queues``
        fn: Page callback receiving the page and whether it is the last one
        kwargs: Request parameters
    """
    if client.can_paginate(operation):
        pages = iter(client.get_paginator(operation).paginate(**kwargs))
        page = next(pages, None)
        while page is not None:
            # One page of lookahead tells the callback whether it sees the last page.
            following = next(pages, None)
            if not fn(page, following is None):
                return
            page = following
        return

    method = getattr(client, operation)
    params = dict(kwargs)
    while True:
        output = method(**params)
        token_key = next((key for key in _TOKEN_KEYS if output.get(key)), None)
        last_page = token_key is None
        if not fn(output, last_page) or last_page:
            return
        params[token_key] = output[token_key]


def paginate(client: Any, operation: str, result_key: str, **kwargs: Any) -> List[Any]:
    """
    Collect ``result_key`` from every page of ``operation``.

    Returns:
        Combined results from all pages
    """
    results: List[Any] = []

    def collect(page: Dict[str, Any], last_page: bool) -> bool:
        results.extend(page.get(result_key, []) or [])
        return True

    list_pages(client, operation, collect, **kwargs)
    logger.debug("Paginated listing", operation=operation, count=len(results))
    return results
