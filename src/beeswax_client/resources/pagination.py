"""Paginated bulk reads.

Beeswax list endpoints take ``rows``/``offset``/``sort_by`` query
parameters and return the page records in the body's ``payload`` list.
:func:`query_all` walks the pages in order until a short page signals
the end of the data.

A server that keeps returning exactly ``BATCH_SIZE`` rows is never
considered finished. The API gives no other end-of-data signal, so
this boundary is accepted as is.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models import Result
from ..utils.http import RequestDispatcher

logger = logging.getLogger(__name__)

BATCH_SIZE = 50


async def query_all(
    dispatcher: RequestDispatcher,
    endpoint: str,
    sort_field: str,
    body: Optional[Dict[str, Any]] = None,
    batch_size: int = BATCH_SIZE,
) -> Result:
    """Fetch every record matching ``body`` from ``endpoint``.

    Pages are requested one after another at increasing offsets. Caller
    filters are merged with the paging parameters; ``rows``, ``offset``
    and ``sort_by`` are always controlled here.

    :param dispatcher: Dispatcher used for each page
    :type dispatcher: RequestDispatcher
    :param endpoint: Collection path
    :type endpoint: str
    :param sort_field: Field to sort by, normally the identifier field
    :type sort_field: str
    :param body: Optional query filters
    :type body: Optional[Dict[str, Any]]
    :param batch_size: Rows per page
    :type batch_size: int
    :return: Successful result with all records in fetch order
    :rtype: Result
    """
    results: List[Any] = []
    offset = 0
    while True:
        params = dict(body or {})
        params["rows"] = batch_size
        params["offset"] = offset
        params["sort_by"] = sort_field

        page_body = await dispatcher.dispatch("GET", endpoint, params=params)
        page = _page_records(page_body)
        results.extend(page)
        logger.debug(
            f"Fetched {len(page)} record(s) from {endpoint} at offset {offset}"
        )

        if len(page) < batch_size:
            return Result.ok(results)
        offset += batch_size


def _page_records(page_body: Any) -> List[Any]:
    if isinstance(page_body, dict):
        payload = page_body.get("payload")
    else:
        payload = page_body
    if payload is None:
        return []
    if not isinstance(payload, list):
        return [payload]
    return payload
