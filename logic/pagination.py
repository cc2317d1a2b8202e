from __future__ import annotations
import logging
from typing import Any, Callable, Iterator

log = logging.getLogger(__name__)


class CursorPages:
    """Lazily walk a cursor-paginated listing.

    ``fetch_page(start_cursor)`` must return a dict shaped like Notion's list
    responses (``results``, ``has_more``, ``next_cursor``). The first call gets
    ``None``. Iterating again starts over from the first page, so the same
    object can be re-read after the remote data changes.
    """

    def __init__(self, fetch_page: Callable[[str | None], dict], limit: int | None = None):
        self.fetch_page = fetch_page
        self.limit = limit

    def __iter__(self) -> Iterator[Any]:
        cursor = None
        seen = 0
        while True:
            resp = self.fetch_page(cursor) or {}
            for item in resp.get("results") or []:
                yield item
                seen += 1
                if self.limit is not None and seen >= self.limit:
                    return
            cursor = resp.get("next_cursor")
            if not resp.get("has_more") or not cursor:
                return


class NumberedPages:
    """Same idea for ``?page=N&per_page=M`` APIs (Freshdesk).

    Pages start at 1; a page shorter than ``page_size`` is the last one.
    """

    def __init__(self, fetch_page: Callable[[int], list], page_size: int):
        self.fetch_page = fetch_page
        self.page_size = page_size

    def __iter__(self) -> Iterator[Any]:
        page = 1
        while True:
            items = self.fetch_page(page) or []
            log.debug("page %s -> %d items", page, len(items))
            yield from items
            if len(items) < self.page_size:
                return
            page += 1
