"""Page traversal for listing endpoints.

A listing is walked as a finite sequence of pages whose length is fixed by the
envelope of page 1. Two consumers sit on top of that sequence: one collects
every item, the other stops at the first item with a matching identifier.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from operator import attrgetter
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from tableau_projects.client.errors import NotFoundError
from tableau_projects.models.common import PaginationDetails

if TYPE_CHECKING:
    from tableau_projects.client.server import ServerClient

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page(Generic[T]):
    """Items of one listing page plus its pagination envelope."""

    items: list[T]
    pagination: PaginationDetails


PageDecoder = Callable[[bytes], Page[T]]


@dataclass
class PageScanner(Generic[T]):
    """Lazy, restartable traversal of a paginated listing.

    Every ``iter()`` starts again from page 1. Pages ``2..total_page_count``
    are requested with ``pageNumber``; the bound comes from page 1 only, so a
    traversal always ends.
    """

    client: ServerClient
    path: str
    decode: PageDecoder[T]
    page_size: int | None = None
    kind: str = field(default="item")

    def __iter__(self) -> Iterator[Page[T]]:
        first = self._fetch(None)
        yield first
        start = first.pagination.page_number + 1
        last = first.pagination.total_page_count
        for number in range(start, last + 1):
            yield self._fetch(number)

    def _fetch(self, number: int | None) -> Page[T]:
        params: dict[str, Any] = {}
        if number is not None:
            params["pageNumber"] = number
        if self.page_size:
            params["pageSize"] = self.page_size
        body = self.client.execute("GET", self.path, params=params or None)
        page = self.decode(body)
        logger.debug(
            "Fetched %s page %d of %d (%d items)",
            self.path,
            page.pagination.page_number,
            page.pagination.total_page_count,
            len(page.items),
        )
        return page

    def collect_all(self) -> list[T]:
        """Concatenate the items of every page, in page order."""
        items: list[T] = []
        for page in self:
            items.extend(page.items)
        return items

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        """Return the first item matching *predicate*, fetching no further pages."""
        for page in self:
            for item in page.items:
                if predicate(item):
                    return item
        return None

    def find_by_id(
        self,
        identifier: str,
        key: Callable[[T], str] = attrgetter("id"),
    ) -> T:
        """Return the item whose identifier equals *identifier* exactly.

        Raises NotFoundError once every page has been scanned without a match.
        """
        found = self.find(lambda item: key(item) == identifier)
        if found is None:
            raise NotFoundError(identifier, kind=self.kind)
        return found
