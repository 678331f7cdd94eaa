# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------

import dataclasses
import logging
from collections.abc import Iterator, Sequence
from typing import Optional, Protocol, Tuple

from azblobquickstart.exceptions import MalformedPageError


_LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


@dataclasses.dataclass(frozen=True)
class BlobEntry:
    """A single blob reported by a container listing."""

    name: str
    snapshot_id: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Page:
    """One batch of listed blobs.

    ``continuation`` is the opaque token to pass back to request the next
    batch. It is ``None`` when there are no more batches to list.
    """

    items: Tuple[BlobEntry, ...] = ()
    continuation: Optional[str] = None


class PageFetcher(Protocol):
    def fetch_page(
        self, continuation_token: Optional[str], max_results: int
    ) -> Page: ...


class BlobPager:
    """Lists every blob in a container one page at a time.

    Pages are requested lazily and strictly in order: the next page is only
    requested once the previous page's continuation token is known and all of
    its entries have been consumed. Each call to :meth:`list_all` or
    :meth:`iter_pages` starts a new listing from the first page.

    :param fetcher: Object used to request a single page of blobs.
    :param page_size: Maximum number of blobs to request per page.
    """

    def __init__(self, fetcher: PageFetcher, page_size: Optional[int] = None):
        if page_size is None:
            page_size = DEFAULT_PAGE_SIZE
        self._validate_page_size(page_size)
        self._fetcher = fetcher
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def list_all(self) -> Iterator[BlobEntry]:
        for page in self.iter_pages():
            yield from page.items

    def iter_pages(self) -> Iterator[Page]:
        continuation_token = None
        page_number = 0
        while True:
            page_number += 1
            page = self._fetch_page(page_number, continuation_token)
            yield page
            if page.continuation is None:
                return
            continuation_token = page.continuation

    def _fetch_page(
        self, page_number: int, continuation_token: Optional[str]
    ) -> Page:
        page = self._fetcher.fetch_page(continuation_token, self._page_size)
        self._validate_page(page)
        _LOGGER.debug(
            "Fetched page %s of blobs (continued: %s, entries: %s, more pages: %s).",
            page_number,
            continuation_token is not None,
            len(page.items),
            page.continuation is not None,
        )
        return page

    def _validate_page_size(self, page_size: int) -> None:
        if isinstance(page_size, bool) or not isinstance(page_size, int):
            raise TypeError(f"page_size must be an integer, not: {type(page_size)}")
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, not: {page_size}")

    def _validate_page(self, page: Page) -> None:
        if not isinstance(page, Page):
            raise MalformedPageError(f"expected a Page, not: {type(page)}")
        if isinstance(page.items, (str, bytes)) or not isinstance(
            page.items, Sequence
        ):
            raise MalformedPageError(
                f"items must be a sequence, not: {type(page.items)}"
            )
        for item in page.items:
            if not isinstance(item, BlobEntry):
                raise MalformedPageError(
                    f"items must be BlobEntry instances, not: {type(item)}"
                )
        if page.continuation is not None:
            if not isinstance(page.continuation, str):
                raise MalformedPageError(
                    f"continuation must be a string, not: {type(page.continuation)}"
                )
            # Passing an empty marker back would restart the listing.
            if not page.continuation:
                raise MalformedPageError("continuation must not be empty")
