"""Incremental paginated feed controller."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from bookfeed.errors import FeedError, NetworkError
from bookfeed.models import BookRecord, FilterSignature, PageRequest
from bookfeed.parse import parse_page_response
from bookfeed.query import resolve
from bookfeed.state import FeedState

logger = logging.getLogger(__name__)

PageFetcher = Callable[[PageRequest], Awaitable[Dict[str, Any]]]
Resolver = Callable[[FilterSignature, int], PageRequest]


class FeedController:
    """
    Owns the FeedState of one feed session.

    Filter changes reset the feed and load page 0; scroll signals append
    the next page. At most one fetch is in flight at a time, and a fetch
    only applies its result if no filter change happened while it was
    outstanding. Every filter change bumps a generation counter, so a
    late result is dropped even when the user has since switched back to
    the same signature.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        resolver: Resolver = resolve,
        on_update: Optional[Callable[["FeedController"], None]] = None,
        on_error: Optional[Callable[[FeedError], None]] = None
    ):
        """
        Initialize the controller.

        Args:
            fetch_page: Coroutine returning the decoded JSON body for a request
            resolver: Maps (signature, offset) to a PageRequest
            on_update: Called after every reset and every applied page
            on_error: Called with the error when the current fetch fails
        """
        self._fetch_page = fetch_page
        self._resolver = resolver
        self._on_update = on_update
        self._on_error = on_error
        self._state = FeedState()
        self._generation = 0
        self.last_error: Optional[FeedError] = None

    @property
    def items(self) -> Tuple[BookRecord, ...]:
        return tuple(self._state.items)

    @property
    def offset(self) -> int:
        return self._state.offset

    @property
    def in_flight(self) -> bool:
        return self._state.in_flight

    @property
    def active_signature(self) -> Optional[FilterSignature]:
        return self._state.active_signature

    @property
    def exhausted(self) -> bool:
        return self._state.exhausted

    @property
    def can_load_more(self) -> bool:
        state = self._state
        return state.active_signature is not None and not state.in_flight and not state.exhausted

    async def set_filter(self, signature: FilterSignature) -> bool:
        """
        Switch the feed to a new browsing context and load its first page.

        Returns:
            False if the signature equals the active one (nothing happens)
        """
        if signature == self._state.active_signature:
            return False

        logger.info(
            f"Filter changed to category={signature.category.value!r} "
            f"search={signature.search_term!r}"
        )
        self._generation += 1
        self._state.reset(signature)
        self.last_error = None
        self._notify_update()

        await self.load_next_page()
        return True

    async def load_next_page(self) -> bool:
        """
        Fetch and append the next page for the active signature.

        Returns:
            True if a page was applied, False if skipped, failed or discarded
        """
        if not self.can_load_more:
            return False

        state = self._state
        signature = state.active_signature
        generation = self._generation
        request = self._resolver(signature, state.offset)

        state.in_flight = True
        logger.info(f"Fetching {request.endpoint.value} page at offset {request.offset}")

        try:
            payload = await self._fetch_page(request)
            records = parse_page_response(payload, request)
        except asyncio.CancelledError:
            if self._is_current(signature, generation):
                state.in_flight = False
            raise
        except FeedError as e:
            self._fail(e, signature, generation)
            return False
        except Exception as e:
            logger.exception(f"Unexpected error fetching {request.url}")
            self._fail(NetworkError(str(e)), signature, generation)
            return False

        if not self._is_current(signature, generation):
            logger.debug(f"Discarding stale page for {signature} at offset {request.offset}")
            return False

        added = state.append_page(records, request.offset + request.limit)
        self.last_error = None
        logger.info(
            f"Applied {added}/{len(records)} records, {len(state.items)} total, "
            f"next offset {state.offset}"
        )
        if state.exhausted:
            logger.info(f"End of results for {signature}")

        self._notify_update()
        return True

    def _is_current(self, signature: FilterSignature, generation: int) -> bool:
        return generation == self._generation and signature == self._state.active_signature

    def _fail(self, error: FeedError, signature: FilterSignature, generation: int):
        if not self._is_current(signature, generation):
            logger.debug(f"Discarding stale error for {signature}: {error}")
            return

        self._state.in_flight = False
        self.last_error = error
        logger.warning(f"Page fetch failed: {error}")
        if self._on_error:
            self._on_error(error)

    def _notify_update(self):
        if self._on_update:
            self._on_update(self)
