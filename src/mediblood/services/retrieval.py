"""Order lookup and administrative listing across the remote store and the local cache."""

from typing import List, Optional, Protocol

from loguru import logger

from mediblood.core.outcomes import (
    FALLBACK_LISTING_NOTICE,
    OFFLINE_LISTING_NOTICE,
    Listing,
    ListingSource,
    LookupStatus,
    RecordSource,
    RemoteFailure,
    RetrievalResult,
)
from mediblood.core.reachability import ReachabilityMonitor
from mediblood.errors import RemoteError
from mediblood.models import Record
from mediblood.storage import LocalOrderCache


class OrderReader(Protocol):
    async def get_order(self, order_id: str) -> Record:
        ...

    async def list_orders(self) -> List[Record]:
        ...


class OrderRetrievalService:
    """
    Reads records from the remote store first when online, from the cache otherwise.

    The cache is also the fallback whenever the remote lookup fails, including
    "not found", since a record created in an earlier offline session only
    exists locally.
    """

    def __init__(self, remote: OrderReader, cache: LocalOrderCache, monitor: ReachabilityMonitor):
        self.remote = remote
        self.cache = cache
        self.monitor = monitor

    def _record_failure(self, error: RemoteError, action: str) -> RemoteFailure:
        demoted = False
        if error.demotes_connection:
            demoted = self.monitor.demote(f"{action} failed: {error.message}")
        return RemoteFailure.from_error(error, demoted=demoted)

    async def lookup(self, order_id: str) -> RetrievalResult:
        """
        Find a record by id.

        Args:
            order_id: Identifier entered by the user; surrounding whitespace is ignored

        Returns:
            RetrievalResult: FOUND with the record and its source, NOT_FOUND,
            or SKIPPED for an empty id
        """
        order_id = (order_id or "").strip()
        if not order_id:
            return RetrievalResult(status=LookupStatus.SKIPPED)

        remote_failure: Optional[RemoteFailure] = None
        if self.monitor.is_online:
            try:
                record = await self.remote.get_order(order_id)
            except RemoteError as e:
                remote_failure = self._record_failure(e, "order lookup")
                logger.debug(f"Remote lookup of {order_id} failed ({type(e).__name__}); checking local cache")
            else:
                return RetrievalResult(
                    status=LookupStatus.FOUND, record=record, source=RecordSource.REMOTE
                )

        record = self.cache.find(order_id)
        if record is not None:
            return RetrievalResult(
                status=LookupStatus.FOUND,
                record=record,
                source=RecordSource.LOCAL,
                remote_failure=remote_failure,
            )

        logger.info(f"Order {order_id} not found")
        return RetrievalResult(status=LookupStatus.NOT_FOUND, remote_failure=remote_failure)

    async def retrieve(self, order_id: str) -> Optional[Record]:
        """Return the record for an id, or None if neither store has it."""
        result = await self.lookup(order_id)
        return result.record

    async def list_all(self) -> Listing:
        """
        List records for administration from exactly one store.

        Returns:
            Listing: Remote records when online; cached records when offline
            or when the remote listing fails; UNAVAILABLE when the remote
            listing fails and the cache is empty
        """
        if not self.monitor.is_online:
            return Listing(
                source=ListingSource.CACHE_OFFLINE,
                records=self.cache.list(),
                notice=OFFLINE_LISTING_NOTICE,
            )

        try:
            records = await self.remote.list_orders()
        except RemoteError as e:
            failure = self._record_failure(e, "order listing")
            fallback = self.cache.list()
            if fallback:
                logger.warning(f"Admin listing failed, showing {len(fallback)} cached orders: {e.message}")
                return Listing(
                    source=ListingSource.CACHE_FALLBACK,
                    records=fallback,
                    notice=FALLBACK_LISTING_NOTICE,
                    remote_failure=failure,
                )
            logger.warning(f"Admin listing failed and no cached orders exist: {e.message}")
            return Listing.unavailable(e, failure)

        return Listing(source=ListingSource.REMOTE, records=records)
