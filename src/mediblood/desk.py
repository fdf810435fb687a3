"""
Session facade wiring the order desk together.

An ``OrderDesk`` is one session: it owns the reachability monitor, the local
cache and the remote client, and hands the same monitor to both services so a
failure seen by either one switches the whole session offline.
"""

from typing import Optional

from loguru import logger

from mediblood.api import OrderStoreClient
from mediblood.config import Settings, get_settings
from mediblood.core import (
    ConnectionMode,
    Listing,
    LocalIdGenerator,
    ReachabilityMonitor,
    RetrievalResult,
    StatusBanner,
    SubmissionOutcome,
)
from mediblood.models import OrderDraft, Record
from mediblood.services import OrderRetrievalService, OrderSubmissionService
from mediblood.storage import JsonFileMedium, LocalOrderCache


class OrderDesk:
    """Collaborator-facing entry point: submit, retrieve, list and report the mode."""

    def __init__(
        self,
        client: OrderStoreClient,
        cache: LocalOrderCache,
        monitor: Optional[ReachabilityMonitor] = None,
        banner: Optional[StatusBanner] = None,
        id_generator: Optional[LocalIdGenerator] = None,
    ):
        self.client = client
        self.cache = cache
        self.monitor = monitor or ReachabilityMonitor()
        self.banner = banner or StatusBanner()
        self.monitor.add_listener(self.banner.update)
        self.submissions = OrderSubmissionService(client, cache, self.monitor, id_generator)
        self.retrievals = OrderRetrievalService(client, cache, self.monitor)

    @classmethod
    async def start(
        cls,
        settings: Optional[Settings] = None,
        client: Optional[OrderStoreClient] = None,
        cache: Optional[LocalOrderCache] = None,
    ) -> "OrderDesk":
        """
        Build a desk from settings and probe the remote store once.

        Args:
            settings: Configuration, defaults to the cached settings
            client: Pre-built remote client
            cache: Pre-built local cache

        Returns:
            OrderDesk: A desk whose mode and banner reflect the probe
        """
        settings = settings or get_settings()
        client = client or OrderStoreClient(settings=settings)
        if cache is None:
            medium = JsonFileMedium(settings.storage_path, quota_bytes=settings.storage_quota_bytes)
            cache = LocalOrderCache(
                medium,
                orders_key=settings.local_orders_key,
                last_order_key=settings.last_order_key,
                list_limit=settings.local_list_limit,
            )
        desk = cls(client, cache, id_generator=LocalIdGenerator(prefix=settings.local_id_prefix))
        await desk.connect(settings)
        return desk

    async def connect(self, settings: Optional[Settings] = None) -> ConnectionMode:
        """Run the startup probe and show the initial banner."""
        settings = settings or get_settings()
        if settings.backend_enabled:
            mode = await self.monitor.probe(self.client, timeout=settings.health_timeout)
        else:
            mode = self.monitor.start_offline()
        self.banner.update(mode)
        return mode

    async def __aenter__(self) -> "OrderDesk":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def current_mode(self) -> ConnectionMode:
        return self.monitor.mode

    def last_submitted_id(self) -> str:
        return self.cache.last_submitted()

    async def place(self, draft: OrderDraft) -> SubmissionOutcome:
        return await self.submissions.place(draft)

    async def submit(self, draft: OrderDraft) -> str:
        return await self.submissions.submit(draft)

    async def lookup(self, order_id: str) -> RetrievalResult:
        return await self.retrievals.lookup(order_id)

    async def retrieve(self, order_id: str) -> Optional[Record]:
        return await self.retrievals.retrieve(order_id)

    async def list_all(self) -> Listing:
        listing = await self.retrievals.list_all()
        logger.debug(f"Listing served from {listing.source.value} with {len(listing.records)} records")
        return listing
