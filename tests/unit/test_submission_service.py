"""Tests for order submission with local fallback."""

from unittest.mock import AsyncMock, Mock

import pytest

from mediblood.core import (
    BothFailed,
    ConnectionMode,
    LocalIdGenerator,
    LocalSuccess,
    ReachabilityMonitor,
    RemoteSuccess,
    is_local_id,
)
from mediblood.errors import (
    RemoteProtocolError,
    RemoteRequestError,
    RemoteServerError,
    RemoteUnreachable,
    SubmissionFailed,
)
from mediblood.models import OrderDraft
from mediblood.services import OrderSubmissionService


async def _online_monitor() -> ReachabilityMonitor:
    monitor = ReachabilityMonitor()
    backend = AsyncMock()
    backend.health.return_value = True
    await monitor.probe(backend)
    return monitor


class TestOrderSubmissionService:

    def setup_method(self):
        self.remote = AsyncMock()
        self.remote.create_order.return_value = "R-1"

    @pytest.mark.asyncio
    async def test_online_submission_goes_remote(self, cache, medicine_draft_data):
        monitor = await _online_monitor()
        service = OrderSubmissionService(self.remote, cache, monitor)

        outcome = await service.place(OrderDraft.model_validate(medicine_draft_data))

        assert outcome == RemoteSuccess(order_id="R-1")
        assert cache.list() == []
        assert cache.last_submitted() == "R-1"
        assert monitor.mode is ConnectionMode.ONLINE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        RemoteUnreachable("connection refused"),
        RemoteServerError("Request failed (500)", 500),
        RemoteProtocolError("Order store did not return an order id"),
        RemoteRequestError("Bad request", 400),
    ])
    async def test_remote_failure_falls_back_locally(self, cache, medicine_draft_data, error):
        monitor = await _online_monitor()
        self.remote.create_order.side_effect = error
        service = OrderSubmissionService(self.remote, cache, monitor)

        outcome = await service.place(OrderDraft.model_validate(medicine_draft_data))

        assert isinstance(outcome, LocalSuccess)
        assert is_local_id(outcome.order_id)
        assert outcome.remote_failure.message == error.message
        assert outcome.remote_failure.demoted
        assert monitor.mode is ConnectionMode.OFFLINE
        assert cache.find(outcome.order_id).total == 6.00
        assert cache.last_submitted() == outcome.order_id

    @pytest.mark.asyncio
    async def test_offline_skips_remote(self, cache, blood_draft_data):
        service = OrderSubmissionService(self.remote, cache, ReachabilityMonitor())

        outcome = await service.place(OrderDraft.model_validate(blood_draft_data))

        assert isinstance(outcome, LocalSuccess)
        assert outcome.remote_failure is None
        assert outcome.record.status == "Requested"
        self.remote.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_injected_id_generator(self, cache, blood_draft_data):
        generator = Mock(spec=LocalIdGenerator)
        generator.generate.return_value = "TEST-1-LABCDEF"
        service = OrderSubmissionService(self.remote, cache, ReachabilityMonitor(), generator)

        assert await service.submit(OrderDraft.model_validate(blood_draft_data)) == "TEST-1-LABCDEF"

    @pytest.mark.asyncio
    async def test_both_failed_surfaces_remote_error(self, medicine_draft_data):
        monitor = await _online_monitor()
        self.remote.create_order.side_effect = RemoteServerError("Database is down", 503)
        broken_cache = Mock()
        broken_cache.append.side_effect = OSError("read-only file system")
        service = OrderSubmissionService(self.remote, broken_cache, monitor)
        draft = OrderDraft.model_validate(medicine_draft_data)

        outcome = await service.place(draft)

        assert isinstance(outcome, BothFailed)
        assert outcome.message == "Database is down"
        assert outcome.local_error == "read-only file system"
        broken_cache.remember_last_submitted.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_raises_with_remote_message(self, medicine_draft_data):
        monitor = await _online_monitor()
        self.remote.create_order.side_effect = RemoteUnreachable("Request timed out")
        broken_cache = Mock()
        broken_cache.append.side_effect = OSError("read-only file system")
        service = OrderSubmissionService(self.remote, broken_cache, monitor)

        with pytest.raises(SubmissionFailed) as exc_info:
            await service.submit(OrderDraft.model_validate(medicine_draft_data))

        assert exc_info.value.message == "Request timed out"
        assert monitor.mode is ConnectionMode.OFFLINE

    @pytest.mark.asyncio
    async def test_local_failure_while_offline_surfaces_local_error(self, blood_draft_data):
        broken_cache = Mock()
        broken_cache.append.side_effect = OSError("disk full")
        service = OrderSubmissionService(self.remote, broken_cache, ReachabilityMonitor())

        with pytest.raises(SubmissionFailed) as exc_info:
            await service.submit(OrderDraft.model_validate(blood_draft_data))

        assert exc_info.value.message == "disk full"

    @pytest.mark.asyncio
    async def test_demoted_session_stays_local(self, cache, medicine_draft_data):
        monitor = await _online_monitor()
        self.remote.create_order.side_effect = RemoteServerError("boom", 500)
        service = OrderSubmissionService(self.remote, cache, monitor)
        draft = OrderDraft.model_validate(medicine_draft_data)

        await service.submit(draft)
        self.remote.create_order.side_effect = None
        second = await service.submit(draft)

        assert is_local_id(second)
        assert self.remote.create_order.await_count == 1
        assert len(cache.list()) == 2
