"""
Order submission with local fallback.

Submissions go to the remote order store while the session is online. Any
remote failure demotes the session and the record is created in the local
cache instead, so the caller always gets back a single identifier.
"""

from typing import Optional, Protocol

from loguru import logger

from mediblood.core.identifiers import LocalIdGenerator
from mediblood.core.outcomes import (
    BothFailed,
    LocalSuccess,
    RemoteFailure,
    RemoteSuccess,
    SubmissionOutcome,
)
from mediblood.core.reachability import ReachabilityMonitor
from mediblood.errors import RemoteError, SubmissionFailed
from mediblood.models import OrderDraft, Record
from mediblood.storage import LocalOrderCache


class OrderCreator(Protocol):
    async def create_order(self, draft: OrderDraft) -> str:
        ...


class OrderSubmissionService:
    """Writes drafts to exactly one store: remote when online, else local."""

    def __init__(
        self,
        remote: OrderCreator,
        cache: LocalOrderCache,
        monitor: ReachabilityMonitor,
        id_generator: Optional[LocalIdGenerator] = None,
    ):
        """
        Initialize the submission service.

        Args:
            remote: Client for the remote order store
            cache: Local durable cache
            monitor: Session reachability monitor
            id_generator: Generator for local ids
        """
        self.remote = remote
        self.cache = cache
        self.monitor = monitor
        self.id_generator = id_generator or LocalIdGenerator()

    def _create_locally(self, draft: OrderDraft) -> Record:
        record = Record.from_draft(self.id_generator.generate(), draft)
        return self.cache.append(record)

    async def place(self, draft: OrderDraft) -> SubmissionOutcome:
        """
        Submit a draft and report which path served it.

        Args:
            draft: Normalized order or blood request

        Returns:
            SubmissionOutcome: RemoteSuccess, LocalSuccess or BothFailed
        """
        remote_failure: Optional[RemoteFailure] = None

        if self.monitor.is_online:
            try:
                order_id = await self.remote.create_order(draft)
            except RemoteError as e:
                demoted = self.monitor.demote(f"order submission failed: {e.message}")
                remote_failure = RemoteFailure.from_error(e, demoted=demoted)
                logger.warning(f"Remote submission failed, saving {draft.kind.value} locally: {e.message}")
            else:
                self.cache.remember_last_submitted(order_id)
                logger.info(f"Submitted {draft.kind.value} {order_id} to the order store")
                return RemoteSuccess(order_id=order_id)

        try:
            record = self._create_locally(draft)
        except Exception as e:
            logger.error(f"Local fallback failed for {draft.kind.value}: {e}")
            return BothFailed(remote_failure=remote_failure, local_error=str(e) or type(e).__name__)

        self.cache.remember_last_submitted(record.id)
        logger.info(f"Saved {draft.kind.value} {record.id} in the local cache")
        return LocalSuccess(order_id=record.id, record=record, remote_failure=remote_failure)

    async def submit(self, draft: OrderDraft) -> str:
        """
        Submit a draft and return its identifier.

        Raises:
            SubmissionFailed: If neither store accepted the draft
        """
        outcome = await self.place(draft)
        if isinstance(outcome, BothFailed):
            raise SubmissionFailed(outcome.message or "Failed to place order.")
        return outcome.order_id
