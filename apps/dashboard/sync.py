from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from core.domain.drafts import BalanceDraft, HoldingDraft
from core.domain.errors import LoadError, OperationBusyError
from core.domain.portfolio import Snapshot
from core.ports.portfolio_api import PortfolioApi

logger = logging.getLogger(__name__)

ADD_HOLDING = "add_holding"
UPDATE_BALANCE = "update_balance"


@dataclass(frozen=True)
class LoadState:
    """What the dashboard currently knows about the backend document."""

    snapshot: Snapshot | None = None
    error: str | None = None
    loading: bool = False

    @property
    def version(self) -> int:
        return self.snapshot.version if self.snapshot is not None else 0


class SnapshotStore:
    """Owns the current snapshot and replaces it wholesale on every successful load.

    A failed load keeps the previous snapshot and records the error. A load
    that completes after a newer one has already settled, successfully or
    not, is discarded. ``loading`` stays set while any load is in flight.
    """

    def __init__(self, api: PortfolioApi) -> None:
        self._api = api
        self._state = LoadState()
        self._requested_version = 0
        self._settled_version = 0
        self._in_flight = 0

    @property
    def state(self) -> LoadState:
        return self._state

    async def refresh(self) -> LoadState:
        self._requested_version += 1
        version = self._requested_version
        self._in_flight += 1
        self._state = LoadState(snapshot=self._state.snapshot, error=None, loading=True)

        try:
            document = await self._api.fetch_snapshot()
            snapshot = Snapshot.from_document(document, version=version, fetched_at=datetime.now(UTC))
        except LoadError as exc:
            logger.warning("Portfolio snapshot load failed: %s", exc)
            self._in_flight -= 1
            if self._settle(version):
                self._state = LoadState(snapshot=self._state.snapshot, error=str(exc), loading=self._in_flight > 0)
            return self._state
        except BaseException:
            self._in_flight -= 1
            self._state = replace(self._state, loading=self._in_flight > 0)
            raise

        self._in_flight -= 1
        if not self._settle(version):
            return self._state

        self._state = LoadState(snapshot=snapshot, loading=self._in_flight > 0)
        logger.info("Loaded portfolio snapshot v%s with %s holdings", snapshot.version, len(snapshot.equities))
        return self._state

    def _settle(self, version: int) -> bool:
        if version < self._settled_version:
            logger.info("Discarding stale load v%s (settled v%s)", version, self._settled_version)
            self._state = replace(self._state, loading=self._in_flight > 0)
            return False
        self._settled_version = version
        return True


class WriteSynchronizer:
    """Runs backend writes and resynchronizes the snapshot afterwards.

    Nothing is merged locally: the view only changes once the write and the
    following full reload have both completed. Each operation has its own busy
    flag; a second submission of the same operation is rejected, not queued.
    """

    def __init__(self, api: PortfolioApi, store: SnapshotStore) -> None:
        self._api = api
        self._store = store
        self._busy = {ADD_HOLDING: False, UPDATE_BALANCE: False}

    def is_busy(self, operation: str) -> bool:
        return self._busy[operation]

    async def add_holding(self, draft: HoldingDraft) -> LoadState:
        self._ensure_idle(ADD_HOLDING)
        request = draft.to_request()
        logger.info("Submitting new holding %s", request.symbol)
        return await self._write_then_refetch(ADD_HOLDING, lambda: self._api.create_holding(request))

    async def update_balance(self, draft: BalanceDraft) -> LoadState:
        self._ensure_idle(UPDATE_BALANCE)
        request = draft.to_request()
        logger.info("Submitting account balance %.2f", request.balance)
        return await self._write_then_refetch(UPDATE_BALANCE, lambda: self._api.update_balance(request))

    def _ensure_idle(self, operation: str) -> None:
        if self._busy[operation]:
            logger.warning("Rejected duplicate %s submission", operation)
            raise OperationBusyError(operation)

    async def _write_then_refetch(self, operation: str, write: Callable[[], Awaitable[None]]) -> LoadState:
        self._busy[operation] = True
        try:
            await write()
            logger.info("%s accepted; reloading snapshot", operation)
            return await self._store.refresh()
        finally:
            self._busy[operation] = False
