"""
Main Orchestrator for paycycle

Ties storage, validation and the engine together into one flow:

    Refresh (load snapshot -> validate -> classify -> bucket -> project)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine only ever sees a complete snapshot; a failed load yields
  an error, never a partial overview
- Every refresh recomputes from scratch; nothing is cached between runs
- Every step is logged under one refresh_id

Refreshes may overlap (the user pulls to refresh twice). Each one is
independent; the flow remembers the overview of the most recently
*started* refresh that completed, so a slow older refresh never replaces
a newer result.
"""

from datetime import date
from itertools import count
from typing import Optional
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from paycycle.config import EngineSettings, StorageSettings, get_settings
from paycycle.engine import build_weekly_overview
from paycycle.log import create_refresh_id, get_logger
from paycycle.models import FinanceSnapshot, WeeklyOverview
from paycycle.services.storage import (
    FinanceStorageInterface,
    InMemoryFinanceStorage,
    NotFoundError,
    StorageError,
)


class RefreshError(Exception):
    """The weekly overview could not be refreshed."""

    def __init__(self, message: str, refresh_id: Optional[UUID] = None):
        super().__init__(message)
        self.refresh_id = refresh_id


class RefreshFlow:
    """
    Orchestrates one refresh of the weekly overview.

    Flow:
    1. Load → Fetch a snapshot from storage (retried on transient errors)
    2. Aggregate → Validate, classify, bucket and project
    3. Publish → Keep the result if it is the newest one
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        engine_settings: Optional[EngineSettings] = None,
        storage_settings: Optional[StorageSettings] = None,
    ):
        settings = get_settings()
        self._storage = storage
        self._engine_settings = engine_settings or settings.engine
        self._storage_settings = storage_settings or settings.storage
        self._sequence = count(1)
        self._latest_sequence = 0
        self._latest: Optional[WeeklyOverview] = None

    @property
    def latest(self) -> Optional[WeeklyOverview]:
        """Overview of the newest completed refresh, if any."""
        return self._latest

    def _retrying(self) -> AsyncRetrying:
        policy = self._storage_settings
        return AsyncRetrying(
            stop=stop_after_attempt(policy.retry_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=policy.retry_min_wait,
                max=policy.retry_max_wait,
            ),
            retry=(
                retry_if_exception_type(StorageError)
                & retry_if_not_exception_type(NotFoundError)
            ),
            reraise=True,
        )

    async def load_snapshot(self, refresh_id: Optional[UUID] = None) -> FinanceSnapshot:
        """
        Load a snapshot, retrying transient storage failures.

        NotFoundError is not retried. After the last attempt the storage
        error propagates unchanged.
        """
        logger = get_logger(__name__).bind(refresh_id=str(refresh_id) if refresh_id else None)

        async for attempt in self._retrying():
            with attempt:
                number = attempt.retry_state.attempt_number
                if number > 1:
                    logger.warning("snapshot_load_retry", attempt=number)
                snapshot = await self._storage.load_snapshot()

        logger.info("snapshot_loaded", records=snapshot.record_count)
        return snapshot

    async def refresh(
        self,
        today: Optional[date] = None,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        refresh_id: Optional[UUID] = None,
    ) -> WeeklyOverview:
        """
        Recompute the weekly overview from a freshly loaded snapshot.

        Raises:
            RefreshError: If the snapshot cannot be loaded
        """
        refresh_id = refresh_id or create_refresh_id()
        sequence = next(self._sequence)
        logger = get_logger(__name__).bind(refresh_id=str(refresh_id))
        logger.info("refresh_started", sequence=sequence)

        try:
            snapshot = await self.load_snapshot(refresh_id)
        except StorageError as e:
            logger.error("refresh_failed", error=str(e), error_type=type(e).__name__)
            raise RefreshError(f"Could not load finance records: {e}", refresh_id) from e

        overview = build_weekly_overview(
            snapshot,
            window_start=window_start,
            window_end=window_end,
            today=today,
            settings=self._engine_settings,
        )

        if sequence > self._latest_sequence:
            self._latest_sequence = sequence
            self._latest = overview
        else:
            logger.info("refresh_superseded", sequence=sequence, latest=self._latest_sequence)

        logger.info(
            "refresh_completed",
            weeks=len(overview.buckets),
            issues=len(overview.issues),
        )
        return overview


def create_app_components(
    storage: Optional[FinanceStorageInterface] = None,
) -> tuple[RefreshFlow, FinanceStorageInterface]:
    """
    Factory function to create all application components.

    Args:
        storage: Storage backend. Defaults to an empty in-memory store,
                 which is enough for trying the engine out.

    Returns:
        (refresh_flow, storage)
    """
    storage = storage or InMemoryFinanceStorage()
    return RefreshFlow(storage), storage
