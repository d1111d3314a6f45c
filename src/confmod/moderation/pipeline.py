"""Moderation pipeline: query state, aggregation passes and workflow wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Dict, List, Optional

import httpx

from confmod.config import Settings
from confmod.errors import ListFetchError
from confmod.models import (
    QueryCriteria,
    RequestStatus,
    SortDirection,
    SortKey,
    StatusFilter,
    ViewRecord,
)
from confmod.moderation.aggregate import aggregate
from confmod.moderation.fetch_requests import fetch_requests
from confmod.moderation.http import build_client
from confmod.moderation.query import apply_query, status_counts
from confmod.moderation.status_update import update_status
from confmod.moderation.workflow import (
    SubmitOutcome,
    SubmitResult,
    WorkflowController,
    WorkflowSession,
    WorkflowState,
)
from confmod.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_DIRECTIONS: Dict[SortKey, SortDirection] = {
    SortKey.TITLE: SortDirection.ASC,
    SortKey.CREATED_AT: SortDirection.DESC,
    SortKey.UPDATED_AT: SortDirection.DESC,
}


class ModerationPipeline:
    """Owns the aggregated records and exposes the moderation surface.

    Every aggregation pass is tagged with a generation number; a pass that
    finishes after a newer one has started is discarded, so the displayed
    list only ever reflects the latest pass.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Optional[Settings] = None,
        criteria: Optional[QueryCriteria] = None,
    ) -> None:
        self.client = client
        self.settings = settings or Settings()
        self._criteria = criteria or QueryCriteria()
        self._records: tuple[ViewRecord, ...] = ()
        self._displayed: tuple[ViewRecord, ...] = ()
        self._loading = False
        self._error: Optional[str] = None
        self._generation = 0
        self.workflow = WorkflowController(
            self._submit_status,
            comment_required_for=self.settings.comment_required_statuses,
        )

    @property
    def criteria(self) -> QueryCriteria:
        return self._criteria

    @property
    def records(self) -> List[ViewRecord]:
        """All records from the latest pass, before client-side evaluation."""
        return list(self._records)

    @property
    def displayed(self) -> List[ViewRecord]:
        return list(self._displayed)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def counts(self) -> Dict[str, int]:
        return status_counts(self._records)

    @property
    def workflow_state(self) -> WorkflowState:
        return self.workflow.state

    async def refresh(self) -> None:
        """Run one aggregation pass for the current criteria."""
        self._generation += 1
        generation = self._generation
        criteria = self._criteria
        self._loading = True
        self._error = None
        logger.info("pipeline.pass.start generation=%s", generation)

        try:
            requests = await fetch_requests(self.client, criteria, self.settings)
            records = await aggregate(self.client, requests, self.settings)
            error = None
        except ListFetchError as exc:
            records, error = [], str(exc)
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation:
            logger.debug(
                "pipeline.pass.stale generation=%s latest=%s", generation, self._generation
            )
            return

        if error is not None:
            logger.error("pipeline.pass.failed generation=%s error=%s", generation, error)
        else:
            logger.info("pipeline.pass.complete generation=%s count=%s", generation, len(records))

        self._records = tuple(records)
        self._error = error
        self._recompute()

    async def update_criteria(self, **changes: object) -> None:
        """Apply criteria changes; refetch only if a server-evaluated field changed."""
        updated = self._criteria.with_changes(**changes)
        refetch = updated.server_key() != self._criteria.server_key()
        self._criteria = updated
        if refetch:
            await self.refresh()
        else:
            self._recompute()

    async def set_status_filter(self, status_filter: StatusFilter) -> None:
        await self.update_criteria(status_filter=status_filter)

    async def set_search_term(self, search_term: str) -> None:
        await self.update_criteria(search_term=search_term)

    async def set_date_range(self, start: Optional[date], end: Optional[date]) -> None:
        await self.update_criteria(created_from=start, created_to=end)

    async def clear_date_range(self) -> None:
        await self.update_criteria(created_from=None, created_to=None)

    async def set_sort(self, sort_key: SortKey, sort_direction: SortDirection) -> None:
        await self.update_criteria(sort_key=sort_key, sort_direction=sort_direction)

    async def toggle_sort(self, sort_key: SortKey) -> None:
        """Flip direction for the active key, or switch keys at their default direction."""
        if sort_key is self._criteria.sort_key:
            direction = self._criteria.sort_direction.flipped()
        else:
            direction = DEFAULT_DIRECTIONS[sort_key]
        await self.set_sort(sort_key, direction)

    def begin_moderation(self, request_id: str, target_status: RequestStatus) -> WorkflowSession:
        return self.workflow.begin(request_id, target_status)

    def set_comment(self, comment: str) -> None:
        self.workflow.set_comment(comment)

    async def submit_moderation(self) -> SubmitOutcome:
        """Submit the active workflow session.

        Success triggers a fresh pass; failure surfaces the error and keeps
        the current list as it is.
        """
        outcome = await self.workflow.submit()
        if outcome.result is SubmitResult.SUCCEEDED:
            await self.refresh()
        elif outcome.result is SubmitResult.FAILED:
            self._error = outcome.error
        return outcome

    def cancel_moderation(self) -> None:
        self.workflow.cancel()

    async def _submit_status(self, request_id: str, status: RequestStatus, message: str) -> None:
        await update_status(self.client, request_id, status, message, self.settings)

    def _recompute(self) -> None:
        self._displayed = tuple(apply_query(self._records, self._criteria))


@asynccontextmanager
async def open_pipeline(
    settings: Optional[Settings] = None,
    criteria: Optional[QueryCriteria] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[ModerationPipeline]:
    """Yield a pipeline bound to a fresh HTTP client, closing it afterwards."""
    settings = settings or Settings()
    async with build_client(settings, transport=transport) as client:
        yield ModerationPipeline(client, settings=settings, criteria=criteria)
