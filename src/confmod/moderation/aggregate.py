"""Aggregation of moderation requests with their record details."""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

import httpx

from confmod.config import Settings
from confmod.errors import DetailFetchError
from confmod.models import ModerationRequest, RecordDetails, Revision, RevisionPayload, ViewRecord
from confmod.moderation.fetch_details import fetch_details
from confmod.utils.logging import get_logger
from confmod.utils.text import non_blank
from confmod.utils.time import parse_timestamp


logger = get_logger(__name__)

UNTITLED = "Untitled Conference"
MISSING_REFERENCE = "missing record reference"
ID_MISMATCH = "details id mismatch"

Outcome = Tuple[Optional[RecordDetails], Optional[str]]


async def aggregate(
    client: httpx.AsyncClient,
    requests: Sequence[ModerationRequest],
    settings: Optional[Settings] = None,
) -> List[ViewRecord]:
    """Fetch details for every request concurrently and merge them.

    Every request yields exactly one ViewRecord, in input order. A failed
    lookup is recorded on its own record and never affects the others.
    """
    settings = settings or Settings()
    semaphore = (
        asyncio.Semaphore(settings.detail_max_concurrency)
        if settings.detail_max_concurrency > 0
        else None
    )

    outcomes = await asyncio.gather(
        *(_settle(client, request, settings, semaphore) for request in requests)
    )
    records = [
        merge(request, details, error)
        for request, (details, error) in zip(requests, outcomes)
    ]

    failed = sum(1 for record in records if record.details_error)
    logger.info("aggregate.complete count=%s failed=%s", len(records), failed)
    return records


async def _settle(
    client: httpx.AsyncClient,
    request: ModerationRequest,
    settings: Settings,
    semaphore: Optional[asyncio.Semaphore],
) -> Outcome:
    record_id = non_blank(request.record_id)
    if record_id is None:
        logger.warning("aggregate.missing_reference request_id=%s", request.request_id)
        return None, MISSING_REFERENCE

    async with semaphore or nullcontext():
        try:
            details = await asyncio.wait_for(
                fetch_details(client, record_id, settings),
                timeout=settings.detail_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("aggregate.detail_timeout record_id=%s", record_id)
            return None, f"timed out after {settings.detail_timeout_seconds:g}s"
        except DetailFetchError as exc:
            return None, str(exc)
        except Exception as exc:
            logger.warning(
                "aggregate.detail_error record_id=%s error=%r", record_id, exc, exc_info=True
            )
            return None, str(exc) or type(exc).__name__
    return details, None


def merge(
    request: ModerationRequest,
    details: Optional[RecordDetails],
    error: Optional[str] = None,
) -> ViewRecord:
    """Merge one request with its (possibly missing) record details.

    Details describing a different record than the one referenced are
    discarded and reported as a details error.
    """
    if (
        details is not None
        and request.record_id is not None
        and details.record_id != request.record_id
    ):
        logger.warning(
            "aggregate.id_mismatch request_id=%s expected=%s got=%s",
            request.request_id,
            request.record_id,
            details.record_id,
        )
        details, error = None, ID_MISMATCH

    title = (
        non_blank(details.title if details else None)
        or non_blank(request.summary_title)
        or UNTITLED
    )
    revisions: tuple[Revision, ...] = ()
    if details is not None:
        revisions = tuple(normalize_revision(revision) for revision in details.revisions)

    return ViewRecord(
        request_id=request.request_id,
        record_id=request.record_id,
        requester_id=request.requester_id,
        reviewer_id=request.reviewer_id,
        status=request.status,
        reviewer_message=request.reviewer_message,
        created_at=request.created_at,
        updated_at=request.updated_at,
        title=title,
        short_code=details.short_code if details else None,
        owner_id=details.owner_id if details else None,
        revisions=revisions,
        details_error=error,
    )


def normalize_revision(payload: RevisionPayload) -> Revision:
    """Parse a revision's string-encoded window into datetimes."""
    return Revision(
        from_date=_as_utc(parse_timestamp(payload.from_date)),
        to_date=_as_utc(parse_timestamp(payload.to_date)),
        locations=tuple(payload.locations),
        topics=tuple(payload.topics),
        link=payload.link,
        access_type=payload.access_type,
        summary=payload.summary,
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Date-only strings parse naive; keep windows comparable with zoned ones.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
