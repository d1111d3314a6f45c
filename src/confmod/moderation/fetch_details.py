"""Record detail fetcher."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx

from confmod.config import Settings
from confmod.errors import DetailFetchError
from confmod.models import RecordDetails
from confmod.moderation.http import describe_http_error, unwrap_payload
from confmod.utils.logging import get_logger


logger = get_logger(__name__)


async def fetch_details(
    client: httpx.AsyncClient,
    record_id: str,
    settings: Optional[Settings] = None,
) -> RecordDetails:
    """Fetch the full record a moderation request refers to."""
    if not record_id or not record_id.strip():
        raise ValueError("record_id must be non-empty")

    settings = settings or Settings()
    path = settings.details_path.format(record_id=quote(record_id, safe=""))

    try:
        response = await client.get(path)
        response.raise_for_status()
        return RecordDetails.model_validate(unwrap_payload(response.json()))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("fetch_details.failed record_id=%s error=%s", record_id, exc)
        raise DetailFetchError(describe_http_error(exc)) from exc
    except ValueError as exc:
        logger.warning("fetch_details.unparseable record_id=%s", record_id)
        raise DetailFetchError(f"invalid details payload: {exc}") from exc
