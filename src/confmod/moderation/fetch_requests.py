"""Moderation request listing fetcher."""

from __future__ import annotations

from typing import List, Optional

import httpx

from confmod.config import Settings
from confmod.errors import ListFetchError
from confmod.models import ModerationRequest, QueryCriteria
from confmod.moderation.http import describe_http_error, unwrap_payload
from confmod.utils.logging import get_logger
from confmod.utils.time import format_calendar_date


logger = get_logger(__name__)


def build_list_params(
    criteria: QueryCriteria, settings: Optional[Settings] = None
) -> dict[str, str]:
    """Translate the server-evaluated subset of the criteria into query params."""
    settings = settings or Settings()
    params: dict[str, str] = {}

    status = criteria.status_filter.as_request_status()
    if status is not None:
        value = status.value
        params["status"] = value.lower() if settings.status_param_case == "lower" else value

    if criteria.created_from is not None:
        params["startDate"] = format_calendar_date(criteria.created_from)
    if criteria.created_to is not None:
        params["endDate"] = format_calendar_date(criteria.created_to)

    # Title ordering is applied client-side; the server keeps its default order.
    if criteria.sort_key.is_timestamp:
        params["sortBy"] = criteria.sort_key.value
        params["sortOrder"] = criteria.sort_direction.value

    return params


async def fetch_requests(
    client: httpx.AsyncClient,
    criteria: QueryCriteria,
    settings: Optional[Settings] = None,
) -> List[ModerationRequest]:
    """Fetch moderation requests matching the server-supported criteria.

    Any failure raises ListFetchError; there is no retry.
    """
    settings = settings or Settings()
    params = build_list_params(criteria, settings)
    logger.info("fetch_requests.start params=%s", params)

    try:
        response = await client.get(settings.requests_path, params=params)
        response.raise_for_status()
        payload = unwrap_payload(response.json())
        if not isinstance(payload, list):
            raise ValueError(f"expected a list, got {type(payload).__name__}")
        requests = [ModerationRequest.model_validate(item) for item in payload]
    except httpx.HTTPError as exc:
        raise ListFetchError(f"Failed to load requests: {describe_http_error(exc)}") from exc
    except ValueError as exc:
        raise ListFetchError(f"Failed to parse request list: {exc}") from exc

    logger.info("fetch_requests.complete count=%s", len(requests))
    return requests
