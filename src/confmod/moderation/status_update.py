"""Status-update call for moderation requests."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx

from confmod.config import Settings
from confmod.errors import StatusUpdateError
from confmod.models import RequestStatus
from confmod.moderation.http import describe_http_error
from confmod.utils.logging import get_logger


logger = get_logger(__name__)


async def update_status(
    client: httpx.AsyncClient,
    request_id: str,
    status: RequestStatus,
    message: str,
    settings: Optional[Settings] = None,
) -> None:
    """Set a request's status; only the HTTP status of the reply is checked."""
    settings = settings or Settings()
    path = settings.status_update_path.format(request_id=quote(request_id, safe=""))
    logger.info("update_status.start request_id=%s status=%s", request_id, status.value)

    try:
        response = await client.patch(path, json={"status": status.value, "message": message})
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("update_status.failed request_id=%s error=%s", request_id, exc)
        raise StatusUpdateError(
            f"Failed to update request {request_id}: {describe_http_error(exc)}"
        ) from exc

    logger.info("update_status.complete request_id=%s", request_id)
