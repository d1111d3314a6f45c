import asyncio
import inspect
import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio

from confmod.config import Settings
from confmod.moderation.http import build_client


BASE_URL = "http://testserver/api"


class FakeBackend:
    """In-memory stand-in for the listing, detail and status-update services."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.list_handler: Optional[Callable[[httpx.Request], Any]] = None
        self.list_status = 200
        self.details: dict[str, Union[dict[str, Any], int, Exception]] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.update_status_code = 200
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.calls: list[httpx.Request] = []

    def add_request(
        self,
        request_id: str,
        record_id: Optional[str],
        status: str = "PENDING",
        created_at: str = "2025-01-01T10:00:00Z",
        summary_title: Optional[str] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": request_id,
            "conferenceId": record_id,
            "userId": "user-1",
            "adminId": None,
            "status": status,
            "message": None,
            "createdAt": created_at,
            "updatedAt": created_at,
            "conference": {"id": record_id, "title": summary_title} if summary_title else None,
        }
        self.requests.append(payload)
        return payload

    def set_details(self, record_id: str, title: Optional[str], **extra: Any) -> None:
        self.details[record_id] = {
            "id": record_id,
            "title": title,
            "acronym": extra.pop("acronym", None),
            "creatorId": "owner-1",
            "organizations": extra.pop("organizations", []),
            **extra,
        }

    def list_calls(self) -> list[httpx.Request]:
        return [c for c in self.calls if c.method == "GET" and c.url.path.endswith("/requests")]

    def detail_calls(self) -> list[httpx.Request]:
        return [c for c in self.calls if "/conference/" in c.url.path]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path

        if request.method == "GET" and path == "/api/admin-conference/requests":
            if self.list_status != 200:
                return httpx.Response(self.list_status, json={"error": "boom"})
            payload = self.list_handler(request) if self.list_handler else self.requests
            if inspect.isawaitable(payload):
                payload = await payload
            if isinstance(payload, httpx.Response):
                return payload
            return httpx.Response(200, json=payload)

        if request.method == "GET" and path.startswith("/api/conference/"):
            record_id = path.rsplit("/", 1)[-1]
            gate = self.gates.get(record_id)
            if gate is not None:
                await gate.wait()
            detail = self.details.get(record_id)
            if detail is None:
                return httpx.Response(404, json={"error": "not found"})
            if isinstance(detail, Exception):
                raise detail
            if isinstance(detail, int):
                return httpx.Response(detail, json={"error": "failed"})
            return httpx.Response(200, json=detail)

        if request.method == "PATCH" and path.startswith("/api/admin-conference/requests/"):
            request_id = path.rsplit("/", 1)[-1]
            self.updates.append((request_id, json.loads(request.content)))
            return httpx.Response(self.update_status_code)

        return httpx.Response(404)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def settings() -> Settings:
    return Settings(API_BASE_URL=BASE_URL, DETAIL_TIMEOUT_SECONDS=2.0)


@pytest_asyncio.fixture
async def client(backend: FakeBackend, settings: Settings):
    async with build_client(settings, transport=httpx.MockTransport(backend.handler)) as client:
        yield client
