from unittest.mock import AsyncMock

import pytest

from confmod.errors import InvalidTransitionError, StatusUpdateError
from confmod.models import RequestStatus
from confmod.moderation.workflow import (
    AwaitingInput,
    Idle,
    SubmitResult,
    Submitting,
    WorkflowController,
)


def test_begin_opens_empty_session():
    controller = WorkflowController(AsyncMock())
    session = controller.begin("req1", RequestStatus.APPROVED)

    assert isinstance(controller.state, AwaitingInput)
    assert session.target_request_id == "req1"
    assert session.comment == ""
    assert session.validation_error is None


def test_begin_requires_idle():
    controller = WorkflowController(AsyncMock())
    controller.begin("req1", RequestStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        controller.begin("req2", RequestStatus.REJECTED)


def test_set_comment_requires_open_session():
    controller = WorkflowController(AsyncMock())
    with pytest.raises(InvalidTransitionError):
        controller.set_comment("hello")


@pytest.mark.asyncio
@pytest.mark.parametrize("comment", ["", "   ", "\n\t"])
async def test_reject_without_comment_is_blocked(comment):
    submitter = AsyncMock()
    controller = WorkflowController(submitter)
    controller.begin("req1", RequestStatus.REJECTED)
    controller.set_comment(comment)

    outcome = await controller.submit()

    assert outcome.result is SubmitResult.INVALID
    submitter.assert_not_awaited()
    assert isinstance(controller.state, AwaitingInput)
    assert controller.session.validation_error is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [RequestStatus.APPROVED, RequestStatus.PENDING])
async def test_approve_and_pending_do_not_need_comment(status):
    submitter = AsyncMock()
    controller = WorkflowController(submitter)
    controller.begin("req1", status)

    outcome = await controller.submit()

    assert outcome.result is SubmitResult.SUCCEEDED
    submitter.assert_awaited_once_with("req1", status, "")
    assert isinstance(controller.state, Idle)
    assert controller.session is None


@pytest.mark.asyncio
async def test_comment_policy_is_configurable():
    submitter = AsyncMock()
    controller = WorkflowController(
        submitter,
        comment_required_for=[RequestStatus.APPROVED, RequestStatus.REJECTED],
    )
    controller.begin("req1", RequestStatus.APPROVED)

    outcome = await controller.submit()

    assert outcome.result is SubmitResult.INVALID
    submitter.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_trims_comment_and_clears_error():
    submitter = AsyncMock()
    controller = WorkflowController(submitter)
    controller.begin("req1", RequestStatus.REJECTED)
    await controller.submit()

    controller.set_comment("  insufficient info \n")
    outcome = await controller.submit()

    assert outcome.result is SubmitResult.SUCCEEDED
    submitter.assert_awaited_once_with("req1", RequestStatus.REJECTED, "insufficient info")


@pytest.mark.asyncio
async def test_state_is_submitting_while_call_in_flight():
    seen = []

    async def submitter(request_id, status, message):
        seen.append(controller.state)
        with pytest.raises(InvalidTransitionError):
            controller.cancel()

    controller = WorkflowController(submitter)
    controller.begin("req1", RequestStatus.APPROVED)
    await controller.submit()

    assert isinstance(seen[0], Submitting)
    assert seen[0].session.target_request_id == "req1"
    assert isinstance(controller.state, Idle)


@pytest.mark.asyncio
async def test_failed_submit_returns_to_idle_with_error():
    submitter = AsyncMock(side_effect=StatusUpdateError("Failed to update request req1: HTTP 500"))
    controller = WorkflowController(submitter)
    controller.begin("req1", RequestStatus.APPROVED)

    outcome = await controller.submit()

    assert outcome.result is SubmitResult.FAILED
    assert "HTTP 500" in outcome.error
    assert isinstance(controller.state, Idle)


@pytest.mark.asyncio
async def test_submit_from_idle_is_rejected():
    controller = WorkflowController(AsyncMock())
    with pytest.raises(InvalidTransitionError):
        await controller.submit()


def test_cancel_discards_session_and_is_idempotent():
    submitter = AsyncMock()
    controller = WorkflowController(submitter)
    controller.begin("req1", RequestStatus.REJECTED)
    controller.set_comment("draft")

    controller.cancel()
    controller.cancel()

    assert isinstance(controller.state, Idle)
    submitter.assert_not_awaited()
    assert controller.begin("req2", RequestStatus.APPROVED).comment == ""
