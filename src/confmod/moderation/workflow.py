"""State machine for moderation actions.

A moderation action moves through three states:

    Idle -> AwaitingInput -> Submitting -> Idle

`AwaitingInput` and `Submitting` each carry the active WorkflowSession, and
`Idle` carries none, so a submission without a target cannot be expressed.
Submitting never patches local records; the caller refetches on success.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Collection, Optional, Union

from confmod.errors import InvalidTransitionError, StatusUpdateError
from confmod.models import RequestStatus
from confmod.utils.logging import get_logger


logger = get_logger(__name__)

Submitter = Callable[[str, RequestStatus, str], Awaitable[None]]


@dataclass(frozen=True)
class WorkflowSession:
    target_request_id: str
    target_status: RequestStatus
    comment: str = ""
    validation_error: Optional[str] = None


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingInput:
    session: WorkflowSession


@dataclass(frozen=True)
class Submitting:
    session: WorkflowSession


WorkflowState = Union[Idle, AwaitingInput, Submitting]


class SubmitResult(str, Enum):
    INVALID = "invalid"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmitOutcome:
    result: SubmitResult
    error: Optional[str] = None


class WorkflowController:
    """Drive one moderation action at a time."""

    def __init__(
        self,
        submitter: Submitter,
        comment_required_for: Collection[RequestStatus] = (RequestStatus.REJECTED,),
    ) -> None:
        self._submitter = submitter
        self._comment_required_for = frozenset(comment_required_for)
        self._state: WorkflowState = Idle()

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def session(self) -> Optional[WorkflowSession]:
        if isinstance(self._state, (AwaitingInput, Submitting)):
            return self._state.session
        return None

    def requires_comment(self, status: RequestStatus) -> bool:
        return status in self._comment_required_for

    def begin(self, request_id: str, target_status: RequestStatus) -> WorkflowSession:
        """Open a session for moving `request_id` to `target_status`."""
        if not isinstance(self._state, Idle):
            raise InvalidTransitionError("a moderation action is already in progress")
        if not request_id:
            raise ValueError("request_id must be non-empty")

        session = WorkflowSession(target_request_id=request_id, target_status=target_status)
        self._state = AwaitingInput(session)
        logger.debug("workflow.begin request_id=%s status=%s", request_id, target_status.value)
        return session

    def set_comment(self, comment: str) -> None:
        if not isinstance(self._state, AwaitingInput):
            raise InvalidTransitionError("no moderation action is awaiting input")
        self._state = AwaitingInput(replace(self._state.session, comment=comment))

    def validate(self, session: WorkflowSession) -> Optional[str]:
        """Return a validation message, or None when the session may be submitted."""
        if self.requires_comment(session.target_status) and not session.comment.strip():
            return f"A comment is required to set status to {session.target_status.value}."
        return None

    async def submit(self) -> SubmitOutcome:
        """Validate and submit the active session.

        Validation failures keep the session open without any network call.
        Submission success or failure both return to Idle.
        """
        if not isinstance(self._state, AwaitingInput):
            raise InvalidTransitionError("no moderation action is awaiting input")

        session = self._state.session
        message = self.validate(session)
        if message is not None:
            self._state = AwaitingInput(replace(session, validation_error=message))
            return SubmitOutcome(SubmitResult.INVALID, message)

        session = replace(session, validation_error=None)
        self._state = Submitting(session)
        try:
            await self._submitter(
                session.target_request_id,
                session.target_status,
                session.comment.strip(),
            )
        except StatusUpdateError as exc:
            logger.warning(
                "workflow.submit_failed request_id=%s error=%s",
                session.target_request_id,
                exc,
            )
            return SubmitOutcome(SubmitResult.FAILED, str(exc))
        finally:
            self._state = Idle()

        logger.info(
            "workflow.submitted request_id=%s status=%s",
            session.target_request_id,
            session.target_status.value,
        )
        return SubmitOutcome(SubmitResult.SUCCEEDED)

    def cancel(self) -> None:
        """Discard the active session; a no-op when idle."""
        if isinstance(self._state, Submitting):
            raise InvalidTransitionError("cannot cancel while submitting")
        if isinstance(self._state, AwaitingInput):
            logger.debug(
                "workflow.cancel request_id=%s", self._state.session.target_request_id
            )
        self._state = Idle()
