"""Core data models for moderation requests, record details and view records."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class RequestStatus(str, Enum):
    """Moderation status of a request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class StatusFilter(str, Enum):
    """Status filter; ALL omits the server-side filter."""

    ALL = "all"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    def as_request_status(self) -> Optional[RequestStatus]:
        if self is StatusFilter.ALL:
            return None
        return RequestStatus(self.value)


class SortKey(str, Enum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"

    @property
    def is_timestamp(self) -> bool:
        """Timestamp keys are sorted by the server, title is sorted locally."""
        return self is not SortKey.TITLE


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class ModerationRequest(BaseModel):
    """A pending change request as returned by the listing service."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    request_id: str = Field(validation_alias=AliasChoices("id", "requestId", "request_id"))
    record_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("conferenceId", "recordId", "record_id"),
    )
    requester_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userId", "requesterId", "requester_id")
    )
    reviewer_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("adminId", "reviewerId", "reviewer_id")
    )
    status: RequestStatus
    reviewer_message: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("message", "reviewerMessage", "reviewer_message"),
    )
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    updated_at: datetime = Field(validation_alias=AliasChoices("updatedAt", "updated_at"))
    summary_title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("summaryTitle", "summary_title")
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_embedded_summary(cls, data: Any) -> Any:
        """Lift the embedded `conference.title` summary onto the request."""
        if not isinstance(data, dict) or data.get("summary_title") or data.get("summaryTitle"):
            return data
        summary = data.get("conference")
        if isinstance(summary, dict) and summary.get("title"):
            return {**data, "summary_title": summary["title"]}
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        # The listing service is not consistent about case.
        if isinstance(value, str):
            return value.strip().upper()
        return value


class Location(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    address: Optional[str] = None
    city_state_province: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("cityStateProvince", "city_state_province")
    )
    country: Optional[str] = None
    continent: Optional[str] = None


class RevisionPayload(BaseModel):
    """Raw revision entry with string-encoded validity window."""

    model_config = ConfigDict(extra="ignore")

    from_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("fromDate", "from_date")
    )
    to_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("toDate", "to_date"))
    locations: list[Location] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    link: Optional[str] = None
    access_type: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("accessType", "access_type")
    )
    summary: Optional[str] = None

    @field_validator("locations", "topics", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RecordDetails(BaseModel):
    """Full record as returned by the record-detail service."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    record_id: str = Field(validation_alias=AliasChoices("id", "recordId", "record_id"))
    title: Optional[str] = None
    short_code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("acronym", "shortCode", "short_code")
    )
    owner_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("creatorId", "ownerId", "owner_id")
    )
    revisions: list[RevisionPayload] = Field(
        default_factory=list, validation_alias=AliasChoices("revisions", "organizations")
    )

    @field_validator("revisions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Revision(BaseModel):
    """Revision with its validity window parsed into datetimes."""

    model_config = ConfigDict(frozen=True)

    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    locations: tuple[Location, ...] = ()
    topics: tuple[str, ...] = ()
    link: Optional[str] = None
    access_type: Optional[str] = None
    summary: Optional[str] = None

    @property
    def is_dated(self) -> bool:
        """True when the window can take part in date-range display."""
        if self.from_date is None and self.to_date is None:
            return False
        if self.from_date is not None and self.to_date is not None:
            return self.from_date <= self.to_date
        return True


class ViewRecord(BaseModel):
    """Display-ready merge of one request with its record details."""

    model_config = ConfigDict(frozen=True)

    request_id: str
    record_id: Optional[str] = None
    requester_id: Optional[str] = None
    reviewer_id: Optional[str] = None
    status: RequestStatus
    reviewer_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    title: str
    short_code: Optional[str] = None
    owner_id: Optional[str] = None
    revisions: tuple[Revision, ...] = ()
    details_error: Optional[str] = None

    @property
    def dated_revisions(self) -> tuple[Revision, ...]:
        return tuple(revision for revision in self.revisions if revision.is_dated)


class QueryCriteria(BaseModel):
    """Filter and sort criteria for the moderation list."""

    model_config = ConfigDict(frozen=True)

    status_filter: StatusFilter = StatusFilter.ALL
    search_term: str = ""
    created_from: Optional[date] = None
    created_to: Optional[date] = None
    sort_key: SortKey = SortKey.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC

    @model_validator(mode="after")
    def _check_date_range(self) -> "QueryCriteria":
        if self.created_from and self.created_to and self.created_from > self.created_to:
            raise ValueError("created_from must not be after created_to")
        return self

    def with_changes(self, **changes: Any) -> "QueryCriteria":
        """Return a validated copy with the given fields replaced."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def server_key(self) -> tuple:
        """Criteria evaluated by the listing service; a change requires a refetch."""
        if self.sort_key.is_timestamp:
            sort = (self.sort_key, self.sort_direction)
        else:
            sort = (None, None)
        return (self.status_filter, self.created_from, self.created_to, *sort)
