"""Pydantic schemas for API request/response validation."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import ID_MAX, ID_MIN, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH

EventId = Annotated[int, Field(ge=ID_MIN, le=ID_MAX)]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


class UserShortResponse(BaseModel):
    """User reference embedded in event payloads."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str


class UserResponse(UserShortResponse):
    """User record as returned by the user lookup."""

    email: str


class EventShortResponse(BaseModel):
    """Event summary as listed inside a compilation."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    title: str
    annotation: str
    event_date: datetime
    paid: bool
    confirmed_requests: int = 0
    views: int = 0
    initiator: UserShortResponse


class EventFullResponse(EventShortResponse):
    """Full event representation, including its initiator reference.

    Frozen (and therefore hashable) so lookups can hand back a set of them.
    """

    description: str | None = None
    participant_limit: int = 0
    request_moderation: bool = True
    created_on: datetime
    published_on: datetime | None = None


class CompilationResponse(BaseModel):
    """Compilation with its events ordered by id."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    pinned: bool
    events: list[EventShortResponse] = []


class NewCompilationRequest(BaseModel):
    """Body of POST /admin/compilations."""

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    pinned: bool = False
    events: set[EventId] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class UpdateCompilationRequest(BaseModel):
    """Body of PATCH /admin/compilations/{comp_id}.

    ``title`` and ``pinned`` left out (or sent as null) keep their stored
    values. ``events`` always replaces the stored set: left out, null or
    empty clears it. Title length is checked by the service (400, not 422).
    """

    events: set[EventId] | None = None
    pinned: bool | None = None
    title: str | None = None
