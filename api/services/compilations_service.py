"""Compilation service: listing, lookup, creation, partial update, deletion.

Event references are always resolved through the event and user services
before a compilation is written; event objects supplied by callers are never
trusted.
"""

from dataclasses import dataclass
from enum import Enum

from core.logger import get_logger
from core.wide_event import set_wide_event_fields
from models import TITLE_MAX_LENGTH, TITLE_MIN_LENGTH, Compilation, Event, User
from repositories.compilation_repository import CompilationRepository
from schemas import (
    CompilationResponse,
    EventFullResponse,
    EventShortResponse,
    NewCompilationRequest,
    UpdateCompilationRequest,
    UserResponse,
)
from services.events_service import EventService
from services.exceptions import (
    BadParameterError,
    ElementNotFoundError,
    PaginationParameterError,
    UnresolvedReferenceError,
)
from services.users_service import UserService

logger = get_logger(__name__)


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET
"""Marks a partial-update field that must keep its stored value."""


def _validate_title(title: str) -> None:
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise BadParameterError(
            f"Compilation title must be {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} "
            f"characters long (got {len(title)})"
        )
    if not title.strip():
        raise BadParameterError("Compilation title must not be blank")


@dataclass(frozen=True)
class CompilationChanges:
    """A validated partial update of a compilation.

    ``title`` and ``pinned`` hold either a new value or UNSET (keep the stored
    value). ``event_ids`` has no "keep" state: it always replaces the stored
    set, and an empty set clears it.

    Raises:
        BadParameterError: If a title is given that is blank or not 1-50 long
    """

    event_ids: frozenset[int] = frozenset()
    pinned: bool | _Unset = UNSET
    title: str | _Unset = UNSET

    def __post_init__(self) -> None:
        if self.title is not UNSET:
            _validate_title(self.title)

    @classmethod
    def from_request(cls, request: UpdateCompilationRequest) -> "CompilationChanges":
        """Build changes from a PATCH body; omitted and null fields are UNSET."""
        return cls(
            event_ids=frozenset(request.events or ()),
            pinned=UNSET if request.pinned is None else request.pinned,
            title=UNSET if request.title is None else request.title,
        )


def _to_compilation_response(compilation: Compilation) -> CompilationResponse:
    return CompilationResponse(
        id=compilation.id,
        title=compilation.title,
        pinned=compilation.pinned,
        events=[
            EventShortResponse.model_validate(event)
            for event in sorted(compilation.events, key=lambda e: e.id)
        ],
    )


def _build_user(user: UserResponse) -> User:
    return User(id=user.id, name=user.name, email=user.email)


def _build_event(event: EventFullResponse, initiator: User) -> Event:
    return Event(
        id=event.id,
        title=event.title,
        annotation=event.annotation,
        description=event.description,
        event_date=event.event_date,
        paid=event.paid,
        participant_limit=event.participant_limit,
        request_moderation=event.request_moderation,
        confirmed_requests=event.confirmed_requests,
        views=event.views,
        created_on=event.created_on,
        published_on=event.published_on,
        initiator=initiator,
    )


class CompilationService:
    """Compilation CRUD on top of the compilation store and the event/user lookups.

    Usage:
        service = CompilationService(
            CompilationRepository(db),
            EventService(EventRepository(db)),
            UserService(UserRepository(db)),
        )
        page = await service.get_all(pinned=True, from_=0, size=10)
    """

    def __init__(
        self,
        compilations: CompilationRepository,
        events: EventService,
        users: UserService,
    ):
        self.compilations = compilations
        self.events = events
        self.users = users

    async def get_all(
        self, pinned: bool, from_: int, size: int
    ) -> list[CompilationResponse]:
        """Get one page of compilations filtered by pinned flag, by id ascending.

        The page index is ``from_ // size``, so ``from_`` is rounded down to a
        page boundary.

        Raises:
            PaginationParameterError: If from_ < 0 or size < 1
        """
        if from_ < 0 or size < 1:
            raise PaginationParameterError(from_, size)

        page = from_ // size
        compilations = await self.compilations.find_by_pinned(pinned, page, size)
        return [_to_compilation_response(c) for c in compilations]

    async def get_by_id(self, comp_id: int) -> CompilationResponse:
        """Get a compilation by id.

        Raises:
            BadParameterError: If comp_id < 1
            ElementNotFoundError: If the compilation does not exist
        """
        if comp_id <= 0:
            raise BadParameterError(f"Compilation id must be at least 1 (got {comp_id})")

        compilation = await self.compilations.get_by_id(comp_id)
        if compilation is None:
            raise ElementNotFoundError("Compilation", comp_id)
        return _to_compilation_response(compilation)

    async def create(self, request: NewCompilationRequest) -> CompilationResponse:
        """Create a compilation.

        When event ids are given, events and their initiators are re-read
        from the event and user services and rebuilt before saving.

        Raises:
            ElementNotFoundError: If any event id does not exist
            UnresolvedReferenceError: If an event's initiator cannot be resolved
        """
        events = await self._resolve_events(request.events) if request.events else set()

        compilation = await self.compilations.save(
            Compilation(title=request.title, pinned=request.pinned, events=events)
        )

        logger.info(
            "compilation.created",
            compilation_id=compilation.id,
            pinned=compilation.pinned,
            event_count=len(events),
        )
        set_wide_event_fields(compilation_id=compilation.id)
        return _to_compilation_response(compilation)

    async def _resolve_events(self, event_ids: set[int]) -> set[Event]:
        resolved = await self.events.get_events_by_id_set(event_ids)

        initiator_ids = sorted({event.initiator.id for event in resolved})
        users = await self.users.get_all_users(initiator_ids)
        initiators = {user.id: _build_user(user) for user in users}

        rebuilt: set[Event] = set()
        for event in resolved:
            initiator = initiators.get(event.initiator.id)
            if initiator is None:
                raise UnresolvedReferenceError(
                    "User", event.initiator.id, referenced_by=f"Event id={event.id}"
                )
            rebuilt.add(_build_event(event, initiator))
        return rebuilt

    async def update(
        self, comp_id: int, request: UpdateCompilationRequest
    ) -> CompilationResponse:
        """Apply a partial update to a compilation.

        Title and pinned change only when given. The event set is always
        replaced: no event ids means the compilation ends up with no events.
        The row stays locked from read to write, so concurrent updates of the
        same compilation are applied one after another.

        Raises:
            BadParameterError: If the new title is blank or not 1-50 long
            ElementNotFoundError: If the compilation or any event does not exist
        """
        changes = CompilationChanges.from_request(request)

        compilation = await self.compilations.get_by_id_for_update(comp_id)
        if compilation is None:
            raise ElementNotFoundError("Compilation", comp_id)

        if changes.event_ids:
            events = await self.events.get_events_by_ids(set(changes.event_ids))
        else:
            events = set()

        if changes.pinned is not UNSET:
            compilation.pinned = changes.pinned
        if changes.title is not UNSET:
            compilation.title = changes.title
        compilation.events = events

        compilation = await self.compilations.save(compilation)

        logger.info(
            "compilation.updated",
            compilation_id=compilation.id,
            pinned=compilation.pinned,
            event_count=len(events),
        )
        set_wide_event_fields(compilation_id=compilation.id)
        return _to_compilation_response(compilation)

    async def delete_by_id(self, comp_id: int) -> None:
        """Delete a compilation. Its event links go with it; events stay.

        Raises:
            ElementNotFoundError: If the compilation does not exist
        """
        if not await self.compilations.exists(comp_id):
            raise ElementNotFoundError("Compilation", comp_id)

        await self.compilations.delete_by_id(comp_id)

        logger.info("compilation.deleted", compilation_id=comp_id)
        set_wide_event_fields(compilation_id=comp_id)
