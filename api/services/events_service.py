"""Event lookups used by the compilation workflow."""

from collections.abc import Iterable

from models import Event
from repositories.event_repository import EventRepository
from schemas import EventFullResponse
from services.exceptions import ElementNotFoundError


def _check_all_found(requested: set[int], events: Iterable[Event]) -> None:
    missing = requested - {event.id for event in events}
    if missing:
        raise ElementNotFoundError("Event", missing)


class EventService:
    """Read-side event contract: resolve event ids to events."""

    def __init__(self, events: EventRepository):
        self.events = events

    async def get_events_by_id_set(self, event_ids: set[int]) -> set[EventFullResponse]:
        """Get full event representations, initiator included.

        Raises:
            ElementNotFoundError: If any of the ids does not exist
        """
        events = await self.events.get_many_by_ids(event_ids)
        _check_all_found(event_ids, events)
        return {EventFullResponse.model_validate(event) for event in events}

    async def get_events_by_ids(self, event_ids: set[int]) -> set[Event]:
        """Get event entities attached to the current session.

        Raises:
            ElementNotFoundError: If any of the ids does not exist
        """
        events = await self.events.get_many_by_ids(event_ids)
        _check_all_found(event_ids, events)
        return set(events)
