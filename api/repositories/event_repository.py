"""Event repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Event
from repositories.utils import timed_query


class EventRepository:
    """Repository for Event lookups.

    Events are eager-loaded with their initiator (``lazy="selectin"`` on the
    model), so results are safe to read outside the session's async context.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @timed_query("events.get_many_by_ids")
    async def get_many_by_ids(self, event_ids: set[int]) -> list[Event]:
        """Get events by ID in one query, ordered by id. Missing IDs are skipped."""
        if not event_ids:
            return []
        result = await self.db.execute(
            select(Event).where(Event.id.in_(event_ids)).order_by(Event.id)
        )
        return list(result.scalars().all())
