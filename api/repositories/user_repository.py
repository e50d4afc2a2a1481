"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from repositories.utils import timed_query


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @timed_query("users.get_many_by_ids")
    async def get_many_by_ids(self, user_ids: list[int]) -> list[User]:
        """Get multiple users by their IDs in a single query.

        Returns users ordered by id. Missing IDs are silently skipped.
        """
        if not user_ids:
            return []
        result = await self.db.execute(
            select(User).where(User.id.in_(set(user_ids))).order_by(User.id)
        )
        return list(result.scalars().all())
