"""Compilation repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Compilation
from repositories.utils import timed_query


class CompilationRepository:
    """Repository for Compilation database operations.

    Does NOT commit. The request-scoped session (core.database.get_db) owns
    the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @timed_query("compilations.find_by_pinned")
    async def find_by_pinned(
        self, pinned: bool, page: int, size: int
    ) -> list[Compilation]:
        """Get one page of compilations with the given pinned flag, by id ascending."""
        result = await self.db.execute(
            select(Compilation)
            .where(Compilation.pinned == pinned)
            .order_by(Compilation.id.asc())
            .offset(page * size)
            .limit(size)
        )
        return list(result.scalars().all())

    @timed_query("compilations.get_by_id")
    async def get_by_id(self, compilation_id: int) -> Compilation | None:
        result = await self.db.execute(
            select(Compilation).where(Compilation.id == compilation_id)
        )
        return result.scalar_one_or_none()

    @timed_query("compilations.get_by_id_for_update")
    async def get_by_id_for_update(self, compilation_id: int) -> Compilation | None:
        """Get a compilation and lock its row until the transaction ends.

        Concurrent updates of the same compilation wait on each other instead
        of overwriting one another. SQLite ignores FOR UPDATE.
        """
        result = await self.db.execute(
            select(Compilation)
            .where(Compilation.id == compilation_id)
            .with_for_update(of=Compilation)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @timed_query("compilations.exists")
    async def exists(self, compilation_id: int) -> bool:
        result = await self.db.execute(
            select(Compilation.id).where(Compilation.id == compilation_id)
        )
        return result.scalar_one_or_none() is not None

    @timed_query("compilations.save")
    async def save(self, compilation: Compilation) -> Compilation:
        """Insert or update a compilation.

        Merges the instance (and its events and their initiators) into the
        session, so detached or freshly built objects carrying existing
        primary keys are reconciled with the stored rows rather than
        re-inserted. Flushes so a new compilation gets its id.
        """
        merged = await self.db.merge(compilation)
        await self.db.flush()
        return merged

    @timed_query("compilations.delete_by_id")
    async def delete_by_id(self, compilation_id: int) -> None:
        """Delete a compilation and its event associations."""
        compilation = await self.db.get(Compilation, compilation_id)
        if compilation is None:
            return
        await self.db.delete(compilation)
        await self.db.flush()
