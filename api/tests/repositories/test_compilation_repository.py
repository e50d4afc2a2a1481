"""Tests for CompilationRepository against an in-memory SQLite database."""

import pytest
from sqlalchemy import func, select

from models import Compilation, Event, User, compilation_events
from repositories.compilation_repository import CompilationRepository
from tests.factories import (
    CompilationFactory,
    EventFactory,
    create_async,
    create_batch_async,
)


@pytest.mark.integration
class TestFindByPinned:
    """Pagination and filtering of compilations."""

    @pytest.fixture
    async def seeded(self, db_session):
        for comp_id, pinned in [(1, True), (2, True), (3, False), (5, True)]:
            await create_async(
                CompilationFactory, db_session, id=comp_id, pinned=pinned
            )

    async def test_first_page(self, db_session, seeded):
        repo = CompilationRepository(db_session)

        result = await repo.find_by_pinned(True, page=0, size=2)

        assert [c.id for c in result] == [1, 2]

    async def test_second_page(self, db_session, seeded):
        repo = CompilationRepository(db_session)

        result = await repo.find_by_pinned(True, page=1, size=2)

        assert [c.id for c in result] == [5]

    async def test_unpinned(self, db_session, seeded):
        repo = CompilationRepository(db_session)

        result = await repo.find_by_pinned(False, page=0, size=10)

        assert [c.id for c in result] == [3]

    async def test_page_past_end_is_empty(self, db_session, seeded):
        repo = CompilationRepository(db_session)

        assert await repo.find_by_pinned(True, page=5, size=2) == []


@pytest.mark.integration
class TestLookups:
    async def test_get_by_id_loads_events(self, db_session):
        events = await create_batch_async(EventFactory, db_session, 2)
        compilation = await create_async(
            CompilationFactory, db_session, events=set(events)
        )
        db_session.expunge_all()

        found = await CompilationRepository(db_session).get_by_id(compilation.id)

        assert found is not None
        assert {e.id for e in found.events} == {e.id for e in events}
        assert all(e.initiator is not None for e in found.events)

    async def test_get_by_id_missing(self, db_session):
        assert await CompilationRepository(db_session).get_by_id(404) is None

    async def test_get_by_id_for_update(self, db_session):
        compilation = await create_async(CompilationFactory, db_session, title="Lock")

        found = await CompilationRepository(db_session).get_by_id_for_update(
            compilation.id
        )

        assert found is not None
        assert found.title == "Lock"

    async def test_exists(self, db_session):
        compilation = await create_async(CompilationFactory, db_session)
        repo = CompilationRepository(db_session)

        assert await repo.exists(compilation.id) is True
        assert await repo.exists(compilation.id + 100) is False


@pytest.mark.integration
class TestSave:
    async def test_new_compilation_gets_id(self, db_session):
        saved = await CompilationRepository(db_session).save(
            Compilation(title="Fresh", pinned=True, events=set())
        )

        assert saved.id is not None
        assert saved.pinned is True

    async def test_rebuilt_events_are_reconciled_not_duplicated(self, db_session):
        stored = await create_async(EventFactory, db_session)
        initiator_id = stored.initiator.id
        db_session.expunge_all()

        rebuilt = Event(
            id=stored.id,
            title=stored.title,
            annotation=stored.annotation,
            description=stored.description,
            event_date=stored.event_date,
            paid=stored.paid,
            participant_limit=stored.participant_limit,
            request_moderation=stored.request_moderation,
            confirmed_requests=stored.confirmed_requests,
            views=stored.views,
            created_on=stored.created_on,
            published_on=stored.published_on,
            initiator=User(
                id=initiator_id,
                name=stored.initiator.name,
                email=stored.initiator.email,
            ),
        )

        saved = await CompilationRepository(db_session).save(
            Compilation(title="Merged", pinned=False, events={rebuilt})
        )

        assert [e.id for e in saved.events] == [stored.id]
        event_count = await db_session.scalar(select(func.count(Event.id)))
        user_count = await db_session.scalar(select(func.count(User.id)))
        assert event_count == 1
        assert user_count == 1


@pytest.mark.integration
class TestDeleteById:
    async def test_delete_removes_links_but_keeps_events(self, db_session):
        events = await create_batch_async(EventFactory, db_session, 2)
        compilation = await create_async(
            CompilationFactory, db_session, events=set(events)
        )
        comp_id = compilation.id
        repo = CompilationRepository(db_session)

        await repo.delete_by_id(comp_id)

        assert await repo.exists(comp_id) is False
        links = await db_session.scalar(
            select(func.count()).select_from(compilation_events)
        )
        assert links == 0
        event_count = await db_session.scalar(select(func.count(Event.id)))
        assert event_count == 2

    async def test_delete_missing_is_noop(self, db_session):
        await CompilationRepository(db_session).delete_by_id(12345)
