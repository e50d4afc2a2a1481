"""Tests for EventRepository and UserRepository batch lookups."""

import pytest

from repositories.event_repository import EventRepository
from repositories.user_repository import UserRepository
from tests.factories import EventFactory, UserFactory, create_batch_async


@pytest.mark.integration
class TestEventRepository:
    async def test_get_many_loads_initiators(self, db_session):
        events = await create_batch_async(EventFactory, db_session, 2)

        found = await EventRepository(db_session).get_many_by_ids(
            {e.id for e in events}
        )

        assert [e.initiator.id for e in found] == [e.initiator.id for e in events]

    async def test_get_many_skips_missing_ids(self, db_session):
        events = await create_batch_async(EventFactory, db_session, 3)
        wanted = {events[0].id, events[2].id, 999}

        found = await EventRepository(db_session).get_many_by_ids(wanted)

        assert [e.id for e in found] == sorted([events[0].id, events[2].id])

    async def test_get_many_empty_input(self, db_session):
        assert await EventRepository(db_session).get_many_by_ids(set()) == []


@pytest.mark.integration
class TestUserRepository:
    async def test_get_many_ordered_by_id(self, db_session):
        users = await create_batch_async(UserFactory, db_session, 3)
        ids = [u.id for u in reversed(users)]

        found = await UserRepository(db_session).get_many_by_ids(ids + [999])

        assert [u.id for u in found] == sorted(ids)

    async def test_get_many_empty_input(self, db_session):
        assert await UserRepository(db_session).get_many_by_ids([]) == []
