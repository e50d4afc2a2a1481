"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services free of SQL.
They never commit; the request-scoped session owns the transaction.
"""

from repositories.compilation_repository import CompilationRepository
from repositories.event_repository import EventRepository
from repositories.user_repository import UserRepository
from repositories.utils import timed_query

__all__ = [
    "CompilationRepository",
    "EventRepository",
    "UserRepository",
    "timed_query",
]
