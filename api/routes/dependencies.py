"""FastAPI dependencies that assemble services for a request."""

from typing import Annotated

from fastapi import Depends, Path, Query

from core.database import DbSession
from models import ID_MAX, ID_MIN
from repositories import CompilationRepository, EventRepository, UserRepository
from services.compilations_service import CompilationService
from services.events_service import EventService
from services.users_service import UserService

# Path/query integers are limited to what the id columns can hold; values
# outside that range are a 422, in-range values reach the service checks.
CompilationId = Annotated[int, Path(ge=ID_MIN, le=ID_MAX)]
PageOffset = Annotated[int, Query(alias="from", ge=ID_MIN, le=ID_MAX)]
PageSize = Annotated[int | None, Query(ge=ID_MIN, le=ID_MAX)]


def get_compilation_service(db: DbSession) -> CompilationService:
    """Build the compilation service graph on the request's session."""
    return CompilationService(
        compilations=CompilationRepository(db),
        events=EventService(EventRepository(db)),
        users=UserService(UserRepository(db)),
    )


CompilationServiceDep = Annotated[CompilationService, Depends(get_compilation_service)]
