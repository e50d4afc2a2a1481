"""Public compilation endpoints."""

from fastapi import APIRouter, Request

from core.config import get_settings
from core.ratelimit import PUBLIC_LIMIT, limiter
from routes.dependencies import (
    CompilationId,
    CompilationServiceDep,
    PageOffset,
    PageSize,
)
from schemas import CompilationResponse

router = APIRouter(prefix="/compilations", tags=["compilations"])


@router.get(
    "",
    response_model=list[CompilationResponse],
    responses={400: {"description": "Invalid pagination parameters"}},
)
@limiter.limit(PUBLIC_LIMIT)
async def list_compilations(
    request: Request,
    service: CompilationServiceDep,
    pinned: bool = False,
    from_: PageOffset = 0,
    size: PageSize = None,
) -> list[CompilationResponse]:
    """List compilations with the given pinned flag, by id ascending."""
    if size is None:
        size = get_settings().default_page_size
    return await service.get_all(pinned=pinned, from_=from_, size=size)


@router.get(
    "/{comp_id}",
    response_model=CompilationResponse,
    responses={
        400: {"description": "Invalid compilation id"},
        404: {"description": "Compilation not found"},
    },
)
@limiter.limit(PUBLIC_LIMIT)
async def get_compilation(
    request: Request, comp_id: CompilationId, service: CompilationServiceDep
) -> CompilationResponse:
    """Get a compilation by id."""
    return await service.get_by_id(comp_id)
