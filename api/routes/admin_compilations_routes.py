"""Admin compilation endpoints: create, partial update, delete."""

from fastapi import APIRouter, Request, Response
from starlette import status

from core.ratelimit import ADMIN_LIMIT, limiter
from routes.dependencies import CompilationId, CompilationServiceDep
from schemas import (
    CompilationResponse,
    NewCompilationRequest,
    UpdateCompilationRequest,
)

router = APIRouter(prefix="/admin/compilations", tags=["admin"])


@router.post(
    "",
    response_model=CompilationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Event not found"}},
)
@limiter.limit(ADMIN_LIMIT)
async def create_compilation(
    request: Request,
    body: NewCompilationRequest,
    service: CompilationServiceDep,
) -> CompilationResponse:
    """Create a compilation, optionally with events."""
    return await service.create(body)


@router.patch(
    "/{comp_id}",
    response_model=CompilationResponse,
    responses={
        400: {"description": "Invalid title"},
        404: {"description": "Compilation or event not found"},
    },
)
@limiter.limit(ADMIN_LIMIT)
async def update_compilation(
    request: Request,
    comp_id: CompilationId,
    body: UpdateCompilationRequest,
    service: CompilationServiceDep,
) -> CompilationResponse:
    """Update title and pinned flag when given; always replace the event set."""
    return await service.update(comp_id, body)


@router.delete(
    "/{comp_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Compilation not found"}},
)
@limiter.limit(ADMIN_LIMIT)
async def delete_compilation(
    request: Request, comp_id: CompilationId, service: CompilationServiceDep
) -> Response:
    """Delete a compilation."""
    await service.delete_by_id(comp_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
