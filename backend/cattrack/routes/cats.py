"""
CatTrack Backend — Cat Route Handlers
======================================

What:  HTTP surface for cats: reads, bounding-box search and mutations.
How:   Extracts path/query/body, resolves the actor for mutating calls,
       delegates to CatService and wraps mutations in the {message, data}
       envelope.
Who:   Frontend map and "my cats" views.

Route order matters: `/cats/user` and `/cats/area` are declared before
`/cats/{cat_id}` so they are not captured as ids.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from cattrack.dependencies import get_cat_service, get_current_actor
from cattrack.models.cat import CatDocument
from cattrack.models.user import Actor
from cattrack.schemas.cat import CatCreate, CatOwnerUpdate, CatUpdate
from cattrack.schemas.common import ErrorResponse, MessageResponse
from cattrack.services.cat_service import CatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cats", tags=["Cats"])

_errors = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not allowed for this actor", "model": ErrorResponse},
    404: {"description": "Cat not found", "model": ErrorResponse},
    500: {"description": "Store failure", "model": ErrorResponse},
}


@router.get("", response_model=List[CatDocument], summary="List all cats")
async def list_cats(service: CatService = Depends(get_cat_service)) -> List[CatDocument]:
    return await service.list_cats()


@router.get(
    "/user",
    response_model=List[CatDocument],
    responses={401: _errors[401]},
    summary="List cats owned by the current user",
)
async def list_my_cats(
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> List[CatDocument]:
    return await service.list_cats(owner_id=actor.id)


@router.get(
    "/area",
    response_model=List[CatDocument],
    responses={400: _errors[400]},
    summary="List cats inside a latitude/longitude box",
)
async def list_cats_in_area(
    min_lat: float = Query(alias="minLat", ge=-90, le=90),
    max_lat: float = Query(alias="maxLat", ge=-90, le=90),
    min_lon: float = Query(alias="minLon", ge=-180, le=180),
    max_lon: float = Query(alias="maxLon", ge=-180, le=180),
    service: CatService = Depends(get_cat_service),
) -> List[CatDocument]:
    return await service.list_cats_in_box(
        min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon
    )


@router.get(
    "/{cat_id}",
    response_model=CatDocument,
    responses={404: _errors[404]},
    summary="Get a single cat",
)
async def get_cat(cat_id: str, service: CatService = Depends(get_cat_service)) -> CatDocument:
    return await service.get_cat(cat_id)


@router.post(
    "",
    response_model=MessageResponse[CatDocument],
    responses={k: _errors[k] for k in (400, 401, 500)},
    summary="Create a cat owned by the current user",
)
async def create_cat(
    payload: CatCreate,
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> MessageResponse[CatDocument]:
    cat = await service.create_cat(payload, actor)
    return MessageResponse(message="Cat created successfully", data=cat)


@router.put(
    "/admin/{cat_id}",
    response_model=MessageResponse[CatDocument],
    responses=_errors,
    summary="Change a cat's owner (admin or current owner)",
)
async def reassign_cat_owner(
    cat_id: str,
    payload: CatOwnerUpdate,
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> MessageResponse[CatDocument]:
    cat = await service.reassign_owner(cat_id, payload.owner, actor)
    return MessageResponse(message="Cat updated successfully", data=cat)


@router.delete(
    "/admin/{cat_id}",
    response_model=MessageResponse[CatDocument],
    responses={k: _errors[k] for k in (401, 403, 404, 500)},
    summary="Delete any cat (admin only)",
)
async def delete_cat_as_admin(
    cat_id: str,
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> MessageResponse[CatDocument]:
    cat = await service.delete_cat(cat_id, actor, as_admin=True)
    return MessageResponse(message="Cat deleted successfully", data=cat)


@router.put(
    "/{cat_id}",
    response_model=MessageResponse[CatDocument],
    responses=_errors,
    summary="Update one of the current user's cats",
)
async def update_cat(
    cat_id: str,
    payload: CatUpdate,
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> MessageResponse[CatDocument]:
    cat = await service.update_cat(cat_id, payload, actor)
    return MessageResponse(message="Cat updated successfully", data=cat)


@router.delete(
    "/{cat_id}",
    response_model=MessageResponse[CatDocument],
    responses={k: _errors[k] for k in (401, 403, 404, 500)},
    summary="Delete one of the current user's cats",
)
async def delete_cat(
    cat_id: str,
    actor: Actor = Depends(get_current_actor),
    service: CatService = Depends(get_cat_service),
) -> MessageResponse[CatDocument]:
    cat = await service.delete_cat(cat_id, actor)
    return MessageResponse(message="Cat deleted successfully", data=cat)
