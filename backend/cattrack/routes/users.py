"""
CatTrack Backend — User Route Handlers
=======================================

What:  Registration, profile reads, and "current user" update/delete.
How:   Update and delete always target the user named in the bearer token;
       there is no route for changing somebody else's account.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from cattrack.dependencies import get_current_actor, get_user_service
from cattrack.models.user import Actor
from cattrack.schemas.common import ErrorResponse, MessageResponse
from cattrack.schemas.user import UserCreate, UserPublic, UserUpdate
from cattrack.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("", response_model=List[UserPublic], summary="List users")
async def list_users(service: UserService = Depends(get_user_service)) -> List[UserPublic]:
    return await service.list_users()


@router.get(
    "/token",
    response_model=MessageResponse[UserPublic],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Check the current bearer token",
)
async def check_token(
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> MessageResponse[UserPublic]:
    return MessageResponse(message="Token is valid", data=service.check_token(actor))


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a single user",
)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> UserPublic:
    return await service.get_user(user_id)


@router.post(
    "",
    response_model=MessageResponse[UserPublic],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        500: {"description": "Creation failed (e.g. email taken)", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> MessageResponse[UserPublic]:
    user = await service.create_user(payload)
    return MessageResponse(message="User created successfully", data=user)


@router.put(
    "",
    response_model=MessageResponse[UserPublic],
    summary="Update the current user",
)
async def update_current_user(
    payload: UserUpdate,
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> MessageResponse[UserPublic]:
    user = await service.update_user(actor.id, payload, actor)
    return MessageResponse(message="User updated successfully", data=user)


@router.delete(
    "",
    response_model=MessageResponse[UserPublic],
    summary="Delete the current user",
)
async def delete_current_user(
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> MessageResponse[UserPublic]:
    user = await service.delete_user(actor.id, actor)
    return MessageResponse(message="User deleted successfully", data=user)
