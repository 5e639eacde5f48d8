"""
CatTrack Backend — Login Route
===============================

What:  Exchanges email + password for a bearer token.
How:   UserService verifies the credentials; TokenService signs the claims
       that later requests are authorized against.
"""

from fastapi import APIRouter, Depends

from cattrack.dependencies import get_token_service, get_user_service
from cattrack.schemas.common import ErrorResponse, LoginRequest, LoginResponse
from cattrack.schemas.user import UserPublic
from cattrack.services.credentials import TokenService
from cattrack.services.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Incorrect username/password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    users: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    user = await users.authenticate(payload.username, payload.password)
    return LoginResponse(
        token=tokens.issue(user),
        user=UserPublic.model_validate(user.public()),
    )
