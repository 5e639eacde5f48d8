"""
CatTrack Backend — FastAPI Dependency Providers
================================================

What:  Builds services, stores and the current Actor for route handlers.
How:   Plain functions wired with Depends(); tests replace any of them through
       `app.dependency_overrides`.
Who:   Injected into route handlers.

Dependency graph:
    get_database ──▶ get_user_store ──▶ get_user_service ◀── get_password_hasher
                 └─▶ get_cat_store  ──▶ get_cat_service
    get_token_service + get_user_service ──▶ get_current_actor (Authorization: Bearer <token>)
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.asynchronous.database import AsyncDatabase

from cattrack.config import settings
from cattrack.database import CATS_COLLECTION, USERS_COLLECTION, get_database
from cattrack.exceptions import AuthenticationError
from cattrack.models.user import Actor
from cattrack.services.cat_service import CatService
from cattrack.services.credentials import PasswordHasher, TokenService
from cattrack.services.mongo_store import MongoDocumentStore
from cattrack.services.store_base import DocumentStore
from cattrack.services.user_service import UserService

# auto_error=False so a missing header reaches our own 401 handler
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )


def get_user_store(db: AsyncDatabase = Depends(get_database)) -> DocumentStore:
    return MongoDocumentStore(db[USERS_COLLECTION])


def get_cat_store(db: AsyncDatabase = Depends(get_database)) -> DocumentStore:
    return MongoDocumentStore(db[CATS_COLLECTION])


def get_user_service(
    store: DocumentStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(store=store, hasher=hasher)


def get_cat_service(store: DocumentStore = Depends(get_cat_store)) -> CatService:
    return CatService(store=store)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    users: UserService = Depends(get_user_service),
) -> Actor:
    """
    Resolve the bearer token into the Actor as currently stored.

    The token proves who is calling; name, email and role are re-read from
    the users collection, so owner snapshots are taken from the live record.

    Raises:
        AuthenticationError: Header missing, not a bearer token, the token
            fails verification, or its user was deleted (→ 401).
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Token is invalid", context={"error": "missing bearer token"})
    claimed = tokens.decode(credentials.credentials)
    return await users.resolve_actor(claimed.id)
