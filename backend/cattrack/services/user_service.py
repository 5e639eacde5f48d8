"""
CatTrack Backend — User Service (Business Logic Orchestrator)
==============================================================

What:  Registration, profile reads, self-update, self-delete, login and the
       token check.
How:   Same fetch → authorize → write sequence as CatService. For users the
       resource owner is the user itself, so `update-own` / `delete-own`
       reduce to "actor id equals user id".
Who:   Called by the users and auth route handlers, and by the app lifespan
       for the optional admin bootstrap.

Credentials:
    Passwords are hashed by the injected PasswordHasher (one configured cost
    factor for creation and update). The hash is never part of a return value;
    every method returns UserPublic.

Cats owned by a user keep their owner snapshot when the user changes name or
email, and are not removed when the user deletes their account.
"""

import logging
from typing import List

from cattrack.exceptions import (
    AuthenticationError,
    CatTrackError,
    NotFoundError,
    OperationFailedError,
)
from cattrack.models.user import Actor, Role, UserDocument
from cattrack.schemas.user import UserCreate, UserPublic, UserUpdate
from cattrack.services.authorization import Action, authorize
from cattrack.services.credentials import PasswordHasher
from cattrack.services.store_base import DocumentStore, new_document_id

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


class UserService:
    """Business logic layer for user operations."""

    def __init__(self, store: DocumentStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> UserPublic:
        try:
            document = await self.store.find_by_id(user_id)
        except Exception as e:
            logger.error("Store error fetching user %s: %s", user_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Could not retrieve the user",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )
        if document is None:
            raise NotFoundError(USER_NOT_FOUND, resource="user", resource_id=user_id)
        return _public(UserDocument.model_validate(document))

    async def list_users(self) -> List[UserPublic]:
        """All users (possibly none), in store order."""
        try:
            documents = await self.store.find()
        except Exception as e:
            logger.error("Store error listing users: %s", str(e), exc_info=True)
            raise OperationFailedError(
                message="Could not retrieve users",
                context={"error_type": type(e).__name__},
            )
        return [_public(UserDocument.model_validate(doc)) for doc in documents]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_user(self, payload: UserCreate, role: Role = Role.USER) -> UserPublic:
        """
        Register a new account.

        A duplicate email is rejected by the store's unique index and reported
        like any other store failure.
        """
        try:
            user = UserDocument(
                id=new_document_id(),
                user_name=payload.user_name,
                email=payload.email,
                role=role,
                password=await self.hasher.hash(payload.password),
            )
            await self.store.insert(user.to_document())
            logger.info("User %s created (role=%s)", user.id, role.value)
            return _public(user)
        except Exception as e:
            logger.error("User creation failed: %s", str(e), exc_info=True)
            raise OperationFailedError(
                message="User creation failed",
                context={"error_type": type(e).__name__},
            )

    async def update_user(self, user_id: str, payload: UserUpdate, actor: Actor) -> UserPublic:
        """
        Self-update of profile fields and, optionally, the password.

        The role cannot be changed through this path.
        """
        try:
            current = await self._fetch_for_write(user_id)
            authorize(actor, current.id, Action.UPDATE_OWN, "Only the user can update their profile")

            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            if payload.password is not None:
                changes["password"] = await self.hasher.hash(payload.password)

            updated = await self.store.update_by_id(user_id, changes)
            if updated is None:
                raise NotFoundError(USER_NOT_FOUND, resource="user", resource_id=user_id)
            logger.info("User %s updated (%s)", user_id, ", ".join(sorted(changes)))
            return _public(UserDocument.model_validate(updated))
        except CatTrackError:
            raise
        except Exception as e:
            logger.error("User update failed for %s: %s", user_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="User update failed",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def delete_user(self, user_id: str, actor: Actor) -> UserPublic:
        try:
            current = await self._fetch_for_write(user_id)
            authorize(actor, current.id, Action.DELETE_OWN, "Only the user can delete their account")
            deleted = await self.store.delete_by_id(user_id)
            if deleted is None:
                raise NotFoundError(USER_NOT_FOUND, resource="user", resource_id=user_id)
            logger.info("User %s deleted", user_id)
            return _public(UserDocument.model_validate(deleted))
        except CatTrackError:
            raise
        except Exception as e:
            logger.error("User deletion failed for %s: %s", user_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="User deletion failed",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    # ── Authentication ────────────────────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> UserDocument:
        """
        Look up the account by email and verify the password.

        Raises:
            AuthenticationError: Unknown email or wrong password (same message
                for both).
            OperationFailedError: Store failure.
        """
        try:
            matches = await self.store.find({"email": email})
        except Exception as e:
            logger.error("Store error during login: %s", str(e), exc_info=True)
            raise OperationFailedError(
                message="Login failed",
                context={"error_type": type(e).__name__},
            )
        if not matches:
            raise AuthenticationError("Incorrect username/password")
        user = UserDocument.model_validate(matches[0])
        if not await self.hasher.verify(password, user.password):
            raise AuthenticationError("Incorrect username/password")
        return user

    async def resolve_actor(self, user_id: str) -> Actor:
        """
        Current identity of a token's subject, read from the store.

        Name, email and role come from the stored record, so a profile change
        applies to the next request without a new login.

        Raises:
            AuthenticationError: The account no longer exists.
            OperationFailedError: Store failure.
        """
        try:
            document = await self.store.find_by_id(user_id)
        except Exception as e:
            logger.error("Store error resolving token subject %s: %s", user_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Could not retrieve the user",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )
        if document is None:
            logger.info("Token subject %s no longer exists", user_id)
            raise AuthenticationError("Token is invalid", context={"error": "unknown subject"})
        user = UserDocument.model_validate(document)
        return Actor(id=user.id, user_name=user.user_name, email=user.email, role=user.role)

    def check_token(self, actor: Actor) -> UserPublic:
        """Public view of the actor resolved for this request. No extra store access."""
        try:
            return UserPublic(
                id=actor.id,
                user_name=actor.user_name,
                email=actor.email,
                role=actor.role,
            )
        except Exception as e:
            logger.error("Token check failed: %s", str(e))
            raise OperationFailedError(
                message="Token is invalid",
                context={"error_type": type(e).__name__},
            )

    async def ensure_admin(self, email: str, user_name: str, password: str) -> UserPublic:
        """
        Create the bootstrap admin account unless that email already exists.

        Idempotent: restarting with the same settings does nothing.

        Raises:
            OperationFailedError: Store failure or unusable bootstrap values.
        """
        try:
            existing = await self.store.find({"email": email})
            if existing:
                user = UserDocument.model_validate(existing[0])
                if user.role is not Role.ADMIN:
                    logger.warning("Bootstrap admin email %s belongs to a non-admin account", email)
                return _public(user)
            payload = UserCreate(user_name=user_name, email=email, password=password)
        except Exception as e:
            logger.error("Admin bootstrap failed: %s", str(e), exc_info=True)
            raise OperationFailedError(
                message="Admin bootstrap failed",
                context={"error_type": type(e).__name__},
            )
        admin = await self.create_user(payload, role=Role.ADMIN)
        logger.info("Bootstrap admin %s created", admin.id)
        return admin

    async def _fetch_for_write(self, user_id: str) -> UserDocument:
        document = await self.store.find_by_id(user_id)
        if document is None:
            raise NotFoundError(USER_NOT_FOUND, resource="user", resource_id=user_id)
        return UserDocument.model_validate(document)


def _public(user: UserDocument) -> UserPublic:
    return UserPublic.model_validate(user.public())
