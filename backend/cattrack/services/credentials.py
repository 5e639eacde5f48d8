"""
CatTrack Backend — Credentials (Password Hashing and Bearer Tokens)
====================================================================

What:  bcrypt password hashing and HS256 JWT issue/verify.
How:   Both classes take their configuration through the constructor; the
       dependency layer builds them from `settings`.
Who:   UserService (hashing, login); dependencies (token → Actor).

Password hashing:
    One cost factor (`bcrypt_rounds`) for every hash, new accounts and
    password changes alike. A fresh salt is generated per hash. Hashing is
    CPU-bound, so it runs in a worker thread to keep the event loop free.

Token claims:
    {
        "sub": "<user id>",
        "user_name": "Alice",
        "email": "alice@example.com",
        "role": "user",
        "iat": 1700000000,
        "exp": 1700086400
    }
    The token identifies the caller. `get_current_actor` re-reads the user
    named by `sub`, so name, email and role always come from the store.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from cattrack.exceptions import AuthenticationError
from cattrack.models.user import Actor, Role, UserDocument

logger = logging.getLogger(__name__)


class PasswordHasher:
    """bcrypt hashing with an explicit cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_sync(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.verify_sync, password, hashed)


class TokenService:
    """Issues and verifies the bearer tokens carried in `Authorization` headers."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: UserDocument) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": user.id,
            "user_name": user.user_name,
            "email": user.email,
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Actor:
        """
        Verify signature and expiry, then turn the claims into an Actor.

        Raises:
            AuthenticationError: bad signature, expired, or claims missing.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
            return Actor(
                id=str(claims["sub"]),
                user_name=claims["user_name"],
                email=claims["email"],
                role=Role(claims["role"]),
            )
        except jwt.InvalidTokenError as e:
            logger.info("Rejected bearer token: %s", str(e))
            raise AuthenticationError("Token is invalid", context={"error": type(e).__name__})
        except (KeyError, ValueError) as e:
            logger.info("Bearer token has malformed claims: %s", str(e))
            raise AuthenticationError("Token is invalid", context={"error": type(e).__name__})
