"""
CatTrack Backend — Credentials Unit Tests
==========================================

What we test:
    ✅ bcrypt hashes verify, use the configured cost, salt per hash
    ✅ Non-bcrypt stored values fail verification instead of raising
    ✅ Issued tokens carry the identity claims and decode to an Actor
    ✅ Tampered, expired, foreign-secret and malformed tokens → AuthenticationError
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cattrack.exceptions import AuthenticationError
from cattrack.models.user import Role, UserDocument
from cattrack.services.credentials import PasswordHasher, TokenService

SECRET = "test-secret-not-real"


@pytest.fixture
def user():
    return UserDocument(
        id="aaaaaaaaaaaaaaaaaaaaaaaa",
        user_name="Alice",
        email="alice@example.com",
        role=Role.USER,
        password="unused",
    )


class TestPasswordHasher:
    def test_hash_and_verify(self, password_hasher):
        hashed = password_hasher.hash_sync("secret1")
        assert password_hasher.verify_sync("secret1", hashed)
        assert not password_hasher.verify_sync("secret2", hashed)

    def test_cost_factor_in_hash(self):
        hashed = PasswordHasher(rounds=5).hash_sync("secret1")
        assert hashed.split("$")[2] == "05"

    def test_fresh_salt_per_hash(self, password_hasher):
        assert password_hasher.hash_sync("secret1") != password_hasher.hash_sync("secret1")

    def test_garbage_hash_does_not_verify(self, password_hasher):
        assert password_hasher.verify_sync("secret1", "not-a-bcrypt-hash") is False

    @pytest.mark.asyncio
    async def test_async_wrappers(self, password_hasher):
        hashed = await password_hasher.hash("secret1")
        assert await password_hasher.verify("secret1", hashed)


class TestTokenService:
    def test_issued_claims(self, token_service, user):
        token = token_service.issue(user)
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["sub"] == user.id
        assert claims["user_name"] == "Alice"
        assert claims["email"] == "alice@example.com"
        assert claims["role"] == "user"
        assert claims["exp"] > claims["iat"]
        assert "password" not in claims

    def test_decode_returns_actor(self, token_service, user):
        actor = token_service.decode(token_service.issue(user))
        assert actor.id == user.id
        assert actor.role is Role.USER
        assert actor.email == "alice@example.com"

    def test_tampered_token(self, token_service, user):
        token = token_service.issue(user)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with pytest.raises(AuthenticationError, match="Token is invalid"):
            token_service.decode(tampered)

    def test_other_secret(self, token_service, user):
        foreign = TokenService(secret="someone-else").issue(user)
        with pytest.raises(AuthenticationError):
            token_service.decode(foreign)

    def test_expired(self, token_service, user):
        expired = TokenService(secret=SECRET, expire_minutes=-1).issue(user)
        with pytest.raises(AuthenticationError):
            token_service.decode(expired)

    def test_missing_exp(self, token_service):
        token = jwt.encode(
            {"sub": "x", "user_name": "A", "email": "a@example.com", "role": "user"},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            token_service.decode(token)

    def test_unknown_role(self, token_service):
        token = jwt.encode(
            {
                "sub": "x",
                "user_name": "A",
                "email": "a@example.com",
                "role": "superuser",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            token_service.decode(token)

    def test_not_a_token(self, token_service):
        with pytest.raises(AuthenticationError):
            token_service.decode("definitely-not-a-jwt")
