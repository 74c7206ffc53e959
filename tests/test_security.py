"""Tests for password hashing, session tokens and the identity service."""

from datetime import timedelta

import pytest
from jose import jwt

from helpdesk.config import Role
from helpdesk.core import AuthenticationException, ValidationException
from helpdesk.identity.application import IdentityService
from helpdesk.identity.domain import User
from helpdesk.identity.infrastructure import (
    BcryptPasswordHasher,
    JWTTokenService,
    SQLAlchemyUserRepository,
)
from tests.conftest import fast_hasher

SECRET = "unit-test-secret"

USER = User(id=7, email="ana@example.com", name="Ana", password_hash="x", role=Role.AGENT)


class TestPasswordHashing:
    """bcrypt hasher."""

    def test_hash_is_bcrypt(self):
        hashed = fast_hasher.hash("secret1")

        assert hashed != "secret1"
        assert hashed.startswith("$2b$")

    def test_verify(self):
        hashed = fast_hasher.hash("secret1")

        assert fast_hasher.verify("secret1", hashed) is True
        assert fast_hasher.verify("secret2", hashed) is False

    def test_salted(self):
        assert fast_hasher.hash("secret1") != fast_hasher.hash("secret1")

    def test_long_passwords_are_accepted(self):
        password = "é" * 100
        hashed = fast_hasher.hash(password)

        assert fast_hasher.verify(password, hashed) is True

    def test_malformed_hash_does_not_verify(self):
        assert BcryptPasswordHasher().verify("secret1", "not-a-hash") is False


class TestJWTTokens:
    """HS256 session tokens."""

    def test_payload(self):
        token = JWTTokenService(secret=SECRET).issue(USER)

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["sub"] == "7"
        assert payload["email"] == "ana@example.com"
        assert payload["role"] == "agent"
        assert "exp" in payload

    def test_verify_round_trip(self):
        service = JWTTokenService(secret=SECRET)

        actor = service.verify(service.issue(USER))

        assert actor.id == 7
        assert actor.role == Role.AGENT

    def test_wrong_secret_rejected(self):
        token = JWTTokenService(secret="other").issue(USER)

        with pytest.raises(AuthenticationException) as exc_info:
            JWTTokenService(secret=SECRET).verify(token)
        assert exc_info.value.message == "Invalid token"

    def test_expired_token_rejected(self):
        service = JWTTokenService(secret=SECRET, expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthenticationException):
            service.verify(service.issue(USER))

    def test_unknown_role_rejected(self):
        token = jwt.encode({"sub": "7", "email": "a@x.com", "role": "root"}, SECRET, algorithm="HS256")

        with pytest.raises(AuthenticationException):
            JWTTokenService(secret=SECRET).verify(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationException):
            JWTTokenService(secret=SECRET).verify("not.a.token")


class TestIdentityService:
    """Registration and login rules."""

    @pytest.fixture
    def service_factory(self):
        def factory(session):
            return IdentityService(
                SQLAlchemyUserRepository(session),
                fast_hasher,
                JWTTokenService(secret=SECRET),
            )
        return factory

    @pytest.mark.asyncio
    async def test_register_defaults_to_requester(self, db_session, service_factory):
        user = await service_factory(db_session).register("a@x.com", "A", "secret1")

        assert user.role == Role.REQUESTER
        assert user.password_hash != "secret1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,name,password", [
        ("", "A", "secret1"),
        ("a@x.com", "", "secret1"),
        ("a@x.com", "A", ""),
        ("a@x.com", "A", "12345"),
        (None, None, None),
    ])
    async def test_register_invalid_data(self, db_session, service_factory, email, name, password):
        with pytest.raises(ValidationException) as exc_info:
            await service_factory(db_session).register(email, name, password)
        assert exc_info.value.message == "Dados inválidos"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, db_session, service_factory):
        service = service_factory(db_session)
        await service.register("a@x.com", "A", "secret1")

        with pytest.raises(ValidationException) as exc_info:
            await service.register("a@x.com", "Outro", "secret2")
        assert exc_info.value.message == "E-mail já cadastrado"

    @pytest.mark.asyncio
    async def test_login_issues_token_for_user(self, db_session, service_factory):
        service = service_factory(db_session)
        user = await service.register("a@x.com", "A", "secret1")

        token, logged_in = await service.login("a@x.com", "secret1")

        assert logged_in.id == user.id
        assert JWTTokenService(secret=SECRET).verify(token).id == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [
        ("a@x.com", "wrong-password"),
        ("nobody@x.com", "secret1"),
        ("", ""),
    ])
    async def test_login_failures_share_one_message(self, db_session, service_factory, email, password):
        service = service_factory(db_session)
        await service.register("a@x.com", "A", "secret1")

        with pytest.raises(AuthenticationException) as exc_info:
            await service.login(email, password)
        assert exc_info.value.message == "Credenciais inválidas"
