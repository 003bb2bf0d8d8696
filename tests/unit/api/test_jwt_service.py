"""Tests for JWT token handling and role resolution."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from src.api.services.jwt_service import (
    InvalidTokenError,
    JWTService,
    Role,
    TokenExpiredError,
    authenticate,
    role_for,
)
from src.settings import settings


@pytest.fixture
def service() -> JWTService:
    return JWTService()


def _encode(payload: dict) -> str:
    return jwt.encode(
        payload,
        settings.security.jwt_secret_key,
        algorithm=settings.security.jwt_algorithm,
    )


class TestJWTService:
    @staticmethod
    def test_round_trip_keeps_role(service: JWTService) -> None:
        token = service.create_token("manager", role=Role.STORE_MANAGER)

        payload = service.decode_token(token)

        assert payload.sub == "manager"
        assert payload.role == Role.STORE_MANAGER
        assert payload.is_store_manager is True
        assert payload.exp > payload.iat

    @staticmethod
    def test_default_role_is_user(service: JWTService) -> None:
        payload = service.decode_token(service.create_token("clerk"))

        assert payload.role == Role.USER
        assert payload.is_store_manager is False

    @staticmethod
    def test_missing_role_claim_falls_back_to_user(service: JWTService) -> None:
        now = datetime.now(UTC)
        token = _encode({"sub": "legacy", "iat": now, "exp": now + timedelta(minutes=5)})

        assert service.decode_token(token).role == Role.USER

    @staticmethod
    def test_expired_token(service: JWTService) -> None:
        now = datetime.now(UTC)
        token = _encode({"sub": "manager", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)})

        with pytest.raises(TokenExpiredError):
            service.decode_token(token)

    @staticmethod
    def test_wrong_signature(service: JWTService) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "manager", "iat": now, "exp": now + timedelta(minutes=5)},
            "another-secret-key-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            service.decode_token(token)

    @staticmethod
    def test_garbage_token(service: JWTService) -> None:
        with pytest.raises(InvalidTokenError):
            service.decode_token("not-a-jwt")

    @staticmethod
    def test_missing_subject(service: JWTService) -> None:
        now = datetime.now(UTC)
        token = _encode({"iat": now, "exp": now + timedelta(minutes=5)})

        with pytest.raises(InvalidTokenError):
            service.decode_token(token)

    @staticmethod
    def test_expire_seconds(service: JWTService) -> None:
        assert service.expire_seconds == settings.security.jwt_expire_minutes * 60

    @staticmethod
    def test_unknown_role_rejected() -> None:
        now = datetime.now(UTC)
        token = _encode({"sub": "manager", "role": "ADMIN", "iat": now, "exp": now + timedelta(minutes=5)})

        with pytest.raises(InvalidTokenError):
            JWTService().decode_token(token)

    @staticmethod
    def test_custom_lifetime() -> None:
        service = JWTService(expire_minutes=1)
        payload = service.decode_token(service.create_token("clerk"))

        assert service.expire_seconds == 60
        assert (payload.exp - payload.iat).total_seconds() == 60


class TestRoleFor:
    @staticmethod
    def test_store_manager() -> None:
        assert role_for("manager") == Role.STORE_MANAGER

    @staticmethod
    def test_regular_user() -> None:
        assert role_for("clerk") == Role.USER


class TestAuthenticate:
    @staticmethod
    def test_valid_credentials() -> None:
        assert authenticate("manager", "managerpass123") is Role.STORE_MANAGER
        assert authenticate("clerk", "clerkpass123") is Role.USER

    @staticmethod
    def test_wrong_password() -> None:
        assert authenticate("manager", "clerkpass123") is None

    @staticmethod
    def test_unknown_user() -> None:
        assert authenticate("nobody", "managerpass123") is None
