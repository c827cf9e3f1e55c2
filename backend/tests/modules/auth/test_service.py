"""Tests for the authentication service."""

import threading
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from modules.auth.exceptions import (
    EmailAlreadyExistsError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TokenSecretMissingError,
    UserNotFoundError,
)
from modules.auth.models import UpdateProfileRequest
from modules.auth.service import AuthService, normalize_email
from shared.exceptions import ValidationError
from tests.conftest import TEST_JWT_SECRET, create_test_token, make_settings
from tests.fakes import InMemoryUserRepository


async def register_jane(service: AuthService):
    return await service.register("Jane", "jane@x.com", "secret1")


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Jane@X.COM ") == "jane@x.com"

    def test_none(self):
        assert normalize_email(None) == ""


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(self, auth_service, user_repository):
        """The stored record carries a bcrypt hash, never the password."""
        profile = await register_jane(auth_service)

        record = user_repository.get_by_id(profile.id)
        assert profile.name == "Jane"
        assert profile.email == "jane@x.com"
        assert record.password_hash != "secret1"
        assert record.password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_register_normalizes_email(self, auth_service):
        profile = await auth_service.register("  Jane ", " Jane@X.com ", "secret1")
        assert profile.name == "Jane"
        assert profile.email == "jane@x.com"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service, user_repository):
        await register_jane(auth_service)
        with pytest.raises(EmailAlreadyExistsError) as exc_info:
            await auth_service.register("Other", "JANE@x.com", "secret2")
        assert exc_info.value.message == "User already exists"
        assert len(user_repository.users) == 1

    @pytest.mark.asyncio
    async def test_missing_fields_are_all_reported(self, auth_service):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(None, "", None)
        assert exc_info.value.errors == [
            "Name is required",
            "Email is required",
            "Password is required",
        ]

    @pytest.mark.asyncio
    async def test_invalid_email(self, auth_service):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("Jane", "not-an-email", "secret1")
        assert exc_info.value.message == "Please provide a valid email address"

    @pytest.mark.asyncio
    async def test_short_password(self, auth_service):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("Jane", "jane@x.com", "abc")
        assert exc_info.value.message == "Password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_password_over_bcrypt_limit(self, auth_service):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("Jane", "jane@x.com", "x" * 73)
        assert exc_info.value.message == "Password must be at most 72 bytes"


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_login_returns_verifiable_token(self, auth_service):
        profile = await register_jane(auth_service)

        result = await auth_service.authenticate("jane@x.com", "secret1")

        claim = await auth_service.verify_token(result.token)
        assert result.user.id == profile.id
        assert claim.sub == profile.id
        assert claim.email == "jane@x.com"

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive_on_email(self, auth_service):
        await register_jane(auth_service)
        result = await auth_service.authenticate("JANE@X.COM", "secret1")
        assert result.user.email == "jane@x.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service):
        await register_jane(auth_service)
        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate("jane@x.com", "wrongpw")

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(self, auth_service):
        """Unknown email and wrong password fail with the same error."""
        await register_jane(auth_service)

        with pytest.raises(InvalidCredentialsError) as unknown:
            await auth_service.authenticate("nobody@x.com", "secret1")
        with pytest.raises(InvalidCredentialsError) as wrong:
            await auth_service.authenticate("jane@x.com", "wrongpw")

        assert unknown.value.to_dict() == wrong.value.to_dict()

    @pytest.mark.asyncio
    async def test_missing_credentials(self, auth_service):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.authenticate("jane@x.com", "")
        assert exc_info.value.message == "Please provide email and password"

    @pytest.mark.asyncio
    async def test_token_expires_after_configured_days(self, user_repository):
        issued_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        service = AuthService(user_repository, make_settings(), clock=lambda: issued_at)
        await register_jane(service)

        result = await service.authenticate("jane@x.com", "secret1")

        payload = jwt.decode(
            result.token,
            TEST_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False},
        )
        assert payload["iat"] == int(issued_at.timestamp())
        assert payload["exp"] == int((issued_at + timedelta(days=7)).timestamp())


class TestVerifyToken:
    @pytest.mark.asyncio
    async def test_valid_token(self, auth_service):
        claim = await auth_service.verify_token(create_test_token())
        assert claim.sub == "test-user-123"
        assert claim.email == "test@example.com"

    @pytest.mark.asyncio
    async def test_token_near_end_of_lifetime_is_valid(self, auth_service):
        issued_at = datetime.now(timezone.utc) - timedelta(days=7) + timedelta(seconds=60)
        claim = await auth_service.verify_token(create_test_token(issued_at=issued_at))
        assert claim.sub == "test-user-123"

    @pytest.mark.asyncio
    async def test_token_past_lifetime_is_expired(self, auth_service):
        issued_at = datetime.now(timezone.utc) - timedelta(days=7) - timedelta(seconds=1)
        with pytest.raises(ExpiredTokenError):
            await auth_service.verify_token(create_test_token(issued_at=issued_at))

    @pytest.mark.asyncio
    async def test_expired_token(self, auth_service):
        with pytest.raises(ExpiredTokenError) as exc_info:
            await auth_service.verify_token(create_test_token(expired=True))
        assert exc_info.value.message == "Token has expired, please login again"

    @pytest.mark.asyncio
    async def test_malformed_token(self, auth_service):
        with pytest.raises(InvalidTokenError):
            await auth_service.verify_token("not-a-valid-token")

    @pytest.mark.asyncio
    async def test_wrong_secret(self, auth_service):
        token = create_test_token(secret="some-other-secret-key-for-tests")
        with pytest.raises(InvalidTokenError):
            await auth_service.verify_token(token)

    @pytest.mark.asyncio
    async def test_token_without_subject(self, auth_service):
        token = jwt.encode(
            {"email": "a@b.com", "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            await auth_service.verify_token(token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, auth_service, token):
        with pytest.raises(MissingTokenError):
            await auth_service.verify_token(token)

    @pytest.mark.asyncio
    async def test_missing_secret(self):
        service = AuthService(InMemoryUserRepository(), make_settings(jwt_secret=""))
        with pytest.raises(TokenSecretMissingError):
            await service.verify_token(create_test_token())

    @pytest.mark.asyncio
    async def test_missing_secret_checked_before_missing_token(self):
        service = AuthService(InMemoryUserRepository(), make_settings(jwt_secret=""))
        with pytest.raises(TokenSecretMissingError):
            await service.verify_token(None)

    @pytest.mark.asyncio
    async def test_login_without_secret(self, user_repository):
        service = AuthService(user_repository, make_settings(jwt_secret=""))
        await register_jane(service)
        with pytest.raises(TokenSecretMissingError):
            await service.authenticate("jane@x.com", "secret1")


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, auth_service):
        profile = await register_jane(auth_service)
        fetched = await auth_service.get_profile(profile.id)
        assert fetched == profile

    @pytest.mark.asyncio
    async def test_get_profile_unknown_user(self, auth_service):
        with pytest.raises(UserNotFoundError):
            await auth_service.get_profile("missing")

    @pytest.mark.asyncio
    async def test_update_name_and_email(self, auth_service):
        profile = await register_jane(auth_service)

        updated = await auth_service.update_profile(
            profile.id,
            UpdateProfileRequest(name="Janet", email="Janet@X.com"),
        )

        assert updated.name == "Janet"
        assert updated.email == "janet@x.com"
        result = await auth_service.authenticate("janet@x.com", "secret1")
        assert result.user.id == profile.id

    @pytest.mark.asyncio
    async def test_update_without_changes(self, auth_service, user_repository):
        profile = await register_jane(auth_service)
        updated = await auth_service.update_profile(
            profile.id,
            UpdateProfileRequest(name="Jane", email="jane@x.com"),
        )
        assert updated.updated_at == profile.updated_at

    @pytest.mark.asyncio
    async def test_email_taken_by_another_user(self, auth_service):
        profile = await register_jane(auth_service)
        await auth_service.register("Bob", "bob@x.com", "secret2")

        with pytest.raises(EmailAlreadyExistsError) as exc_info:
            await auth_service.update_profile(
                profile.id,
                UpdateProfileRequest(name="Jane", email="bob@x.com"),
            )
        assert exc_info.value.message == "Email is already in use"

    @pytest.mark.asyncio
    async def test_change_password(self, auth_service):
        profile = await register_jane(auth_service)

        await auth_service.update_profile(
            profile.id,
            UpdateProfileRequest(
                name="Jane",
                email="jane@x.com",
                current_password="secret1",
                new_password="secret2",
            ),
        )

        await auth_service.authenticate("jane@x.com", "secret2")
        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate("jane@x.com", "secret1")

    @pytest.mark.asyncio
    async def test_change_password_needs_both_fields(self, auth_service):
        profile = await register_jane(auth_service)
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.update_profile(
                profile.id,
                UpdateProfileRequest(name="Jane", email="jane@x.com", new_password="secret2"),
            )
        assert exc_info.value.message == "To change password, provide both current and new password"

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, auth_service):
        profile = await register_jane(auth_service)
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.update_profile(
                profile.id,
                UpdateProfileRequest(
                    name="Jane",
                    email="jane@x.com",
                    current_password="wrongpw",
                    new_password="secret2",
                ),
            )
        assert exc_info.value.message == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_short_new_password(self, auth_service):
        profile = await register_jane(auth_service)
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.update_profile(
                profile.id,
                UpdateProfileRequest(
                    name="Jane",
                    email="jane@x.com",
                    current_password="secret1",
                    new_password="abc",
                ),
            )
        assert exc_info.value.message == "New password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_blank_name(self, auth_service):
        profile = await register_jane(auth_service)
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.update_profile(
                profile.id,
                UpdateProfileRequest(name="  ", email="jane@x.com"),
            )
        assert exc_info.value.message == "Name is required"


class RecordingHasher:
    """Plain-text hasher that notes which thread did the work."""

    def __init__(self):
        self.threads = set()

    def hash(self, password: str) -> str:
        self.threads.add(threading.get_ident())
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.threads.add(threading.get_ident())
        return hashed == f"hashed:{password}"


class TestHashingOffEventLoop:
    @pytest.mark.asyncio
    async def test_hashing_runs_in_worker_thread(self, user_repository, settings):
        hasher = RecordingHasher()
        service = AuthService(user_repository, settings, hasher=hasher)

        await register_jane(service)
        await service.authenticate("jane@x.com", "secret1")
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody@x.com", "secret1")

        assert hasher.threads
        assert threading.get_ident() not in hasher.threads
