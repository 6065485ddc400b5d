"""Firebase Authentication Service.

Wraps the Firebase Admin SDK (account creation, session cookies, token
verification) and the Identity Toolkit REST API (password sign-in and
password changes). Provider errors are mapped onto the app's exception
hierarchy here so routers never see a ``FirebaseError``.
"""

import contextlib
import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Any, Protocol

import httpx
from firebase_admin import auth as firebase_admin_auth
from firebase_admin.exceptions import FirebaseError

from autosphere.auth.exceptions import (
    InvalidCredentialsError,
    PasswordPolicyError,
    SessionCookieError,
    UserDisabledError,
    WeakPasswordError,
)
from autosphere.auth.identity_toolkit import (
    SIGN_IN_WITH_PASSWORD,
    UPDATE_ACCOUNT,
    SignInWithPasswordResponse,
    UpdateAccountResponse,
)
from autosphere.core.exceptions import AppException, ProviderError, RateLimitError
from autosphere.core.http import get_identity_toolkit_client
from autosphere.core.retry import with_retry
from autosphere.user.exceptions import EmailExistsError

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS_MESSAGES = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
}


@dataclass(frozen=True)
class FirebaseUser:
    """Authenticated Firebase user data."""

    uid: str
    email: str | None = None
    id_token: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Decoded token claims from Firebase."""

    uid: str
    email: str | None = None


class FirebaseAuthServiceProtocol(Protocol):
    """Operations the routers and dependencies rely on."""

    async def sign_in_with_email_password(
        self, email: str, password: str
    ) -> FirebaseUser: ...

    def create_session_cookie(self, id_token: str, expires_in: timedelta) -> str: ...

    def verify_session_cookie(
        self, session_cookie: str, check_revoked: bool = True
    ) -> TokenClaims: ...

    def verify_id_token(self, id_token: str) -> TokenClaims: ...

    def logout(self, session_cookie: str) -> None: ...

    def create_user(
        self, email: str, password: str, display_name: str | None = None
    ) -> FirebaseUser: ...

    def delete_user(self, uid: str) -> None: ...

    async def update_password(self, id_token: str, new_password: str) -> None: ...


class FirebaseAuthService:
    def __init__(
        self,
        api_key: str | None,
        identity_toolkit_base_url: str = "https://identitytoolkit.googleapis.com",
    ):
        self._api_key = api_key
        self._identity_toolkit_base_url = identity_toolkit_base_url

    # --- Identity Toolkit REST ---

    async def _identity_toolkit_post(
        self, endpoint: str, payload: dict[str, Any], *, retry: bool = False
    ) -> dict[str, Any]:
        """POST to the Identity Toolkit and return the decoded body.

        Transient network errors are retried once when ``retry`` is set.
        """
        if not self._api_key:
            raise AppException("Firebase API key not configured")
        url = f"{self._identity_toolkit_base_url}/{endpoint}?key={self._api_key}"
        client = get_identity_toolkit_client()

        async def do_request() -> httpx.Response:
            return await client.post(url, json=payload)

        try:
            response = await with_retry(
                do_request,
                attempts=2 if retry else 1,
                exceptions=(httpx.RequestError,),
            )
        except httpx.RequestError as e:
            raise ProviderError("Authentication provider unavailable") from e

        if response.status_code != 200:
            self._raise_for_identity_toolkit_error(response)
        return response.json()

    @staticmethod
    def _retry_after(response: httpx.Response) -> int | None:
        with contextlib.suppress(TypeError, ValueError):
            seconds = int(response.headers.get("Retry-After"))
            if seconds >= 0:
                return seconds
        return None

    def _raise_for_identity_toolkit_error(self, response: httpx.Response) -> None:
        rate_limited = RateLimitError(
            "Too many attempts, try again later",
            retry_after=self._retry_after(response),
        )
        try:
            error_message = response.json().get("error", {}).get("message", "")
        except ValueError as e:
            if response.status_code == 429:
                raise rate_limited from e
            raise ProviderError() from e

        code_match = re.match(r"[A-Z0-9_]+", error_message)
        logger.info(
            "Identity Toolkit error: status=%s, code=%s",
            response.status_code,
            code_match.group(0) if code_match else "UNKNOWN",
        )

        if response.status_code == 429 or error_message.startswith(
            "TOO_MANY_ATTEMPTS_TRY_LATER"
        ):
            raise rate_limited
        if error_message in _INVALID_CREDENTIALS_MESSAGES:
            raise InvalidCredentialsError()
        if error_message == "USER_DISABLED":
            raise UserDisabledError()
        if "PASSWORD_DOES_NOT_MEET_REQUIREMENTS" in error_message:
            raise PasswordPolicyError(
                requirements=_password_requirements(error_message)
            )
        if "WEAK_PASSWORD" in error_message:
            raise WeakPasswordError()
        if "CREDENTIAL_TOO_OLD_LOGIN_AGAIN" in error_message:
            raise InvalidCredentialsError(
                "Session expired, please login again to continue"
            )
        if "TOKEN_EXPIRED" in error_message or "INVALID_ID_TOKEN" in error_message:
            raise InvalidCredentialsError("Session expired, please login again")
        if response.status_code in {400, 401, 403}:
            raise InvalidCredentialsError("Authentication failed")
        raise ProviderError(f"Authentication failed: {error_message}")

    async def sign_in_with_email_password(
        self, email: str, password: str
    ) -> FirebaseUser:
        """Authenticate with email/password and return the ID token."""
        data: SignInWithPasswordResponse = await self._identity_toolkit_post(
            SIGN_IN_WITH_PASSWORD,
            {"email": email, "password": password, "returnSecureToken": True},
            retry=True,
        )
        id_token = data.get("idToken")
        uid = data.get("localId")
        if not id_token or not uid:
            raise InvalidCredentialsError("Authentication failed")
        return FirebaseUser(uid=uid, email=data.get("email"), id_token=id_token)

    async def update_password(self, id_token: str, new_password: str) -> None:
        data: UpdateAccountResponse = await self._identity_toolkit_post(
            UPDATE_ACCOUNT,
            {"idToken": id_token, "password": new_password, "returnSecureToken": True},
        )
        if not data.get("localId"):
            raise ProviderError("Failed to update password")

    # --- Admin SDK ---

    def create_session_cookie(self, id_token: str, expires_in: timedelta) -> str:
        try:
            return firebase_admin_auth.create_session_cookie(
                id_token, expires_in=expires_in
            )
        except (ValueError, FirebaseError) as e:
            raise SessionCookieError("Failed to create session cookie") from e

    @staticmethod
    def _claims(decoded: dict[str, Any], allow_sub: bool = False) -> TokenClaims:
        uid = decoded.get("uid") or (decoded.get("sub") if allow_sub else None)
        if not uid:
            raise AppException("Invalid token: missing uid")
        return TokenClaims(uid=uid, email=decoded.get("email"))

    def verify_session_cookie(
        self, session_cookie: str, check_revoked: bool = True
    ) -> TokenClaims:
        try:
            decoded = firebase_admin_auth.verify_session_cookie(
                session_cookie, check_revoked=check_revoked
            )
            return self._claims(decoded, allow_sub=True)
        except (ValueError, FirebaseError) as e:
            raise SessionCookieError("Invalid session cookie") from e
        except AppException as e:
            raise SessionCookieError(e.message) from e

    def verify_id_token(self, id_token: str) -> TokenClaims:
        try:
            decoded = firebase_admin_auth.verify_id_token(id_token)
        except (ValueError, FirebaseError) as e:
            raise AppException("Invalid ID token") from e
        return self._claims(decoded)

    def logout(self, session_cookie: str) -> None:
        """Revoke the refresh tokens behind a session cookie.

        An invalid cookie means the user is already logged out.
        """
        try:
            claims = self.verify_session_cookie(session_cookie, check_revoked=False)
        except SessionCookieError:
            return
        with contextlib.suppress(FirebaseError):
            firebase_admin_auth.revoke_refresh_tokens(claims.uid)

    def create_user(
        self, email: str, password: str, display_name: str | None = None
    ) -> FirebaseUser:
        try:
            record = firebase_admin_auth.create_user(
                email=email, password=password, display_name=display_name
            )
        except FirebaseError as e:
            message = str(e)
            if "PASSWORD_DOES_NOT_MEET_REQUIREMENTS" in message:
                raise PasswordPolicyError(
                    requirements=_password_requirements(message)
                ) from e
            if "EMAIL_EXISTS" in message or "EMAIL_ALREADY_EXISTS" in message:
                raise EmailExistsError() from e
            if "WEAK_PASSWORD" in message or "INVALID_PASSWORD" in message:
                raise WeakPasswordError() from e
            raise AppException("Failed to create user") from e
        return FirebaseUser(uid=record.uid, email=email)

    def delete_user(self, uid: str) -> None:
        """Delete a Firebase user. Used to roll back a failed registration."""
        with contextlib.suppress(FirebaseError):
            firebase_admin_auth.delete_user(uid)


def _password_requirements(error_message: str) -> list[str]:
    match = re.search(r"Missing password requirements: \[([^\]]+)\]", error_message)
    if not match:
        return []
    return [requirement.strip() for requirement in match.group(1).split(",")]


@lru_cache
def get_firebase_auth_service() -> FirebaseAuthService:
    """Get cached Firebase Auth Service instance."""
    from autosphere.core.settings import get_settings

    settings = get_settings()
    return FirebaseAuthService(
        api_key=settings.firebase_api_key,
        identity_toolkit_base_url=settings.identity_toolkit_url,
    )
