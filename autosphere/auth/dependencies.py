"""Auth domain dependencies.

Resolves the caller from a Firebase session cookie or bearer ID token and
exposes it to routes as the local ``User`` (``CurrentUserDep``) or as an
immutable ``Actor`` snapshot (``ActorDep``) for authorization checks.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from autosphere.access.policy import Actor
from autosphere.auth.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    SessionCookieError,
)
from autosphere.auth.service import FirebaseAuthService, get_firebase_auth_service
from autosphere.core.deps import StoreDep
from autosphere.core.exceptions import AppException
from autosphere.store.adapter import Collection
from autosphere.user.models import User

SESSION_COOKIE = "session"

security = HTTPBearer(auto_error=False)

FirebaseAuthDep = Annotated[FirebaseAuthService, Depends(get_firebase_auth_service)]


def get_current_user(
    request: Request,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> User:
    """Verify Firebase authentication and return the local User.

    The session cookie takes priority over a bearer ID token. Suspended
    users still authenticate; the authorization matrix refuses their
    mutating actions.

    Raises:
        InvalidTokenError: If the cookie or token does not verify
        InvalidCredentialsError: If no credentials were supplied
        RecordNotFoundError: If no local user matches the Firebase UID
    """
    external_id: str | None = None

    session_cookie = request.cookies.get(SESSION_COOKIE)
    if session_cookie:
        try:
            external_id = firebase_auth.verify_session_cookie(
                session_cookie, check_revoked=True
            ).uid
        except SessionCookieError as e:
            raise InvalidTokenError() from e

    if external_id is None and credentials is not None:
        try:
            external_id = firebase_auth.verify_id_token(credentials.credentials).uid
        except AppException as e:
            raise InvalidTokenError() from e

    if not external_id:
        raise InvalidCredentialsError("Not authenticated")

    user = store.find(Collection.users, User.external_id == external_id)
    if user is None:
        raise InvalidTokenError("No account is linked to this identity")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_actor(user: CurrentUserDep) -> Actor:
    """Snapshot the caller for authorization checks."""
    return Actor.from_user(user)


ActorDep = Annotated[Actor, Depends(get_actor)]


def require_auth(_user: CurrentUserDep) -> None:
    """Require authentication without injecting the user.

    Use as a router-level dependency:
        router = APIRouter(dependencies=[Depends(require_auth)])
    """


def get_optional_user(
    request: Request,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> User | None:
    """Like ``get_current_user`` but anonymous callers get None."""
    if SESSION_COOKIE not in request.cookies and credentials is None:
        return None
    return get_current_user(request, store, firebase_auth, credentials)


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_optional_actor(user: OptionalUserDep) -> Actor | None:
    return Actor.from_user(user) if user is not None else None


OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]
