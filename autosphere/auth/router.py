"""Auth domain router.

Registration, session-cookie login and logout, and password changes. Thin
HTTP handlers over the Firebase auth service and the entity store.
"""

import logging

from fastapi import APIRouter, Request, Response, status

from autosphere.auth.dependencies import (
    SESSION_COOKIE,
    CurrentUserDep,
    FirebaseAuthDep,
)
from autosphere.auth.exceptions import AccountSuspendedError, InvalidCredentialsError
from autosphere.auth.schemas import (
    AuthMessage,
    AuthRegister,
    EmailPasswordLoginRequest,
    UpdatePasswordRequest,
)
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import SettingsDep, StoreDep
from autosphere.core.exceptions import BadRequestError
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyUser
from autosphere.notification.models import NotificationType
from autosphere.store.adapter import Collection
from autosphere.user.models import User
from autosphere.user.schemas import UserPublicRead
from autosphere.user.service import provision_account

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.UNAVAILABLE},
)


@router.post(
    "/register",
    response_model=UserPublicRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.CONFLICT},
)
async def register(
    register_data: AuthRegister,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
):
    """Register a buyer or dealer account.

    Creates the Firebase user and the local user in one step. Emails are
    unique case-insensitively. Dealers start unverified and must pass KYC
    (or be verified by an admin) before they can list vehicles.
    """
    user = provision_account(
        store,
        firebase_auth,
        email=register_data.email,
        password=register_data.password,
        first_name=register_data.first_name,
        last_name=register_data.last_name,
        role=register_data.role,
    )

    logger.info(
        "Registered %s account %s",
        user.role.value,
        user.id,
        extra={"event": "user_registered", "record_id": user.id},
    )
    return user


@router.post(
    "/login",
    response_model=UserPublicRead,
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def login(
    payload: EmailPasswordLoginRequest,
    response: Response,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
    settings: SettingsDep,
):
    """Login with email/password and set the Firebase session cookie.

    Raises:
        - InvalidCredentialsError: If no local account is linked
        - AccountSuspendedError: If an admin has suspended the account
    """
    firebase_user = await firebase_auth.sign_in_with_email_password(
        email=payload.email.lower(),
        password=payload.password,
    )

    user = store.find(Collection.users, User.external_id == firebase_user.uid)
    if user is None:
        raise InvalidCredentialsError("No account is linked to this identity")
    if user.is_suspended:
        raise AccountSuspendedError()

    session_cookie = firebase_auth.create_session_cookie(
        firebase_user.id_token,
        expires_in=settings.session_expires_in,
    )
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_cookie,
        max_age=int(settings.session_expires_in.total_seconds()),
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite="lax",
    )
    return user


@router.post(
    "/logout",
    response_model=AuthMessage,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def logout(
    request: Request,
    response: Response,
    firebase_auth: FirebaseAuthDep,
):
    """Clear the session cookie and revoke refresh tokens."""
    session_cookie = request.cookies.get(SESSION_COOKIE)
    if not session_cookie:
        raise InvalidCredentialsError("Not authenticated")

    response.delete_cookie(key=SESSION_COOKIE)
    firebase_auth.logout(session_cookie)
    return AuthMessage(message="Logout successful")


@router.get(
    "/me",
    response_model=UserPublicRead,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def get_me(user: CurrentUserDep):
    """Get current authenticated user."""
    return user


@router.post(
    "/update-password",
    response_model=AuthMessage,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def update_password(
    request: UpdatePasswordRequest,
    user: CurrentUserDep,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
):
    """Update the current user's password.

    Re-authenticates with the current password first. The user gets a
    "Security Update" notification on success.
    """
    try:
        firebase_user = await firebase_auth.sign_in_with_email_password(
            email=user.email,
            password=request.current_password,
        )
    except InvalidCredentialsError:
        raise BadRequestError("Current password is incorrect") from None

    if not firebase_user.id_token:
        raise BadRequestError("Failed to verify current password")

    await firebase_auth.update_password(
        id_token=firebase_user.id_token,
        new_password=request.new_password,
    )
    dispatch(
        store,
        [
            NotifyUser(
                user.id,
                "Security Update",
                "Your portal password was successfully updated.",
                NotificationType.success,
            )
        ],
    )
    return AuthMessage(message="Password updated successfully")
