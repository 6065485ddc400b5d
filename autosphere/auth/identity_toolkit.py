"""Identity Toolkit REST payload shapes used by the auth service.

https://cloud.google.com/identity-platform/docs/reference/rest/v1/accounts
"""

from typing import TypedDict

SIGN_IN_WITH_PASSWORD = "v1/accounts:signInWithPassword"
UPDATE_ACCOUNT = "v1/accounts:update"


class SignInWithPasswordResponse(TypedDict, total=False):
    localId: str  # Firebase UID
    email: str
    idToken: str
    refreshToken: str
    expiresIn: str  # seconds


class UpdateAccountResponse(TypedDict, total=False):
    localId: str
    email: str
    idToken: str  # only when returnSecureToken=true
