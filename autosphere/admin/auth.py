"""Back-office login for the SQLAdmin panel.

A single operator account from settings, kept in the Starlette session.
Marketplace admins act through the API; this panel is for inspection.
"""

import logging
import secrets

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from autosphere.core.settings import get_settings

logger = logging.getLogger(__name__)

SESSION_KEY = "backoffice_user"


class AdminAuth(AuthenticationBackend):
    """SQLAdmin auth using Starlette sessions."""

    def __init__(self) -> None:
        super().__init__(secret_key=get_settings().session_secret_key)

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username", "")).strip()
        password = str(form.get("password", ""))

        settings = get_settings()
        ok = secrets.compare_digest(
            username, settings.admin_username
        ) and secrets.compare_digest(password, settings.admin_password)
        if not ok:
            logger.warning(
                "Back-office login failed for %r",
                username,
                extra={"event": "backoffice_login_failed"},
            )
            return False
        request.session[SESSION_KEY] = username
        return True

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get(SESSION_KEY))
