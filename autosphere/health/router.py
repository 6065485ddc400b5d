"""Health domain router.

Liveness plus a storage round trip, for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from autosphere.core.constants import Routes
from autosphere.core.deps import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("")
async def health(session: SessionDep):
    """Report whether the entity store is reachable."""
    try:
        session.exec(text("SELECT 1"))
    except DBAPIError:
        logger.warning("Health check: store unreachable", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "store": "unavailable"},
        )
    return {"status": "ok", "store": "ok"}
