"""Centralized dependency type aliases for FastAPI routes.

Import shared dependencies from this single module:
    from autosphere.core.deps import SessionDep, SettingsDep, StoreDep

Authentication aliases (CurrentUserDep, ActorDep) live in
``autosphere.auth.dependencies``.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from autosphere.core.settings import Settings, get_settings
from autosphere.db.engine import get_session
from autosphere.store.adapter import EntityStore
from autosphere.store.blobs import BlobStore, get_blob_store

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_store(session: SessionDep) -> EntityStore:
    """Entity store bound to the request's database session."""
    return EntityStore(session)


# Entity store for the current unit of work
StoreDep = Annotated[EntityStore, Depends(get_store)]

# Blob store for uploads
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]
