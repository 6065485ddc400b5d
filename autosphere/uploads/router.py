"""Upload router.

Stores listing images and KYC artifacts in the blob store and returns the
public URL to reference from a listing or KYC packet.
"""

from fastapi import APIRouter, File, UploadFile, status
from sqlmodel import SQLModel

from autosphere.access.policy import Action, require
from autosphere.auth.dependencies import ActorDep
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import BlobStoreDep

router = APIRouter(
    prefix=Routes.UPLOAD.prefix,
    tags=[Routes.UPLOAD.tag],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.UNAVAILABLE,
    },
)


class UploadRead(SQLModel):
    url: str
    path: str
    content_type: str
    size: int


@router.post(
    "",
    response_model=UploadRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST},
)
async def upload_file(
    actor: ActorDep, blobs: BlobStoreDep, file: UploadFile = File(...)
):
    """Upload a JPEG, PNG, WEBP or HEIC image (5MB max by default)."""
    require(actor, Action.upload_file)
    data = await file.read()
    return blobs.upload(data, file.content_type)
