from firebase_admin import get_app, initialize_app

from autosphere.core.settings import get_settings


def init_firebase() -> None:
    """Initialize Firebase Admin SDK (idempotent).

    Uses GOOGLE_APPLICATION_CREDENTIALS environment variable for credentials.
    The storage bucket option enables ``firebase_admin.storage`` for uploads.
    """
    try:
        get_app()
    except ValueError:
        bucket = get_settings().storage_bucket
        initialize_app(options={"storageBucket": bucket} if bucket else None)
