import inspect
import os
from collections.abc import Callable
from unittest.mock import MagicMock

# Settings are read at import time by the engine module.
os.environ.setdefault("ENV_NAME", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import autosphere.models  # noqa: E402, F401
from autosphere.auth.dependencies import (  # noqa: E402
    get_current_user,
    get_optional_user,
)
from autosphere.auth.service import (  # noqa: E402
    FirebaseAuthService,
    TokenClaims,
    get_firebase_auth_service,
)
from autosphere.core.settings import Settings, get_settings  # noqa: E402
from autosphere.db.engine import get_session  # noqa: E402
from autosphere.listing.models import Listing, ListingStatus  # noqa: E402
from autosphere.main import app  # noqa: E402
from autosphere.store.adapter import ChangeFeed, Collection, EntityStore  # noqa: E402
from autosphere.store.blobs import FirebaseBlobStore, get_blob_store  # noqa: E402
from autosphere.user.models import User, UserRole  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio."""
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(session: Session) -> EntityStore:
    """Entity store with its own change feed, isolated per test."""
    return EntityStore(session, feed=ChangeFeed())


# --- users ---


@pytest.fixture(name="make_user")
def make_user_fixture(store: EntityStore) -> Callable[..., User]:
    counter = iter(range(1, 10_000))

    def make_user(role: UserRole = UserRole.buyer, **fields) -> User:
        n = next(counter)
        user = User(
            external_id=f"uid-{role.value}-{n}",
            email=f"{role.value}{n}@example.com",
            first_name=role.value.capitalize(),
            last_name=str(n),
            role=role,
            **fields,
        )
        store.push_new(Collection.users, user)
        return user

    return make_user


@pytest.fixture(name="buyer")
def buyer_fixture(make_user) -> User:
    return make_user(UserRole.buyer)


@pytest.fixture(name="other_buyer")
def other_buyer_fixture(make_user) -> User:
    return make_user(UserRole.buyer)


@pytest.fixture(name="dealer")
def dealer_fixture(make_user) -> User:
    """A dealer who has not passed KYC."""
    return make_user(UserRole.dealer)


@pytest.fixture(name="verified_dealer")
def verified_dealer_fixture(make_user) -> User:
    return make_user(UserRole.dealer, is_verified=True, verification_override=True)


@pytest.fixture(name="admin")
def admin_fixture(make_user) -> User:
    return make_user(UserRole.admin)


# --- listings ---


@pytest.fixture(name="make_listing")
def make_listing_fixture(store: EntityStore) -> Callable[..., Listing]:
    def make_listing(
        dealer: User | None,
        status: ListingStatus = ListingStatus.approved,
        **fields,
    ) -> Listing:
        data = {
            "make": "Porsche",
            "model": "911 GT3",
            "year": 2023,
            "price": 185000.0,
            **fields,
        }
        listing = Listing(
            **data,
            dealer_id=dealer.id if dealer is not None else None,
            status=status,
        )
        store.push_new(Collection.listings, listing)
        return listing

    return make_listing


@pytest.fixture(name="listing")
def listing_fixture(make_listing, verified_dealer: User) -> Listing:
    """An approved, public listing owned by the verified dealer."""
    return make_listing(verified_dealer)


# --- HTTP ---


@pytest.fixture(name="mock_firebase_auth")
def mock_firebase_auth_fixture():
    """Create a mock FirebaseAuthService."""
    mock_service = MagicMock(spec=FirebaseAuthService)
    mock_service.verify_session_cookie.return_value = TokenClaims(uid="test-uid")
    mock_service.verify_id_token.return_value = TokenClaims(uid="test-uid")
    return mock_service


@pytest.fixture(name="mock_blob_store")
def mock_blob_store_fixture():
    return MagicMock(spec=FirebaseBlobStore)


@pytest.fixture(name="mock_settings")
def mock_settings_fixture():
    """Create mock settings."""
    return Settings(
        ENV_NAME="test",
        DATABASE_URL="sqlite://",
        SESSION_SECRET_KEY="test-secret-key",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin",
        SESSION_EXPIRES_DAYS=5,
        FIREBASE_API_KEY="test-api-key",
    )


@pytest.fixture(name="client")
def client_fixture(
    session: Session,
    mock_firebase_auth: MagicMock,
    mock_blob_store: MagicMock,
    mock_settings: Settings,
):
    """Anonymous test client. Use ``login_as`` to pick the caller."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_firebase_auth_service] = lambda: mock_firebase_auth
    app.dependency_overrides[get_blob_store] = lambda: mock_blob_store
    app.dependency_overrides[get_settings] = lambda: mock_settings

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="login_as")
def login_as_fixture(client: TestClient, session: Session):
    """Switch the authenticated caller; ``login_as(None)`` signs out."""

    def login_as(user: User | None) -> TestClient:
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
            app.dependency_overrides.pop(get_optional_user, None)
            return client

        def current_user() -> User:
            return session.get(User, user.id)

        app.dependency_overrides[get_current_user] = current_user
        app.dependency_overrides[get_optional_user] = current_user
        return client

    return login_as
