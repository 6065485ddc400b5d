from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqladmin import Admin

from autosphere.admin.auth import AdminAuth
from autosphere.admin.views import VIEWS
from autosphere.core.cors import add_cors_middleware
from autosphere.core.exception_handlers import register_exception_handlers
from autosphere.core.firebase import init_firebase
from autosphere.core.http import close_http_clients
from autosphere.core.logging import configure_logging
from autosphere.core.request_logging import add_request_logging_middleware
from autosphere.db.engine import engine
from autosphere.router import api_router

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_firebase()
    yield
    await close_http_clients()


app = FastAPI(title="AutoSphere", version="0.1.0", lifespan=lifespan)

app.include_router(api_router)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)

# Back-office panel at /admin (read-mostly; see autosphere.admin.views)
admin = Admin(
    app=app,
    engine=engine,
    authentication_backend=AdminAuth(),
    title="AutoSphere Back Office",
)
for view in VIEWS:
    admin.add_view(view)
