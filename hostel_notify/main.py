from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostel_notify.config import get_settings
from hostel_notify.infrastructure.database import engine, initialize_database
from hostel_notify.interfaces.api.routes import register_routes
from hostel_notify.utils import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the database schema on startup and release resources on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Hostel Notifications", lifespan=lifespan)

    # Allow the portal front-end to call the API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
