from typing import Optional
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from dealership.config import Settings, settings as default_settings
from dealership.db import Base, engine
from dealership.storage import ImageStorage
from dealership.api.routes import router as api_router
from dealership.utils import logger
import dealership.models  # noqa: F401 ensure models are imported so tables are known


def create_app(settings: Optional[Settings] = None, storage: Optional[ImageStorage] = None) -> FastAPI:
    """Build the API with its settings and image storage bound to ``app.state``."""
    settings = settings or default_settings
    app = FastAPI(title="Dealership Listings")
    app.state.settings = settings
    app.state.storage = storage or ImageStorage(settings.storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)

    @app.on_event("startup")
    def on_startup_create_tables():
        # Ensure database tables are created on startup
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

    return app


app = create_app()
