"""
Email/password authentication backend — application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import AUTH_PATH_PREFIX, register_middleware
from auth.routes import router as auth_router
from config.settings import config
from database.session import create_tables

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Auth Backend",
        version="1.0.0",
        description="Email/password registration and bearer-token login.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix=AUTH_PATH_PREFIX)

    @app.on_event("startup")
    async def on_startup():
        if config.uses_default_secret:
            logger.warning(
                "JWT_SECRET not set — tokens are signed with the development "
                "default. Set JWT_SECRET before deploying."
            )

        if config.create_tables_on_startup:
            logger.info("Creating database tables…")
            await create_tables()

        logger.info("Application ready to accept requests.")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
