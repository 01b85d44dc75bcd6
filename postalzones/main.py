"""
Main FastAPI Application
=======================

Serves pipeline artifacts to the map client.

    uvicorn postalzones.main:app
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.router import api_router
from .services.logging_service import init_logging

load_dotenv()

logger = logging.getLogger(__name__)


def create_app(configure_logging: bool = True) -> FastAPI:
    if configure_logging:
        init_logging()

    app = FastAPI(
        title="Postal Zones API",
        description="Clipped, dissolved and labelled postal zone boundaries",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"name": "postalzones", "version": __version__, "docs": "/docs"}

    logger.info("🚀 Postal Zones API ready")
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on 127.0.0.1:8000."""
    import uvicorn

    uvicorn.run("postalzones.main:app", host="127.0.0.1", port=8000)


if __name__ == "__main__":
    run()
