"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from .api.router import api_router

# Configure logging for our modules
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
logging.getLogger("lending_admin").setLevel(logging.DEBUG)


def create_app() -> FastAPI:
    app = FastAPI(
        title="lending-admin",
        version="0.1.0",
        description="Equipment lending admin: data export, import and deletion",
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app
