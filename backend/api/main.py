"""
FastAPI application entry point.

Run with: uvicorn api.main:app
or through the CLI: python -m cli --storage-type json --file inventory.json
"""
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import computers
from domain.errors import StoreError
from repositories import get_store
from services.inventory import InventoryService
from services.notifications import NotificationSender
from settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def build_inventory(config: Settings) -> InventoryService:
    """Open the configured store and wire the over-assignment notifier."""
    store = get_store(config.STORAGE_TYPE, config.STORAGE_FILE)
    notifier = None
    if config.NOTIFY_ENABLED:
        notifier = NotificationSender(url=config.NOTIFY_URL, timeout=config.NOTIFY_TIMEOUT)
    logger.info("Using %s storage", config.STORAGE_TYPE)
    return InventoryService(store, notifier)


def create_app(
    config: Optional[Settings] = None,
    inventory: Optional[InventoryService] = None,
) -> FastAPI:
    """
    Build the API application.

    When no inventory is passed in, one is built from `config` on startup.
    Whatever inventory the app holds is closed on shutdown.
    """
    config = config or default_settings
    app = FastAPI(
        title="Computer Inventory API",
        description="Keyed computer inventory with pluggable storage",
        version="0.1.0",
    )
    app.state.inventory = inventory
    app.include_router(computers.router, tags=["computers"])

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

    @app.on_event("startup")
    def startup_event():
        """Open the store unless one was injected."""
        if app.state.inventory is None:
            app.state.inventory = build_inventory(config)

    @app.on_event("shutdown")
    def shutdown_event():
        """Release the store's file handle or database connection."""
        if app.state.inventory is None:
            return
        try:
            app.state.inventory.close()
        except StoreError as exc:
            logger.error("Error closing store: %s", exc)
            raise

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
