"""FastAPI application entrypoint for the directory API."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from directory_api.api.companies import router as companies_router
from directory_api.api.users import router as users_router
from directory_api.core.config import configure_logging
from directory_api.core.config import get_settings
from directory_api.core.errors import register_error_handlers
from directory_api.ingestion.storage import PUBLIC_PREFIX

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting directory API with settings=%s", settings.safe_for_logging())
    yield


app = FastAPI(title="Directory API", lifespan=lifespan)
register_error_handlers(app)
app.include_router(companies_router)
app.include_router(users_router)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=get_settings().storage_dir, check_dir=False), name="storage")


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
