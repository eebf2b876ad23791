from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from screener.api.deps import get_batch_registry
from screener.api.v1.router import api_v1_router
from screener.core.config import get_settings
from screener.core.http import get_http_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup
    app.state.http_client = get_http_client()
    yield
    # Shutdown: let running batches finish their in-flight calls first
    settings = get_settings()
    registry = app.dependency_overrides.get(get_batch_registry, get_batch_registry)()
    await registry.drain(timeout=settings.scoring_timeout_ms / 1000)
    await app.state.http_client.aclose()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(api_v1_router, prefix="/api/v1")
    return app
