import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mtgscanner.api import collection_router, health_router, scan_router
from mtgscanner.config import settings
from mtgscanner.services.scanner import create_scanner
from mtgscanner.services.scryfall import ScryfallClient


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    async with httpx.AsyncClient(
        timeout=settings.lookup_timeout,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
    ) as http_client:
        scanner = create_scanner(ScryfallClient(client=http_client))
        scanner.attach(asyncio.get_running_loop())
        app.state.scanner = scanner
        yield
        await scanner.drain()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("mtgscanner"),
    lifespan=lifespan,
)

app.include_router(collection_router)
app.include_router(health_router)
app.include_router(scan_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
