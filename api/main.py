"""
Mint Engine API

FastAPI application hosting one mint engine collection backed by MongoDB.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse


# .env is loaded before settings are imported
load_dotenv(Path(__file__).parent.parent / ".env")

from api.config import settings
from api.database.connection import get_db_manager
from api.dependencies.mint import get_mint_service
from api.routers.api_v1.api import api_router


logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def _print_banner(title: str, lines: list[str]):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)
    for line in lines:
        print(line)
    print("=" * 60 + "\n")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connect MongoDB before serving requests and close it on shutdown.

    Startup fails if MongoDB is unreachable: the engine state lives there.
    """
    db_manager = get_db_manager()
    try:
        await db_manager.initialize()
    except Exception as e:
        logger.error(f"MongoDB initialization failed for {settings.mongodb_database}: {str(e)}")
        raise

    config = settings.sale_config()
    _print_banner(
        f"🚀 {settings.api_title} v{settings.api_version} ({settings.environment})",
        [
            f"Collection:     {settings.collection_id} @ {settings.mongodb_database}",
            f"Profile:        {config.profile.value}",
            f"Max supply:     {config.max_supply} (default wave {config.default_wave_supply})",
            f"Wallet cap:     {config.max_mint_count}",
            f"Authorization:  {', '.join(sorted(config.authorization_modes))}",
            f"Docs:           http://127.0.0.1:{settings.api_port}/docs",
        ],
    )

    yield

    try:
        await db_manager.close()
        logger.info("MongoDB connections closed")
    except Exception as e:
        logger.warning(f"Error closing MongoDB: {str(e)}")


app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
)


@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse(
        content=(
            "<html><body style='padding: 10px;'>"
            f"<h1>{settings.api_title}</h1>"
            f"<p>Sale status: <a href='{settings.API_V1_STR}/mint/info'>{settings.API_V1_STR}/mint/info</a></p>"
            "<p>API docs: <a href='/docs'>/docs</a></p>"
            "</body></html>"
        )
    )


@app.get("/health")
async def health_check():
    """
    Liveness of the API, its MongoDB connection and the engine state.

    Returns 503 when MongoDB is not reachable.
    """
    body = {
        "status": "healthy",
        "api_version": settings.api_version,
        "environment": settings.environment,
        "collection_id": settings.collection_id,
        "database": {"type": "MongoDB", "connected": False},
    }

    try:
        if not get_db_manager().initialized:
            raise RuntimeError("MongoDB not initialized")
        info = await get_mint_service().info()
    except Exception as e:
        body["status"] = "unhealthy"
        body["database"]["error"] = str(e)
        return JSONResponse(content=body, status_code=503)

    body["database"]["connected"] = True
    body["engine"] = {
        "stage": info.stage.name,
        "sale_open": info.sale_open,
        "total_minted": info.total_minted,
    }
    return JSONResponse(content=body, status_code=200)


app.include_router(api_router, prefix=settings.API_V1_STR)
