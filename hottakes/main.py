import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from hottakes.core.config import APP_ENV, CORS_ORIGINS, configure_logging
from hottakes.db.base import Base
from hottakes.db import models  # noqa: F401  registers tables on Base.metadata
from hottakes.db.session import engine, async_session
from hottakes.api.routes import boards, system

configure_logging()
logger = logging.getLogger("root")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")

    yield  # App runs here

    await engine.dispose()
    logger.info("Shutting down...")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Hot Takes Board API",
    version="0.1",
    lifespan=lifespan,
)

# Dev-only CORS settings
if APP_ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS allowed for development environment")
else:
    logger.info(f"Running in {APP_ENV} environment - CORS restricted")

# API routes
app.include_router(boards.router)
app.include_router(system.router)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health():
    status = {
        "api": "ok",
        "database": None,
    }

    http_status = 200

    # --- Database check ---
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        logger.warning(f"Health check: database unavailable: {e}")
        status["database"] = f"error: {e}"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)
