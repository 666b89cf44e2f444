from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
from datetime import datetime, timezone

from app.core.config import settings
from app.routers import access, analyze, photos
from app.services.cosmic_client import CosmicClient

# ----------------------------
# Logging
# ----------------------------
logger = logging.getLogger("bookshelf")
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Server fingerprint for debugging
SERVER_BOOT_ID = f"bookshelf-backend::{os.getpid()}::{datetime.now(timezone.utc).isoformat()}"

BUILD_ID = os.getenv("BUILD_ID", "missing")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("[BOOT] %s", SERVER_BOOT_ID)
    try:
        app.state.cosmic = CosmicClient.from_settings(settings)
    except RuntimeError as e:
        # Routes that need Cosmic will retry construction and fail with a 500
        logger.warning("Cosmic client not configured at startup: %s", e)
    yield
    client = getattr(app.state, "cosmic", None)
    if client is not None:
        client.session.close()


app = FastAPI(debug=settings.DEBUG, lifespan=lifespan)


# ----------------------------
# CORS
# ----------------------------
cors_origins = settings.cors_origins_list
logger.info("[CORS] allow_origins=%s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_build_header(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Bookshelf-Build"] = BUILD_ID
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("[UNHANDLED] %s %s", request.method, request.url.path)

    response = JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )

    # Ensure CORS headers are present in error responses
    origin = request.headers.get("origin")
    if origin and origin in cors_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"

    return response


# ----------------------------
# Routers
# ----------------------------
app.include_router(access.router, prefix="/api")
app.include_router(photos.router, prefix="/api")
app.include_router(analyze.router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/api/health")
def api_health_check():
    return {"status": "ok"}
