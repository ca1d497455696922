"""
Point d'entree FastAPI / FastAPI entry point.
Diesel Tracker - Suivi des pleins de gasoil / Diesel fill tracker.
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from diesel_tracker.api import api_router
from diesel_tracker.config import settings
from diesel_tracker.database import init_db
from diesel_tracker.rate_limit import limiter
from diesel_tracker.services.fill_validator import FillValidationError

logger = logging.getLogger("diesel_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialisation et fermeture / Startup and shutdown."""
    if not settings.DEBUG and settings.DATABASE_URL.startswith("sqlite"):
        logger.warning("Running in production mode on SQLite: %s", settings.DATABASE_URL)

    # Creer les tables au demarrage / Create tables on startup
    await init_db()
    yield


# Desactiver Swagger en production / Disable Swagger in production
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Suivi des pleins de gasoil / Diesel fill tracker",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(FillValidationError)
async def fill_validation_handler(request: Request, exc: FillValidationError):
    """Rejet generique, rien n'est enregistre / Generic rejection, nothing is persisted."""
    logger.info("Fill rejected on %s: %s", request.url.path, exc.fields)
    return JSONResponse(status_code=422, content={"detail": str(exc), "fields": exc.fields})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)


# Security headers middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Ajoute les headers de securite / Add security headers."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app.add_middleware(SecurityHeadersMiddleware)


# Request ID tracking middleware
class RequestIDMiddleware(BaseHTTPMiddleware):
    """Ajoute un X-Request-ID unique a chaque requete / Add unique X-Request-ID to each request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIDMiddleware)


# Routes API
app.include_router(api_router)


# Sante de l'API / API health check
@app.get("/api/")
async def api_health():
    """Health check (accessible en dev et prod)."""
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running"}


# Sante a la racine / Root health check
@app.get("/")
async def root():
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running"}


# Logging JSON structure en production / Structured JSON logging in production
if not settings.DEBUG:
    import json

    class JSONFormatter(logging.Formatter):
        def format(self, record):
            log_entry = {
                "timestamp": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info and record.exc_info[0]:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logging.root.handlers = [handler]
    logging.root.setLevel(logging.INFO)
