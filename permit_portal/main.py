from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.requests import Request
from contextlib import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from fastapi.responses import JSONResponse
import logging
import traceback

from permit_portal.api.auth_routes import router as auth_router
from permit_portal.api.application_routes import router as application_router
from permit_portal.api.admin_routes import router as admin_router
from permit_portal.api.form_routes import router as form_router
from permit_portal.database.connection import init_db
from permit_portal.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every API response except OPTIONS.

    OPTIONS requests are left to CORSMiddleware, which is registered after
    this middleware and therefore runs first.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.method != "OPTIONS":
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["X-XSS-Protection"] = "1; mode=block"
            response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
            response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The in-memory store needs no database
    if settings.uses_mongo:
        await init_db()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Permit application submission and review",
    version="1.0.0",
    lifespan=lifespan
)


# Global exception handlers to return structured JSON and log tracebacks
logger = logging.getLogger("server_exception_handler")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    body = {
        "error": {
            "code": "http_error",
            "message": str(exc.detail) if exc.detail else str(exc.status_code),
            "status_code": exc.status_code
        }
    }
    logger.warning(f"HTTPException handled: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = {
        "error": {
            "code": "validation_error",
            "message": "Request validation failed",
            "details": exc.errors()
        }
    }
    logger.warning(f"Validation error: {exc.errors()}")
    return JSONResponse(status_code=422, content=body)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exc()
    logger.error(f"Unhandled exception: {str(exc)}\n{tb}")
    body = {
        "error": {
            "code": "internal_server_error",
            "message": "An unexpected error occurred"
        }
    }
    return JSONResponse(status_code=500, content=body)

# Support comma-separated CLIENT_URL values (e.g. "http://localhost:3000,http://localhost:3001")
raw_origins = settings.CLIENT_URL or ""
allowed_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

if not allowed_origins or any("localhost" in origin for origin in allowed_origins):
    allowed_origins = sorted(set(allowed_origins + ["http://localhost:3000", "http://localhost:3001"]))

logger.debug("CORS allowed origins: %s", allowed_origins)

# Middleware runs in reverse order of registration: CORS is added last so it
# answers preflight requests before the security headers middleware
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "Accept-Language",
        "Content-Language",
        "X-Requested-With",
        "Cache-Control",
        "If-Modified-Since",
        "If-None-Match",
        "Pragma",
    ],
    expose_headers=["Content-Type", "Content-Disposition"],
    max_age=3600,
)

app.include_router(auth_router)
app.include_router(application_router)
app.include_router(admin_router)
app.include_router(form_router)


@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} API is running!"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "API is running", "store": settings.APPLICATION_STORE}
