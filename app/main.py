# app/main.py

"""Blog Platform Backend - Blog CRUD API with image uploads on FastAPI."""

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.errors import (
    BaseAppError,
    DatabaseError,
    PasswordHashingError,
    UploadError,
    UserAuthenticationError,
    auth_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    http_exception_handler,
    password_hashing_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import configure_logging, get_logger, setup_prometheus
from app.routes import (
    auth_router,
    authors_router,
    blog_router,
    categories_router,
    users_router,
)
from app.schemas import HealthResponse
from app.utils.helpers import utc_now

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog platform API: posts, categories, authors and users",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Trust X-Forwarded-* from the reverse proxy in front of the app
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    auth_router,
    blog_router,
    categories_router,
    authors_router,
    users_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (UserAuthenticationError, auth_exception_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (UploadError, upload_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RequestValidationError, validation_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter

setup_prometheus(app)

if settings.STORAGE_PROVIDER == "local":
    upload_dir = Path(settings.LOCAL_UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "timestamp": "2025-01-01T12:00:00+00:00",
                        "database": "connected",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    The process answers `ok` whenever it is serving; the database probe
    is reported separately so an outage does not fail the liveness check.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthResponse
        Status, ISO timestamp and database connectivity.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"status": "ok", "timestamp": "2025-01-01T12:00:00+00:00", "database": "connected"}
    """
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    return HealthResponse(
        status="ok",
        timestamp=utc_now().isoformat(),
        database="connected" if connected else "disconnected",
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    include_in_schema=False,
)
@limiter.exempt
async def root(request: Request) -> dict[str, str]:
    return {"message": f"Welcome to {settings.APP_NAME}"}


if __name__ == "__main__":
    from uvicorn import run

    run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="info",
        loop="uvloop",
        http="httptools",
    )
