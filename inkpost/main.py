# inkpost/main.py

"""Inkpost Backend - blog publishing API built on FastAPI."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from inkpost.configs import settings
from inkpost.errors import (
    BaseAppError,
    DatabaseError,
    NotFoundError,
    PasswordHashingError,
    UploadError,
    UserAuthenticationError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    create_exception_handler,
    create_http_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    not_found_exception_handler,
    password_hashing_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from inkpost.managers import limiter, rate_limit_exceeded_handler
from inkpost.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from inkpost.monitoring import get_logger
from inkpost.routes import auth_router, blog_router, category_router
from inkpost.schemas import HealthCheckResponse
from inkpost.utils.helpers import respond, today_str

logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Inkpost blog publishing API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Middleware to tell FastAPI it is behind a proxy
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    auth_router,
    category_router,
    blog_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (NotFoundError, not_found_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
    (UploadError, upload_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RequestValidationError, validation_exception_handler),
    (StarletteHTTPException, create_http_exception_handler(logger)),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter

# Cover images are served from the uploads directory
app.mount(
    settings.UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
    name="uploads",
)


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "status": "ok",
                        "version": "1.0.0",
                        "timestamp": "2025-01-01",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"success": true, "status": "ok", "version": "1.0.0", "timestamp": "2025-01-01"}
    """
    return respond(
        HealthCheckResponse(status="ok", version=app.version, timestamp=today_str()),
    )


if __name__ == "__main__":
    from uvicorn import run

    run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
        reload=True,
        loop="uvloop",
        http="httptools",
    )
