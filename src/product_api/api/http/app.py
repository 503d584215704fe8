"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.product_api.api.http.app_data import ApplicationDependencies
from src.product_api.api.http.routers.health import router as health_router
from src.product_api.api.http.routers.service.product import router as product_router
from src.product_api.api.utils.app_startup import configure_logging
from src.product_api.core.services import DbSessionService
from src.product_api.runtime.config.config_data import ConfigData
from src.product_api.runtime.context import get_config

INVALID_PAYLOAD = "Invalid request payload"
INTERNAL_ERROR = "Internal Server Error"

__all__ = ["app", "create_app", "startup", "shutdown"]


# --- Lifecycle hooks ---
def startup(app: FastAPI, config: ConfigData) -> None:
    """Build application-wide dependencies and make sure the table exists.

    A failure to create the table propagates and aborts startup.
    """
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config)
    database_service.ensure_schema()

    app.state.app_dependencies = ApplicationDependencies(
        config=config,
        database_service=database_service,
    )


def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


# --- Error rendering ---
def _error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


def _validation_message(exc: RequestValidationError) -> str:
    """Render the first validation error as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return INVALID_PAYLOAD

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if first.get("type") == "json_invalid" or not loc:
        return INVALID_PAYLOAD
    return f"{'.'.join(loc)}: {first.get('msg', 'invalid value')}"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(errors=exc.errors()).info("request.invalid_payload")
    return _error_response(400, _validation_message(exc))


async def storage_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    # Storage error text stays in the server log
    logger.bind(error_type=type(exc).__name__).exception("request.storage_error")
    return _error_response(500, INTERNAL_ERROR)


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return _error_response(500, INTERNAL_ERROR, {"X-Request-ID": request_id})


# --- FastAPI app setup ---
def create_app(config: ConfigData | None = None) -> FastAPI:
    """Create the FastAPI application for the given configuration.

    The database service is built in the lifespan hook, so nothing touches
    the database until the application starts serving.
    """
    app_config = config or get_config()

    configure_logging(app_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(app, app_config)
        try:
            yield
        finally:
            shutdown(app)

    is_production = app_config.app.environment == "production"
    app = FastAPI(
        title="Product API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    if is_production and "*" in app_config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    # Registered first so CORS wraps it and its 500 responses keep CORS headers
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.app.cors.origins,
        allow_credentials=app_config.app.cors.allow_credentials,
        allow_methods=app_config.app.cors.allow_methods,
        allow_headers=app_config.app.cors.allow_headers,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)

    # --- Router registration ---
    app.include_router(health_router)
    app.include_router(product_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
