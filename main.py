import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rotator_app.config import settings
from rotator_app.api.v1 import health, redirect, stats, urls
from rotator_app.dependencies import get_settings
from rotator_app.exceptions import ConfigurationError, RotatorError
from rotator_app.logging_setup import configure_logging
from rotator_app.services.health_service import ensure_directories

configure_logging()
logger = logging.getLogger("rotator_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Honour an overridden settings provider (tests) like the routes do
    active_settings = app.dependency_overrides.get(get_settings, get_settings)()
    try:
        ensure_directories(active_settings)
    except ConfigurationError as e:
        # Redirects still work with the fallback URLs, health reports the problem
        logger.warning("Startup: %s", e.message)
    if not active_settings.token_configured:
        logger.warning("ROTATOR_TOKEN is not configured, the URL update API uses the default token")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Link rotator: random redirection with append-only click logging",
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(RotatorError)
async def rotator_error_handler(request: Request, exc: RotatorError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Invalid request parameters.", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in exc.errors()]


######## Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(stats.router, prefix="/api/v1")
app.include_router(urls.router, prefix="/api/v1")
app.include_router(redirect.router)
