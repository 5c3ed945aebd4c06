"""FastAPI application and route handlers."""

import asyncio
import sys
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import settings
from .exceptions import ConfigError, RoastAPIError, StorageError, UpstreamError, ValidationError
from .factory import Services, create_services, shutdown_services
from .github import ProfileFetcher
from .middleware import add_request_id
from .models import CountResponse, ProfileRecord, ProfileRequest, RoastRequest, RoastResponse
from .roast import RoastGenerator
from .storage import UsageCounter
from .types import HealthStatus

API_VERSION = "1.0.0"

_services: Services | None = None
_services_lock = asyncio.Lock()


def configure_logging() -> None:
    """Configure logging - should be called at startup, not import time."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level,
        serialize=False,
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            level=settings.log_level,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global _services
    configure_logging()

    _services = await create_services(settings)
    logger.info("Application started successfully")

    yield

    await shutdown_services(_services)
    _services = None
    logger.info("Application shutdown complete")


app = FastAPI(
    title="GitHub Roast API",
    version=API_VERSION,
    description="Roasts GitHub profiles with a generative language model",
    lifespan=lifespan,
)

app.middleware("http")(add_request_id)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle validation errors with clean messages."""
    error_messages = []

    for error in exc.errors():  # type: ignore[attr-defined]
        field = error["loc"][-1] if error["loc"] else "field"
        message = error.get("msg", f"Invalid {field}")

        match error["type"]:
            case "missing":
                message = f"Required field '{field}' is missing"
            case "json_invalid":
                message = "Invalid JSON format"

        error_messages.append(message)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "message": "; ".join(error_messages),
            "details": error_messages,
        },
    )


app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]


@app.exception_handler(RoastAPIError)
async def roast_api_exception_handler(request: Request, exc: RoastAPIError) -> JSONResponse:
    """Handle domain errors that escaped a route."""
    logger.error(f"Roast API error: {exc}")

    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc), "type": exc.__class__.__name__},
    )


async def get_services() -> Services:
    """Get services singleton.

    Serverless handlers run without a lifespan, so the services are created
    on the first request and kept for the life of the container.
    """
    global _services
    if _services is None:
        async with _services_lock:
            if _services is None:
                logger.info("Creating services on first request")
                _services = await create_services(settings)
    return _services


def get_profile_fetcher(services: Annotated[Services, Depends(get_services)]) -> ProfileFetcher:
    return services.fetcher


def get_roast_generator(services: Annotated[Services, Depends(get_services)]) -> RoastGenerator:
    return services.generator


def get_counter(services: Annotated[Services, Depends(get_services)]) -> UsageCounter:
    return services.counter


@app.post("/api/github-profile", tags=["roast"], response_model=ProfileRecord)
async def github_profile_endpoint(
    payload: ProfileRequest,
    fetcher: Annotated[ProfileFetcher, Depends(get_profile_fetcher)],
) -> ProfileRecord | JSONResponse:
    """Fetch a GitHub profile merged with its yearly contribution count.

    When an upstream API failed with a JSON object body, its status code is
    passed through together with that body; every other failure is a 500.
    """
    try:
        return await fetcher.fetch(payload.username)
    except UpstreamError as e:
        logger.error(f"Error fetching GitHub profile: {e}")
        content: dict[str, Any] = {"error": "Failed to fetch GitHub profile"}
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        if e.status_code and isinstance(e.body, dict):
            status_code = e.status_code
            content["details"] = e.body
        return JSONResponse(status_code=status_code, content=content)
    except ConfigError as e:
        logger.error(f"Configuration error fetching GitHub profile: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch GitHub profile"},
        )


@app.post("/api/generate-roast", tags=["roast"], response_model=RoastResponse)
async def generate_roast_endpoint(
    payload: RoastRequest,
    generator: Annotated[RoastGenerator, Depends(get_roast_generator)],
) -> RoastResponse | JSONResponse:
    """Generate a roast for an already fetched profile."""
    try:
        roast = await generator.generate(payload.profile_data, payload.language)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": str(e)},
        )
    except RoastAPIError as e:
        logger.error(f"Error generating roast: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Error generating roast", "error": str(e)},
        )

    return RoastResponse(roast=roast)


@app.get("/api/user-count", tags=["counter"], response_model=CountResponse)
async def read_user_count_endpoint(
    counter: Annotated[UsageCounter, Depends(get_counter)],
) -> CountResponse | JSONResponse:
    """Read the usage counter."""
    try:
        return CountResponse(count=await counter.read())
    except StorageError as e:
        logger.error(f"Error fetching user count: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch user count"},
        )


@app.post("/api/user-count", tags=["counter"], response_model=CountResponse)
async def increment_user_count_endpoint(
    counter: Annotated[UsageCounter, Depends(get_counter)],
) -> CountResponse | JSONResponse:
    """Increment the usage counter and return the new value."""
    try:
        return CountResponse(count=await counter.increment())
    except StorageError as e:
        logger.error(f"Error incrementing user count: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to update user count"},
        )


@app.get("/health", tags=["health"])
async def health_endpoint(
    response: Response,
    services: Annotated[Services, Depends(get_services)],
    detailed: bool = Query(False, description="Include detailed environment information"),
) -> dict[str, Any]:
    """Check health status of all components.

    Args:
        detailed: If True, includes version and environment information.

    """
    component_status: HealthStatus = {
        "github": bool(services.fetcher.token),
        "llm": await services.llm_provider.health_check(),
        "counter": await services.counter.health_check(),
    }
    all_healthy = all(component_status.values())

    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    result: dict[str, Any] = {
        "status": "healthy" if all_healthy else "unhealthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "services": component_status,
    }

    if detailed:
        result["version"] = API_VERSION
        result["environment"] = settings.environment

    return result


@app.get("/", tags=["health"])
async def root_endpoint() -> dict[str, str]:
    """API information endpoint."""
    return {
        "name": "GitHub Roast API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
    }


app.openapi_tags = [
    {"name": "roast", "description": "Profile fetching and roast generation"},
    {"name": "counter", "description": "Usage counter"},
    {"name": "health", "description": "Health checks"},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    return app
