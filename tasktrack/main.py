"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from tasktrack import __version__
from tasktrack.api.limiter import limiter
from tasktrack.api.v1 import health
from tasktrack.api.v1 import router as v1_router
from tasktrack.core.config import settings
from tasktrack.services.store import StoreError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Task Tracking API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "-"
    logger.info(
        "%s %s from %s (%s)",
        request.method,
        request.url.path,
        client,
        request.headers.get("user-agent", "-"),
    )
    return await call_next(request)


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())[1:])
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, wrong JSON types and bad path ids are 400s like every other input error."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": [_format_validation_error(e) for e in exc.errors()]},
    )


@app.exception_handler(StoreError)
async def store_error_handler(_request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Unhandled store error: %s", exc.message, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Task Tracking API", "docs": "/docs"}
