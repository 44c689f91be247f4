"""FastAPI application for the AMM service.

Note: Rate limiting is intentionally not implemented at the application level.
It should be handled at the infrastructure layer (reverse proxy / load balancer).
"""

import logging
import os

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import get_facade, router
from cpamm.errors import AMMError, ErrorKind
from cpamm.facade import SwapFacade
from cpamm.models.api import ErrorResponse

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("AMM_LOG_LEVEL", "INFO").upper()

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status for each failure kind; anything unlisted is a 400
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.INSUFFICIENT_LIQUIDITY: 409,
    ErrorKind.ZERO_RESERVE: 409,
    ErrorKind.SLIPPAGE_EXCEEDED: 409,
    ErrorKind.WRITE_ACCESS_REQUIRED: 403,
}

logger = structlog.get_logger()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure structlog for console output at the given level name."""
    log_level = logging.getLevelNamesMapping().get(level, logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


app = FastAPI(
    title="Constant product AMM",
    description="Token registry, liquidity pools and swaps on x * y = k",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AMMError)
async def amm_error_handler(request: Request, exc: AMMError) -> JSONResponse:
    """Translate domain errors into JSON responses with a stable error code."""
    status_code = ERROR_STATUS.get(exc.kind, 400)
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=exc.kind.value,
        detail=str(exc),
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error=exc.kind).model_dump(mode="json"),
    )


app.include_router(router)


@app.get("/health")
def health(facade: SwapFacade = Depends(get_facade)) -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "tokens": len(facade.tokens), "pools": facade.pools.pool_count}


def run() -> None:
    """Run the AMM API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_LOG_LEVEL: Log level name (default: INFO)
    - AMM_WRITE_KEY: Required X-Write-Key for mutating requests (default: unset)
    - AMM_FEE_BPS: Swap fee for new pools in basis points (default: 0)
    """
    configure_logging()
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
