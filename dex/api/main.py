"""FastAPI application exposing exchange state and quotes."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex.api.endpoints import router
from dex.errors import DexError, PairNotFound
from dex.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("DEX_HOST", "0.0.0.0")
PORT = int(os.environ.get("DEX_PORT", "8000"))
DEBUG = os.environ.get("DEX_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Constant-Product DEX",
    description="Pair state, quotes and route previews for a constant-product exchange",
    version="0.1.0",
)


@app.exception_handler(DexError)
async def dex_error_handler(request: Request, exc: DexError) -> JSONResponse:
    """Map engine errors to JSON bodies: 404 for unknown pairs, 400 otherwise."""
    status_code = 404 if isinstance(exc, PairNotFound) else 400
    logger.info("request_rejected", path=request.url.path, error=exc.kind.value)
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def configure_logging(debug: bool = DEBUG) -> None:
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug logging and reload (default: false)
    """
    configure_logging()
    uvicorn.run(
        "dex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
