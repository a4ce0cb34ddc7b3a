"""FastAPI application for the AMM router quote service.

Rate limiting is not implemented here; it belongs in front of the service.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm_router.api.endpoints import router
from amm_router.errors import RouterError
from amm_router.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_ROUTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_ROUTER_PORT", "8000"))
DEBUG = os.environ.get("AMM_ROUTER_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="AMM Router",
    description="Constant-product pair derivation and swap quoting",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(RouterError)
@app.exception_handler(SafeIntError)
async def reject_request(request: Request, exc: Exception) -> JSONResponse:
    """Turn pricing failures into 400 responses naming the error."""
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    return JSONResponse(
        status_code=400,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - AMM_ROUTER_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_ROUTER_PORT: Port to bind to (default: 8000)
    - AMM_ROUTER_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "amm_router.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
