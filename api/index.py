"""
Experience Cart API - Main FastAPI Application

Single entry point for the cart routes. Exposes the four cart operations of
the orchestrator and maps its error kinds to HTTP status codes.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import __version__
from core.cart import CartOrchestrator, build_cart_orchestrator
from core.config import AppConfig, load_config
from core.errors import (
    ERROR_INTERNAL,
    CartError,
    CartNotFound,
    CartRecoveryFailed,
    ItemNotFound,
    UnauthorizedError,
    ValidationError,
)
from core.logging import get_logger
from core.routers import cart_router

logger = get_logger(__name__)

# Most specific first; anything else deriving from CartError is a 500
ERROR_STATUS_CODES: list[tuple[type[CartError], int]] = [
    (ValidationError, 400),
    (UnauthorizedError, 401),
    (CartNotFound, 404),
    (ItemNotFound, 404),
    (CartRecoveryFailed, 409),
]


def status_for_error(error: CartError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


# ==================== EXCEPTION HANDLERS ====================

async def cart_error_handler(request: Request, exc: CartError):
    status_code = status_for_error(exc)
    if status_code == 500:
        logger.error(f"Unmapped cart error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(error.get("msg", "invalid value") for error in exc.errors())
    return JSONResponse(status_code=400, content={"error": message})


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    config = app.state.config
    logger.info(
        f"Starting cart API ({config.name}), session TTL {config.session_ttl_ms} ms, "
        f"auth {'enabled' if config.api_key else 'disabled'}"
    )
    yield
    logger.info("Cart API stopped")


def create_app(
    config: Optional[AppConfig] = None,
    orchestrator: Optional[CartOrchestrator] = None,
    enable_docs: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Effective config; loaded from the environment when omitted
        orchestrator: Cart orchestrator; a fresh in-memory one is wired when omitted
        enable_docs: Serve /docs and /openapi.json

    Returns:
        Configured FastAPI instance
    """
    config = config or load_config()
    orchestrator = orchestrator or build_cart_orchestrator(config.session_ttl_ms)

    app = FastAPI(
        title="Experience Cart API",
        description="Stable cart ids over expiring commerce sessions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
    )
    app.state.config = config
    app.state.cart_orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CartError, cart_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(cart_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": config.name}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.index:app", host="0.0.0.0", port=app.state.config.port, log_level="info")
