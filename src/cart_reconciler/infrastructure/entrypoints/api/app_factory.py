from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cart_reconciler.core.application.exceptions import (
    CartStorageError,
    CollaboratorUnavailableError,
    LineItemNotFoundError,
)
from cart_reconciler.infrastructure.configuration import AppSettings
from cart_reconciler.infrastructure.entrypoints.api.cart_router import router as cart_router
from cart_reconciler.infrastructure.entrypoints.api.health_router import router as health_router
from cart_reconciler.infrastructure.entrypoints.api.session_router import router as session_router
from cart_reconciler.infrastructure.observability import configure_logging, get_logger
from cart_reconciler.infrastructure.observability.logging import CorrelationMiddleware
from cart_reconciler.infrastructure.resolution import CartContainer, CartSessionRegistry


def create_app(settings: AppSettings, container: CartContainer | None = None) -> FastAPI:
    configure_logging(settings.log_level)
    logger = get_logger("app_factory")
    container = container or CartContainer(settings)
    logger.info(
        "Boot diagnostics",
        app_name=settings.app_name,
        env=settings.env,
        cart_backend=container.backend.value,
    )

    app = FastAPI(title=settings.app_name)
    app.state.cart_sessions = CartSessionRegistry(container)
    app.add_middleware(CorrelationMiddleware)

    @app.exception_handler(LineItemNotFoundError)
    async def not_found_handler(request: Request, exc: LineItemNotFoundError):
        logger.warning("Line item not found", line_item_id=exc.line_item_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "line_item_id": exc.line_item_id},
        )

    @app.exception_handler(CollaboratorUnavailableError)
    async def unavailable_handler(request: Request, exc: CollaboratorUnavailableError):
        logger.error(
            "Collaborator unavailable",
            error_type=type(exc).__name__,
            error_details=str(exc),
            error_retryable=exc.retryable,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Cart service temporarily unavailable.", "retryable": exc.retryable},
        )

    @app.exception_handler(CartStorageError)
    async def storage_handler(request: Request, exc: CartStorageError):
        logger.error("Local cart storage failure", error_type=type(exc).__name__, error_details=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Cart storage failure."},
        )

    app.include_router(health_router)
    app.include_router(cart_router, prefix="/api/v1")
    app.include_router(session_router, prefix="/api/v1")

    return app
