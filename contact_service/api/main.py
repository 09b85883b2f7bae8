"""Contact form API.

FastAPI application providing endpoints for contact submissions:
- POST /: Validate a contact form and deliver it by email
- GET /health-check: Liveness probe

Validation errors are returned field by field. Delivery failures are logged
in full and reported to the client only as an opaque server error.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, FastAPI, Form, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from contact_service.api.schemas import ContactErrorResponse, ErrorResponse
from contact_service.config import ContactConfig
from contact_service.core.exceptions import ContactValidationError, DeliveryError
from contact_service.core.logger import get_logger, setup_logging
from contact_service.delivery.service import DeliveryService
from contact_service.validation.validator import validate_contact

logger = get_logger(__name__)


# =============================================================================
# Application State (Dependency Injection)
# =============================================================================
@dataclass(frozen=True)
class AppState:
    """Application state container for dependency injection."""

    config: ContactConfig
    delivery_service: DeliveryService


def get_app_state(request: Request) -> AppState:
    """Dependency: Get the state attached by the lifespan handler."""
    app_state = getattr(request.app.state, "services", None)
    if app_state is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return app_state


def get_delivery_service(
    app_state: Annotated[AppState, Depends(get_app_state)],
) -> DeliveryService:
    """Dependency: Get the shared delivery service."""
    return app_state.delivery_service


# =============================================================================
# Routes
# =============================================================================
def submit_contact(
    delivery_service: Annotated[DeliveryService, Depends(get_delivery_service)],
    email: Annotated[str, Form()] = "",
    name: Annotated[str, Form()] = "",
    message: Annotated[str, Form()] = "",
) -> Response:
    """Validate a contact form and deliver it.

    Declared sync so FastAPI runs each submission in its threadpool; the
    archive write and the SMTP round trip block only that worker.
    """
    logger.info("Attempting to parse contact request.")

    try:
        contact = validate_contact(email, name, message)
    except ContactValidationError as e:
        logger.info(f"Failed to parse contact request: {e.errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ContactErrorResponse.from_errors(e.errors).model_dump(),
        )

    logger.info(f"Successfully parsed contact request from {contact.email}")

    try:
        delivery_service.deliver(contact)
    except DeliveryError as e:
        logger.error(f"Failed to process contact: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process contact",
        ) from None

    logger.info("Successfully processed contact")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def health_check() -> Response:
    """Liveness probe. No dependencies are checked."""
    logger.debug("Executing health-check handler")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# FastAPI Application
# =============================================================================
def create_app(
    config: ContactConfig | None = None,
    delivery_service: DeliveryService | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Settings (loaded from the environment if None).
        delivery_service: Delivery service to use (built from config on
            startup if None).

    Returns:
        Configured FastAPI application.
    """
    config = config or ContactConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build shared services on startup, release them on shutdown."""
        try:
            service = delivery_service or DeliveryService.from_config(config)
        except Exception as e:
            logger.error(f"Failed to start API: {e}")
            raise

        app.state.services = AppState(config=config, delivery_service=service)
        logger.info(f"{config.SERVICE_NAME} ready")

        yield  # Application runs here

        logger.info(f"Shutting down {config.SERVICE_NAME}...")
        app.state.services = None

    application = FastAPI(
        title=config.SERVICE_NAME,
        description="Contact form submission and email delivery service",
        version=config.SERVICE_VERSION,
        lifespan=lifespan,
    )

    application.add_api_route(
        "/",
        submit_contact,
        methods=["POST"],
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={
            400: {"model": ContactErrorResponse, "description": "Invalid submission"},
            500: {"model": ErrorResponse, "description": "Delivery failed"},
        },
    )
    application.add_api_route(
        "/health-check",
        health_check,
        methods=["GET"],
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
    )

    return application


# =============================================================================
# Entry Point
# =============================================================================
def run() -> None:
    """Run the API server."""
    import uvicorn

    config = ContactConfig()
    setup_logging(
        log_dir=config.LOG_DIR,
        log_level=config.LOG_LEVEL,
        enable_file=config.LOG_TO_FILE,
        settings=config,
    )

    logger.info(f"Starting {config.SERVICE_NAME} on {config.API_HOST}:{config.API_PORT}")
    uvicorn.run(
        create_app(config),
        host=config.API_HOST,
        port=config.API_PORT,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    run()
