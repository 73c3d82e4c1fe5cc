"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
exception handlers and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.agent.chat_agent import ChatService
from src.api.chat import router as chat_router
from src.errors import FormatError, RemoteError
from src.models.schemas import ChatResponse, ErrorDetail

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Travel Chat API...")
    yield
    # Shutdown
    logger.info("Shutting down Travel Chat API...")


def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    body = ChatResponse(errors=[ErrorDetail(message=message, errorType=error_type)])
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(application: FastAPI) -> None:
    """Convert chat failures into the error list returned to the UI."""

    @application.exception_handler(FormatError)
    async def format_error_handler(request: Request, exc: FormatError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), "FormatError")

    @application.exception_handler(RemoteError)
    async def remote_error_handler(request: Request, exc: RemoteError) -> JSONResponse:
        return _error_response(status.HTTP_502_BAD_GATEWAY, str(exc), "RemoteError")

    @application.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
        error = exc.response.get("Error", {})
        return _error_response(
            status.HTTP_502_BAD_GATEWAY,
            error.get("Message") or str(exc),
            error.get("Code") or "ClientError",
        )

    @application.exception_handler(BotoCoreError)
    async def botocore_error_handler(request: Request, exc: BotoCoreError) -> JSONResponse:
        return _error_response(
            status.HTTP_502_BAD_GATEWAY, str(exc), type(exc).__name__
        )


def create_app(chat_service: ChatService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        chat_service: Optional pre-built service. Created lazily from the
            environment on the first request if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Travel Chat API",
        description=(
            "Forwards multimodal travel planning conversations to Amazon Bedrock. "
            "Accepts text and base64 images, returns the assistant's reply."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.chat_service = chat_service

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "travel-chat"}

    return application


app = create_app()
