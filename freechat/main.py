"""FastAPI application entry point.

This module initialises the FastAPI app, configures logging and
registers API routes.  The `uvicorn` ASGI server can point to
``freechat.main:app`` to serve the application.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .utils.logger import setup_logging
from .config.app_config import AppConfig, get_app_config
from .config.llm_config import LlmConfig, get_llm_config
from .controllers.chat_controller import router as chat_router
from .controllers.admin_controller import router as admin_router
from .services.chat_service import ChatService
from .services.usage_tracker import UsageTracker
from .utils.error_handler import ChatError, QuotaExceededError, http_exception_handler, quota_exception_handler


def create_app(
    app_config: AppConfig | None = None,
    llm_config: LlmConfig | None = None,
    chat_service: ChatService | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    The usage tracker is created here, once per application, and shared
    by every request through ``app.state.chat_service``.  Tests pass a
    prepared ``chat_service`` to control the clock and the provider.
    """
    app_config = app_config or get_app_config()
    setup_logging(app_config)

    if chat_service is None:
        chat_service = ChatService(
            tracker=UsageTracker(daily_limit=app_config.daily_limit),
            llm_config=llm_config or get_llm_config(),
            app_config=app_config,
        )

    app = FastAPI(title="Free Chat", version="0.1.0")
    app.state.chat_service = chat_service

    # Enable CORS for all origins; adjust in production as needed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(QuotaExceededError, quota_exception_handler)
    app.add_exception_handler(ChatError, http_exception_handler)

    app.include_router(chat_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        logger.debug("Health check invoked")
        return {"status": "ok"}

    return app


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn

    app_config = get_app_config()
    uvicorn.run(
        "freechat.main:app",
        host=app_config.app_host,
        port=app_config.app_port,
        reload=app_config.app_debug,
    )


# Create an application instance for ASGI servers
app = create_app()
