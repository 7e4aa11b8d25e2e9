"""
Socrate FastAPI application.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from socrate.api.middleware.rate_limit import RateLimitMiddleware
from socrate.api.routes import health, sessions, conversation, socratic, proxy
from socrate.core.conversation import ConversationController
from socrate.core.diary import DiaryExporter
from socrate.core.prompt.builder import PromptBuilder
from socrate.core.socratic import SocraticController
from socrate.session.manager import SessionManager
from socrate.shared.config import settings
from socrate.shared.exceptions import (
    SessionNotFoundError,
    ProblemNotFoundError,
    ControllerBusyError,
    InsightPendingError,
    GatewayError,
    UnsupportedModelError,
)
from socrate.shared.gateway import ModelGateway
from socrate.shared.llm import VendorProxy
from socrate.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: wire controllers around one gateway."""
    logger.info("Starting Socrate API")

    if getattr(app.state, "proxy", None) is None:
        app.state.proxy = VendorProxy()
    if getattr(app.state, "gateway", None) is None:
        app.state.gateway = ModelGateway.from_settings(proxy=app.state.proxy)

    prompt_builder = PromptBuilder()
    app.state.session_manager = SessionManager()
    app.state.conversation = ConversationController(app.state.gateway, prompt_builder)
    app.state.socratic = SocraticController(app.state.gateway, prompt_builder)
    app.state.diary = DiaryExporter()

    health.set_start_time(time.time())

    logger.info("Socrate API ready")
    yield

    logger.info("Socrate API stopped")


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


def create_app(
    gateway: Optional[ModelGateway] = None,
    vendor_proxy: Optional[VendorProxy] = None
) -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="Socrate",
        description="Root-cause conversation and Socratic five-whys dialogue",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.gateway = gateway
    app.state.proxy = vendor_proxy

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting (after CORS so CORS headers applied first)
    app.add_middleware(RateLimitMiddleware)

    app.add_exception_handler(SessionNotFoundError, _error_handler(404))
    app.add_exception_handler(ProblemNotFoundError, _error_handler(404))
    app.add_exception_handler(ControllerBusyError, _error_handler(409))
    app.add_exception_handler(InsightPendingError, _error_handler(409))
    # Only the proxy route lets vendor failures escape; controllers handle their own
    app.add_exception_handler(GatewayError, _error_handler(502))
    app.add_exception_handler(UnsupportedModelError, _error_handler(400))

    app.include_router(health.router)
    app.include_router(sessions.router)
    app.include_router(conversation.router)
    app.include_router(socratic.router)
    app.include_router(proxy.router)

    @app.get("/")
    async def root():
        return {"service": "socrate", "status": "running"}

    return app


app = create_app()


def main():
    """CLI entry point for uvicorn."""
    import uvicorn

    setup_logging()
    uvicorn.run(
        "socrate.api.app:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
