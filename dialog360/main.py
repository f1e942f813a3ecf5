"""
Example webhook receiver app.
Run: uvicorn dialog360.main:app
"""

import logging

from fastapi import FastAPI

logging.basicConfig(level=logging.INFO)

from dialog360.config import Settings, get_settings
from dialog360.modules.webhook.dispatcher import WebhookDispatcher
from dialog360.modules.webhook.router import router as webhook_router

logger = logging.getLogger(__name__)


def create_app(
    dispatcher: WebhookDispatcher | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="dialog360 webhook receiver",
        description="Receives 360dialog WhatsApp webhooks",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher or WebhookDispatcher()

    app.include_router(webhook_router, tags=["webhook"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "environment": settings.environment}

    if not settings.dialog360_verify_token:
        logger.warning("DIALOG360_VERIFY_TOKEN is not set, webhook verification will always fail")

    return app


app = create_app()
