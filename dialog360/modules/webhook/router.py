import json
import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from dialog360.config import get_settings
from dialog360.modules.webhook.dispatcher import WebhookDispatcher
from dialog360.modules.webhook.parser import parse_envelope

router = APIRouter()
logger = logging.getLogger(__name__)


def _verify_token(request: Request) -> str:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return settings.dialog360_verify_token


def _dispatcher(request: Request) -> WebhookDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        dispatcher = WebhookDispatcher()
        request.app.state.dispatcher = dispatcher
    return dispatcher


def _hub_param(request: Request, name: str) -> str | None:
    # Provider sends hub.<name>; hub_<name> is accepted too
    params = request.query_params
    return params.get(f"hub.{name}") or params.get(f"hub_{name}")


@router.get("/webhook")
async def verify_webhook(request: Request):
    """Subscription verification: echo the challenge iff the verify token matches."""
    hub_mode = _hub_param(request, "mode")
    hub_verify_token = _hub_param(request, "verify_token")
    hub_challenge = _hub_param(request, "challenge")

    expected = _verify_token(request)
    if hub_mode == "subscribe" and expected and hub_verify_token == expected:
        logger.info("Webhook verification succeeded")
        return Response(content=hub_challenge or "", media_type="text/plain")

    logger.warning("Webhook verification failed (mode=%s)", hub_mode)
    return JSONResponse({"error": "Verification failed"}, status_code=403)


@router.post("/webhook")
async def receive_webhook(request: Request):
    """Receive inbound messages and status updates."""
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.warning("Unparsable webhook body (%d bytes)", len(raw))
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    if not isinstance(payload, dict):
        logger.warning("Webhook body is not a JSON object: %s", type(payload).__name__)
        return JSONResponse({"error": "Invalid payload"}, status_code=400)

    envelope = parse_envelope(payload)
    try:
        # Handlers may call the blocking client, keep them off the event loop
        handled = await run_in_threadpool(_dispatcher(request).dispatch, envelope)
    except Exception as e:
        logger.exception("Error processing webhook: %s", e)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    logger.info(
        "Webhook processed: %d message(s), %d status(es), %d handled",
        len(envelope.messages), len(envelope.statuses), handled,
    )
    return {"status": "ok"}
