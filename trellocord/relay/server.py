"""FastAPI server receiving Trello webhooks and relaying them to Discord."""

import json
from pathlib import Path
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from ..common import (
    setup_logging,
    log_server_message,
    log_webhook_request,
    log_error,
    verify_trello_signature,
)
from ..config import RelayConfig
from ..exceptions import PayloadError
from ..models import extract_event, parse_webhook
from ..service import RelayService, STATUS_WRONG_ACTION

SIGNATURE_HEADER = "x-trello-webhook"


def create_app(config: Optional[RelayConfig] = None, service: Optional[RelayService] = None) -> FastAPI:
    """Build the relay application."""
    config = config or RelayConfig.from_env()
    service = service or RelayService(config)

    app = FastAPI(title="Trellocord", version="1.0.0")
    app.state.config = config
    app.state.service = service

    @app.on_event("startup")
    async def startup_event():
        """Handle application startup."""
        setup_logging(config.log_dir)
        log_server_message("Server starting up")
        Path(config.asset_dir).mkdir(parents=True, exist_ok=True)
        log_server_message("Webhook endpoint: /api")
        log_server_message(f"Destinations: {', '.join(d.name for d in config.destinations) or 'none'}")
        if not config.trello.secret:
            log_server_message("Webhook secret not configured, every webhook will be rejected")
        log_server_message("Server ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Handle application shutdown."""
        log_server_message("Server shutting down")
        await service.close()

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "trellocord"}

    @app.head("/api")
    async def webhook_probe() -> Response:
        """Trello probes the callback URL with HEAD when a webhook is created."""
        return Response(status_code=200)

    @app.post("/api")
    async def trello_webhook(request: Request) -> PlainTextResponse:
        """Handle Trello webhook requests with HMAC signature validation."""
        body = await request.body()

        signature_header = request.headers.get(SIGNATURE_HEADER)
        if not verify_trello_signature(body, signature_header, config.trello.callback_url, config.trello.secret):
            log_server_message("Invalid webhook signature")
            log_error("Invalid webhook signature", body.decode('utf-8', errors='ignore'))
            raise HTTPException(status_code=401, detail="Unauthorized")

        # Anything past this point answers 200, Trello disables webhooks that keep failing
        try:
            payload = json.loads(body)
            event = extract_event(parse_webhook(payload))
        except (ValueError, PayloadError) as e:
            log_server_message(f"Rejected webhook payload: {e}")
            log_error(f"Rejected webhook payload: {e}", body.decode('utf-8', errors='ignore'))
            return PlainTextResponse(STATUS_WRONG_ACTION)

        if event is None:
            return PlainTextResponse(STATUS_WRONG_ACTION)

        log_server_message(f"{event.kind.value} on board {event.board_id} card {event.card_id}")
        log_webhook_request(payload, event.kind.value)

        try:
            status = await service.handle(event)
        except Exception as e:
            log_error(f"Error processing webhook: {e}", json.dumps(payload))
            return PlainTextResponse(STATUS_WRONG_ACTION)

        return PlainTextResponse(status)

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        """Handle 404 errors."""
        log_server_message(f"404 Not Found: {request.url}")
        return PlainTextResponse("Not found", status_code=404)

    app.mount("/img", StaticFiles(directory=config.asset_dir, check_dir=False), name="img")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "trellocord.relay.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=4500,
        reload=False,
        log_level="info"
    )
