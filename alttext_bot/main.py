"""Alt text reminder bot - FastAPI application for Slack events."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import httpx
import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response, status

from alttext_bot.channels.slack import SlackEphemeralChannel
from alttext_bot.clients.alt_text_api import AltTextClient
from alttext_bot.clients.slack_files import SlackFileClient
from alttext_bot.config import Settings, get_settings
from alttext_bot.dedup import EventDeduplicator
from alttext_bot.dispatcher import BackgroundDispatcher
from alttext_bot.errors import AuthenticationFailure, MalformedPayload
from alttext_bot.handler import ReminderHandler
from alttext_bot.pipeline import GenerationPipeline
from alttext_bot.retry import RetryingCaller
from alttext_bot.security import SignatureVerifier
from alttext_bot.sources.slack import SlackSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_dispatcher(settings: Settings, client: httpx.AsyncClient) -> BackgroundDispatcher:
    """Wire the reminder workflow from settings."""
    generator = None
    if settings.suggestions_enabled:
        generator = AltTextClient(
            client,
            api_url=settings.alt_text_api_url,
            api_key=settings.alt_text_api_key or "",
            prompt=settings.alt_text_prompt,
            user_prompt=settings.alt_text_user_prompt,
            model=settings.alt_text_model,
            backend=settings.alt_text_backend,
        )
    else:
        logger.warning(
            "ALT_TEXT_GENERATION_API_KEY not set, reminders will be sent without suggestions"
        )

    retry_policy = {
        "max_attempts": settings.max_attempts,
        "rate_limit_delay": settings.rate_limit_backoff,
        "timeout_delay": settings.timeout_backoff,
    }
    pipeline = GenerationPipeline(
        downloader=SlackFileClient(client, settings.slack_token),
        generator=generator,
        download_caller=RetryingCaller("download", settings.download_timeout, **retry_policy),
        generation_caller=RetryingCaller("alt-text-api", settings.generation_timeout, **retry_policy),
        budget=settings.generation_budget,
        target_width=settings.target_width,
        thumbnail_quality=settings.thumbnail_quality,
        full_size_quality=settings.full_size_quality,
        thumbnail_size_ceiling=settings.thumbnail_size_ceiling,
    )
    handler = ReminderHandler(
        pipeline,
        SlackEphemeralChannel(client, settings.slack_token, settings.slack_api_url),
        excluded_users=settings.excluded_users,
    )
    return BackgroundDispatcher(
        handler,
        EventDeduplicator(settings.dedup_cache_size),
        ack_timeout=settings.ack_timeout,
    )


def create_app(
    settings: Settings | None = None,
    dispatcher: BackgroundDispatcher | None = None,
) -> FastAPI:
    """Create the application. Arguments override what lifespan would build."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        app_settings = settings or get_settings()

        # Configure logging level
        logging.getLogger().setLevel(app_settings.log_level.upper())

        client = httpx.AsyncClient(timeout=30.0)
        app.state.settings = app_settings
        app.state.verifier = SignatureVerifier(
            app_settings.slack_signing_secret, max_age=app_settings.signature_max_age
        )
        app.state.source = SlackSource()
        app.state.dispatcher = dispatcher or build_dispatcher(app_settings, client)
        logger.info(
            f"Alt text bot started (suggestions enabled: {app_settings.suggestions_enabled}, "
            f"excluded users: {len(app_settings.excluded_users)})"
        )

        yield

        # Cleanup on shutdown
        await app.state.dispatcher.drain(app_settings.shutdown_grace)
        await client.aclose()
        logger.info("Alt text bot stopped")

    app = FastAPI(
        title="Alt Text Bot",
        description="Reminds Slack users to add alt text to shared images",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/status")
    async def service_status(request: Request) -> dict[str, Any]:
        """Report dedup cache and background task state."""
        state = request.app.state
        return {
            "processed_events": len(state.dispatcher.deduplicator),
            "pending_tasks": state.dispatcher.pending,
            "suggestions_enabled": state.settings.suggestions_enabled,
        }

    @app.post("/slack/events")
    async def slack_events(request: Request, response: Response) -> dict[str, Any]:
        """Receive Slack Events API webhook."""
        state = request.app.state
        body = await request.body()

        try:
            state.verifier.verify(
                body,
                request.headers.get("x-slack-request-timestamp", ""),
                request.headers.get("x-slack-signature", ""),
            )
        except AuthenticationFailure as e:
            logger.warning(f"Rejected Slack request: {e}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

        try:
            envelope = state.source.parse(body)
        except MalformedPayload as e:
            logger.warning(f"Failed to parse Slack payload: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        if envelope.type == "url_verification":
            return {"challenge": envelope.challenge}

        retry_num = request.headers.get("x-slack-retry-num", "0")
        if state.settings.no_retry_on_redelivery and retry_num.isdigit() and int(retry_num) > 0:
            logger.info(
                f"Redelivery #{retry_num} ({request.headers.get('x-slack-retry-reason', '')}), "
                "asking Slack to stop retrying"
            )
            response.headers["X-Slack-No-Retry"] = "1"
            return {"ok": True}

        if envelope.type == "event_callback" and envelope.event and envelope.event.type == "message":
            logger.info(f"Message event received, event_id={envelope.event_id}")
            outcome = await state.dispatcher.dispatch(envelope)
            logger.info(f"Dispatch result for {envelope.fingerprint}: {outcome.value}")

        return {"ok": True}

    return app


app = create_app()


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "alttext_bot.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
