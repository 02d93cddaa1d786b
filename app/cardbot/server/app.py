"""Web server -- app factory and entry point."""

from __future__ import annotations

import logging

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger
from botbuilder.core import BotFrameworkAdapter, BotFrameworkAdapterSettings, TurnContext
from botbuilder.schema import Activity, ActivityTypes

from .. import __version__
from ..config.settings import Settings
from ..errors import StartupConfigurationError
from ..messaging.bot import Bot
from ..messaging.cards import CardTemplate, load_card_template
from .bot_endpoint import BotEndpoint

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s  %(name)s  %(levelname)s  %(message)s"
FAILURE_NOTICE_TEXT = "Something went wrong while processing your request."

_QUIET_PATHS = frozenset({"/health"})


# ---------------------------------------------------------------------------
# Access logger
# ---------------------------------------------------------------------------


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes health-check log entries to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        level = logging.DEBUG if request.path in _QUIET_PATHS else logging.INFO
        self.logger.log(
            level,
            "%s %s %s %s %.3fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


# ---------------------------------------------------------------------------
# Bot Framework adapter
# ---------------------------------------------------------------------------


def create_adapter(settings: Settings) -> BotFrameworkAdapter:
    adapter_settings = BotFrameworkAdapterSettings(
        app_id=settings.app_id or None,
        app_password=settings.app_password or None,
        channel_auth_tenant=settings.app_tenant_id or None,
    )
    adapter = BotFrameworkAdapter(adapter_settings)

    async def on_error(context: TurnContext, error: Exception) -> None:
        """Tell the user something broke, then let the endpoint answer 500."""
        logger.error("[bot] Turn error: %s", error, exc_info=error)
        try:
            await context.send_activity(
                Activity(type=ActivityTypes.message, text=FAILURE_NOTICE_TEXT, text_format="plain")
            )
        except Exception:
            logger.exception("[bot] Failed to send failure notice")
        raise error

    adapter.on_turn_error = on_error
    return adapter


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(settings: Settings, card: CardTemplate | None = None) -> web.Application:
    """Build the aiohttp application.

    Raises :class:`StartupConfigurationError` when *settings* are invalid or
    the card template cannot be loaded.
    """
    settings.validate()
    if card is None:
        card = load_card_template(settings.card_template_path)

    adapter = create_adapter(settings)
    bot = Bot(card)

    app = web.Application()
    BotEndpoint(adapter, bot).register(app.router)
    app.router.add_get("/health", _health)
    return app


async def _health(_req: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "version": __version__})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    settings = Settings()
    try:
        app = create_app(settings)
    except StartupConfigurationError as exc:
        logger.critical("Startup aborted: %s", exc)
        raise SystemExit(1) from exc

    logging.getLogger().setLevel(settings.log_level)
    logger.info(
        "Bot listening on port %d (app_id=%s, tenant=%s)",
        settings.port,
        settings.masked_app_id,
        settings.app_tenant_id or "(none)",
    )
    web.run_app(app, host="0.0.0.0", port=settings.port, access_log_class=QuietAccessLogger)


if __name__ == "__main__":
    main()
