"""Bot Framework endpoint -- POST /api/messages."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from aiohttp import web
from botbuilder.schema import Activity

from ..errors import MalformedActivity

if TYPE_CHECKING:
    from botbuilder.core import BotFrameworkAdapter

    from ..messaging.bot import Bot

logger = logging.getLogger(__name__)


def error_response(status: int, code: str, message: str) -> web.Response:
    return web.json_response({"code": code, "message": message}, status=status)


def parse_activity(raw_body: bytes) -> Activity:
    """Deserialize a request body, raising :class:`MalformedActivity` if unusable."""
    try:
        body = json.loads(raw_body)
    except ValueError as exc:
        raise MalformedActivity(f"Invalid JSON: {exc}") from exc

    if not isinstance(body, dict):
        raise MalformedActivity("Activity must be a JSON object")
    if not isinstance(body.get("type"), str) or not body["type"]:
        raise MalformedActivity("Activity has no 'type'")

    try:
        return Activity().deserialize(body)
    except Exception as exc:
        raise MalformedActivity(f"Invalid activity: {exc}") from exc


class BotEndpoint:
    """Handles incoming Bot Framework activities."""

    path = "/api/messages"

    def __init__(self, adapter: BotFrameworkAdapter, bot: Bot) -> None:
        self.adapter = adapter
        self._bot = bot

    def register(self, router: web.UrlDispatcher) -> None:
        resource = router.add_resource(self.path)
        resource.add_route("POST", self.handle)
        resource.add_route("*", self._method_not_allowed)

    async def _method_not_allowed(self, req: web.Request) -> web.Response:
        logger.info("[bot] Rejected %s %s (405)", req.method, req.path)
        return error_response(
            405,
            "MethodNotAllowed",
            f"{req.method} is not allowed on this endpoint. Use POST instead.",
        )

    async def handle(self, req: web.Request) -> web.Response:
        logger.info(
            "[bot] POST %s from %s | content-type=%s content-length=%s",
            self.path,
            req.remote,
            req.headers.get("Content-Type", "?"),
            req.headers.get("Content-Length", "?"),
        )

        try:
            raw_body = await req.read()
        except Exception as exc:
            logger.error("[bot] Failed to read request body: %s", exc)
            return error_response(400, "BadRequest", "Failed to read request body")

        try:
            activity = parse_activity(raw_body)
        except MalformedActivity as exc:
            logger.warning("[bot] Rejected malformed activity: %s | raw=%s", exc, raw_body[:500])
            return error_response(400, "BadRequest", str(exc))

        auth_header = req.headers.get("Authorization", "")
        from_id = activity.from_property.id if activity.from_property else "?"
        logger.info(
            "[bot] Activity: type=%s channel=%s from=%s serviceUrl=%s auth=%s",
            activity.type,
            activity.channel_id,
            from_id,
            activity.service_url,
            "Bearer ..." if auth_header.startswith("Bearer ") else repr(auth_header[:20]),
        )

        try:
            response = await self.adapter.process_activity(
                activity, auth_header, self._bot.on_turn
            )
        except PermissionError as exc:
            logger.warning("[bot] Authentication failed (401): %s", exc)
            return error_response(401, "Unauthorized", str(exc))
        except Exception as exc:
            logger.exception(
                "[bot] Error processing activity: %s (type=%s channel=%s from=%s)",
                exc, activity.type, activity.channel_id, from_id,
            )
            return error_response(500, "InternalServer", "Failed to process message request")

        if response:
            logger.info("[bot] Adapter returned response: status=%s", response.status)
            if response.body is None:
                return web.Response(status=response.status)
            return web.json_response(response.body, status=response.status)
        logger.info("[bot] Activity processed successfully (200)")
        return web.Response(status=200)
