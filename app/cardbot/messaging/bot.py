"""Bot Framework turn handler -- dispatches each activity and sends the reply."""

from __future__ import annotations

import logging

from botbuilder.core import ActivityHandler, TurnContext

from .cards import CardTemplate
from .dispatcher import dispatch
from .reply import send_replies

logger = logging.getLogger(__name__)


class Bot(ActivityHandler):
    """Answers every activity type, not only messages.

    ``on_turn`` is overridden as a whole because the reply rules decide on
    the activity type themselves.
    """

    def __init__(self, card: CardTemplate) -> None:
        self._card = card

    async def on_turn(self, turn_context: TurnContext) -> None:
        activity = turn_context.activity
        logger.info(
            "[bot] Processing activity type=%s channel=%s",
            activity.type, activity.channel_id,
        )

        action = dispatch(activity, self._card)
        logger.debug("[bot] Reply: %s", type(action).__name__)

        await send_replies(turn_context, action)
        logger.info("[bot] Finished processing activity type=%s", activity.type)
