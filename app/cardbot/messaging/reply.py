"""Reply sender -- turns reply actions into outbound activities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from botbuilder.core import MessageFactory
from botbuilder.schema import Activity, ActivityTypes

from ..errors import ReplyDeliveryError
from .cards import card_attachment
from .dispatcher import ReplyAction, SendAttachment, SendText

if TYPE_CHECKING:
    from botbuilder.core import TurnContext


def build_activity(action: ReplyAction) -> Activity:
    if isinstance(action, SendAttachment):
        return MessageFactory.attachment(card_attachment(action.card))
    return Activity(type=ActivityTypes.message, text=action.text, text_format="plain")


async def send_replies(
    turn_context: TurnContext,
    actions: ReplyAction | Sequence[ReplyAction],
) -> None:
    """Send *actions* on the turn's conversation, in order.

    Stops at the first failure and raises :class:`ReplyDeliveryError`.
    """
    if isinstance(actions, SendText | SendAttachment):
        actions = (actions,)
    for action in actions:
        activity = build_activity(action)
        try:
            await turn_context.send_activity(activity)
        except Exception as exc:
            raise ReplyDeliveryError(exc) from exc
