"""Messaging pipeline -- card template, dispatch rules, reply sending, bot handler."""

from .bot import Bot
from .cards import CardTemplate, card_attachment, load_card_template
from .dispatcher import RULES, ReplyAction, SendAttachment, SendText, dispatch, match_rule
from .reply import build_activity, send_replies

__all__ = [
    "Bot",
    "CardTemplate",
    "RULES",
    "ReplyAction",
    "SendAttachment",
    "SendText",
    "build_activity",
    "card_attachment",
    "dispatch",
    "load_card_template",
    "match_rule",
    "send_replies",
]
