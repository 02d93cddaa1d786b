"""Activity dispatch -- maps one inbound activity to one reply.

The decision is an ordered list of rules; the first rule whose ``matches``
accepts the activity builds the reply.  The last rule accepts everything, so
:func:`dispatch` is total.  No I/O happens here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from botbuilder.schema import ActivityTypes

from .cards import CardTemplate

SHOW_CARD_COMMAND = "show card"
ECHO_PREFIX = "You said: "
FORM_WITHOUT_NAME_TEXT = "You submitted the form, but no name was entered."
UNSUPPORTED_TEXT = "Sorry, I could not process that request."


@dataclass(frozen=True, slots=True)
class SendText:
    text: str


@dataclass(frozen=True, slots=True)
class SendAttachment:
    card: CardTemplate


ReplyAction = SendText | SendAttachment


@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    matches: Callable[[Any], bool]
    build: Callable[[Any, CardTemplate], ReplyAction]


def _is_message(activity: Any) -> bool:
    return getattr(activity, "type", None) == ActivityTypes.message


def _text(activity: Any) -> str:
    text = getattr(activity, "text", None)
    return text if isinstance(text, str) else ""


def _has_text(activity: Any) -> bool:
    return _is_message(activity) and bool(_text(activity).strip())


def _reply_to_text(activity: Any, card: CardTemplate) -> ReplyAction:
    text = _text(activity)
    if text.strip().casefold() == SHOW_CARD_COMMAND:
        return SendAttachment(card)
    return SendText(ECHO_PREFIX + text)


def _has_form_value(activity: Any) -> bool:
    return _is_message(activity) and isinstance(getattr(activity, "value", None), Mapping)


def _reply_to_form(activity: Any, _card: CardTemplate) -> ReplyAction:
    user_name = activity.value.get("userName")
    if isinstance(user_name, str) and user_name:
        return SendText(f"Hello, {user_name}!")
    return SendText(FORM_WITHOUT_NAME_TEXT)


RULES: tuple[Rule, ...] = (
    Rule("text", _has_text, _reply_to_text),
    Rule("form", _has_form_value, _reply_to_form),
    Rule("fallback", lambda _activity: True, lambda _activity, _card: SendText(UNSUPPORTED_TEXT)),
)


def match_rule(activity: Any) -> Rule:
    """Return the first rule in :data:`RULES` that accepts *activity*."""
    return next(rule for rule in RULES if rule.matches(activity))


def dispatch(activity: Any, card: CardTemplate) -> ReplyAction:
    return match_rule(activity).build(activity, card)
