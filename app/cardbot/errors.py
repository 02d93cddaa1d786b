"""Exception types raised across the bot."""

from __future__ import annotations


class CardBotError(Exception):
    """Base class for all cardbot errors."""


class MalformedActivity(CardBotError):
    """The inbound payload is not a usable Bot Framework activity."""


class ReplyDeliveryError(CardBotError):
    """Sending a reply back on the conversation failed.

    The original exception is kept on *cause* and chained via ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to deliver reply: {cause}")
        self.cause = cause


class StartupConfigurationError(CardBotError):
    """Credentials or the card template are missing or invalid."""
