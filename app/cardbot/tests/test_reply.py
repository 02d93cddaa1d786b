"""Tests for the reply sender."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from botbuilder.schema import ActivityTypes

from app.cardbot.errors import ReplyDeliveryError
from app.cardbot.messaging.cards import ADAPTIVE_CARD_CONTENT_TYPE, CardTemplate
from app.cardbot.messaging.dispatcher import SendAttachment, SendText
from app.cardbot.messaging.reply import build_activity, send_replies


class TestBuildActivity:
    def test_text(self) -> None:
        activity = build_activity(SendText("You said: hi"))
        assert activity.type == ActivityTypes.message
        assert activity.text == "You said: hi"
        assert activity.text_format == "plain"
        assert not activity.attachments

    def test_attachment(self, card: CardTemplate) -> None:
        activity = build_activity(SendAttachment(card))
        assert activity.type == ActivityTypes.message
        assert len(activity.attachments) == 1
        att = activity.attachments[0]
        assert att.content_type == ADAPTIVE_CARD_CONTENT_TYPE
        assert att.content == card.to_dict()


class TestSendReplies:
    @pytest.mark.asyncio
    async def test_single_action(self) -> None:
        ctx = AsyncMock()
        await send_replies(ctx, SendText("Hello!"))
        ctx.send_activity.assert_awaited_once()
        assert ctx.send_activity.call_args[0][0].text == "Hello!"

    @pytest.mark.asyncio
    async def test_sequence_keeps_order(self, card: CardTemplate) -> None:
        ctx = AsyncMock()
        await send_replies(ctx, [SendText("first"), SendAttachment(card), SendText("last")])
        sent = [call.args[0] for call in ctx.send_activity.await_args_list]
        assert [a.text for a in sent] == ["first", None, "last"]
        assert sent[1].attachments[0].content_type == ADAPTIVE_CARD_CONTENT_TYPE

    @pytest.mark.asyncio
    async def test_empty_sequence_sends_nothing(self) -> None:
        ctx = AsyncMock()
        await send_replies(ctx, [])
        ctx.send_activity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_raises_delivery_error(self) -> None:
        ctx = AsyncMock()
        cause = ConnectionError("channel down")
        ctx.send_activity.side_effect = cause
        with pytest.raises(ReplyDeliveryError) as info:
            await send_replies(ctx, SendText("Hello!"))
        assert info.value.cause is cause
        assert info.value.__cause__ is cause
        assert "channel down" in str(info.value)

    @pytest.mark.asyncio
    async def test_failure_stops_the_sequence(self) -> None:
        ctx = AsyncMock()
        ctx.send_activity.side_effect = [None, RuntimeError("boom"), None]
        with pytest.raises(ReplyDeliveryError):
            await send_replies(ctx, [SendText("a"), SendText("b"), SendText("c")])
        assert ctx.send_activity.await_count == 2
