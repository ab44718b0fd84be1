from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram.error import BadRequest, Forbidden

from services.notify_service import MESSAGE_LIMIT, NotificationService
from services.payment_service import PaymentService


@pytest.fixture
def bot():
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.send_document = AsyncMock()
    bot.send_photo = AsyncMock()
    bot.send_video = AsyncMock()
    return bot


@pytest.mark.asyncio
async def test_notify_user_truncates_long_messages(bot):
    assert await NotificationService(bot).notify_user(5, "x" * 5000) is True

    assert len(bot.send_message.await_args.kwargs['text']) == MESSAGE_LIMIT


@pytest.mark.asyncio
async def test_notify_user_reports_failure(bot):
    bot.send_message.side_effect = Forbidden("bot was blocked by the user")
    assert await NotificationService(bot).notify_user(5, "hi") is False


@pytest.mark.asyncio
async def test_notify_admin_uses_configured_id(bot):
    await NotificationService(bot).notify_admin("new promotion")
    assert bot.send_message.await_args.kwargs['chat_id'] == 999


@pytest.mark.asyncio
async def test_notify_admin_skipped_without_admin(bot):
    with patch('services.notify_service.ADMIN_ID', ''):
        assert await NotificationService(bot).notify_admin("new promotion") is False
    bot.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_file_by_kind(bot):
    notifier = NotificationService(bot)

    await notifier.send_file(1, SimpleNamespace(file_id="p", kind="photo"), "cap")
    await notifier.send_file(1, SimpleNamespace(file_id="v", kind="video"))
    await notifier.send_file(1, SimpleNamespace(file_id="d", file_type="document"))

    assert bot.send_photo.await_args.kwargs == {'chat_id': 1, 'photo': "p", 'caption': "cap"}
    assert bot.send_video.await_args.kwargs['video'] == "v"
    assert bot.send_document.await_args.kwargs['document'] == "d"


@pytest.mark.asyncio
async def test_send_file_failure(bot):
    bot.send_document.side_effect = BadRequest("wrong file identifier")
    ok = await NotificationService(bot).send_file(1, SimpleNamespace(file_id="d", kind="document"))
    assert ok is False


def test_order_payment_url_uses_quote():
    order = SimpleNamespace(id=3, payable_price=12.0, transaction_id="REQ_X_7_ABC")
    url = PaymentService("https://pay.example.com/checkout").order_payment_url(order)

    assert url == "https://pay.example.com/checkout?amount=13.80&ref=REQ_X_7_ABC"


def test_promotion_payment_url():
    url, reference = PaymentService("https://pay.example.com/checkout?shop=1").promotion_payment_url(7)

    assert reference.startswith("PROMO_")
    assert "_7_" in reference
    assert url == f"https://pay.example.com/checkout?shop=1&amount=1.99&ref={reference}"


def test_payment_message():
    order = SimpleNamespace(id=3, payable_price=10.0, transaction_id="REQ_Y")
    message = PaymentService().format_payment_message(order, "Logo Design")

    assert "Quoted Price: $10.00" in message
    assert "Total (incl. fees): $11.50" in message
    assert "Reference: REQ_Y" in message
