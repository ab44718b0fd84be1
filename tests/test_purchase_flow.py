from types import SimpleNamespace

import pytest

from conftest import BUYER_ID, OTHER_ID, SELLER_ID
from conversation import CollectRequirements, TypingRequirements, UploadingDocs
from database.models import FileKind, Order, OrderFile, OrderStatus
from handlers.dispatcher import handle_file, handle_text
from handlers.purchase import (
    buy_service, extract_request_file, send_request, start_document_upload, start_text_requirements
)
from utils.constants import NO_REQUIREMENTS_TEXT


def _buttons(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


@pytest.mark.asyncio
async def test_buy_starts_requirements_collection(db, buyer, service, context, store, make_callback, texts):
    update = make_callback(BUYER_ID, "buy_7")
    await buy_service(update, context)

    state = store.get(BUYER_ID)
    assert isinstance(state, CollectRequirements)
    assert state.service.service_id == 7
    assert state.service.seller_name == "Sam Seller"
    assert state.requirements == ()

    text = texts(update.callback_query.edit_message_text)[0]
    assert "Service Request: Logo Design" in text
    assert "Base Price: $11.50" in text
    markup = update.callback_query.edit_message_text.await_args.kwargs['reply_markup']
    assert _buttons(markup) == ["req_text_7", "req_docs_7", "send_request_7"]


@pytest.mark.asyncio
async def test_buy_rejections(db, buyer, service, context, store, make_callback):
    unregistered = make_callback(OTHER_ID, "buy_7")
    await buy_service(unregistered, context)
    unregistered.callback_query.answer.assert_awaited_once_with("Please register first with /start")

    missing = make_callback(BUYER_ID, "buy_99")
    await buy_service(missing, context)
    missing.callback_query.answer.assert_awaited_once_with("Service not found")

    own = make_callback(SELLER_ID, "buy_7")
    await buy_service(own, context)
    own.callback_query.answer.assert_awaited_once_with("You cannot request your own service")

    assert len(store) == 0


@pytest.mark.asyncio
async def test_text_then_file_then_send(db, buyer, service, context, store, make_callback, make_message, texts):
    await buy_service(make_callback(BUYER_ID, "buy_7"), context)

    await start_text_requirements(make_callback(BUYER_ID, "req_text_7"), context)
    assert isinstance(store.get(BUYER_ID), TypingRequirements)

    first = make_message(BUYER_ID, "Blue and white")
    await handle_text(first, context)
    reply = texts(first.message.reply_text)[0]
    assert reply.startswith("✅ Requirements added!")
    assert "📝 Blue and white" in reply
    markup = first.message.reply_text.await_args.kwargs['reply_markup']
    assert _buttons(markup) == ["req_text_7", "send_request_7", "req_docs_7"]
    assert isinstance(store.get(BUYER_ID), TypingRequirements)

    await start_document_upload(make_callback(BUYER_ID, "req_docs_7"), context)
    assert isinstance(store.get(BUYER_ID), UploadingDocs)

    document = SimpleNamespace(file_id="doc-1", file_name="brief.pdf")
    upload = make_message(BUYER_ID, document=document)
    await handle_file(upload, context)
    assert "✅ File received and saved!" in texts(upload.message.reply_text)[0]
    assert store.get(BUYER_ID).requirements == ("📝 Blue and white", "📄 Document: brief.pdf")

    sending = make_callback(BUYER_ID, "send_request_7")
    await send_request(sending, context)

    assert store.get(BUYER_ID) is None
    order = db.query(Order).one()
    assert order.buyer_id == BUYER_ID
    assert order.seller_id == SELLER_ID
    assert order.status == OrderStatus.REQUEST_SENT
    assert order.total_amount == 11.5
    assert order.buyer_requirements == "📝 Blue and white\n\n📄 Document: brief.pdf"
    files = db.query(OrderFile).all()
    assert [(f.file_id, f.file_type, f.file_name) for f in files] == [("doc-1", FileKind.DOCUMENT, "brief.pdf")]

    context.bot.send_document.assert_awaited_once()
    assert context.bot.send_document.await_args.kwargs['chat_id'] == SELLER_ID
    assert context.bot.send_document.await_args.kwargs['document'] == "doc-1"

    seller_note = context.bot.send_message.await_args.kwargs
    assert seller_note['chat_id'] == SELLER_ID
    assert "New Service Request!" in seller_note['text']
    assert "1 file(s) forwarded" in seller_note['text']
    assert _buttons(seller_note['reply_markup']) == [
        f"send_quote_{order.id}", f"decline_request_{order.id}", f"message_buyer_{order.id}"
    ]
    assert "Request Sent!" in texts(sending.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_send_without_requirements_uses_placeholder(db, buyer, service, context, make_callback):
    await buy_service(make_callback(BUYER_ID, "buy_7"), context)
    await send_request(make_callback(BUYER_ID, "send_request_7"), context)

    assert db.query(Order).one().buyer_requirements == NO_REQUIREMENTS_TEXT
    assert NO_REQUIREMENTS_TEXT in context.bot.send_message.await_args.kwargs['text']


@pytest.mark.asyncio
async def test_send_after_session_lost(db, buyer, service, context, make_callback, texts):
    update = make_callback(BUYER_ID, "send_request_7")
    await send_request(update, context)

    assert db.query(Order).count() == 0
    assert "session expired" in texts(update.callback_query.edit_message_text)[0]
    context.bot.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_survives_seller_notification_failure(db, buyer, service, context, make_callback, texts):
    from telegram.error import Forbidden
    context.bot.send_message.side_effect = Forbidden("bot was blocked by the user")

    await buy_service(make_callback(BUYER_ID, "buy_7"), context)
    sending = make_callback(BUYER_ID, "send_request_7")
    await send_request(sending, context)

    assert db.query(Order).count() == 1
    assert "Request Sent!" in texts(sending.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_files_only_accepted_while_uploading(db, buyer, service, context, store, make_callback, make_message, texts):
    await buy_service(make_callback(BUYER_ID, "buy_7"), context)

    stray = make_message(BUYER_ID, photo=[SimpleNamespace(file_id="small"), SimpleNamespace(file_id="big")])
    await handle_file(stray, context)

    assert "Upload Documents" in texts(stray.message.reply_text)[0]
    assert store.get(BUYER_ID).files == ()


@pytest.mark.asyncio
async def test_text_at_decision_point_shows_buttons(db, buyer, service, context, store, make_callback, make_message, texts):
    await buy_service(make_callback(BUYER_ID, "buy_7"), context)
    update = make_message(BUYER_ID, "I need a logo")
    await handle_text(update, context)

    assert texts(update.message.reply_text)[0] == "Please choose how to add your requirements:"
    assert store.get(BUYER_ID).requirements == ()


@pytest.mark.asyncio
async def test_switching_to_a_different_service_is_rejected(db, buyer, service, context, store, make_callback, texts):
    await buy_service(make_callback(BUYER_ID, "buy_7"), context)
    update = make_callback(BUYER_ID, "req_text_8")
    await start_text_requirements(update, context)

    assert "session expired" in texts(update.callback_query.edit_message_text)[0]
    assert isinstance(store.get(BUYER_ID), CollectRequirements)


def test_extract_request_file():
    photo_message = SimpleNamespace(
        document=None, video=None,
        photo=[SimpleNamespace(file_id="small"), SimpleNamespace(file_id="big")]
    )
    photo = extract_request_file(photo_message)
    assert (photo.file_id, photo.kind, photo.file_name) == ("big", "photo", "image.jpg")

    video_message = SimpleNamespace(document=None, photo=[], video=SimpleNamespace(file_id="v1", file_name=None))
    assert extract_request_file(video_message).file_name == "video.mp4"

    assert extract_request_file(SimpleNamespace(document=None, photo=[], video=None)) is None
