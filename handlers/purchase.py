"""
Purchase flow: pick a service, collect requirements and files, send the request.
"""
from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import (
    CollectRequirements, TypingRequirements, UploadingDocs, RequirementsDraft,
    RequestFile, ServiceSnapshot, get_conversations, per_user
)
from database.db import create_session
from handlers.common import REGISTER_FIRST_TEXT, get_notifier, load_user
from keyboards import get_back_keyboard, get_request_actions_keyboard, get_requirements_keyboard
from services.catalog_service import CatalogService
from services.exceptions import NotFoundError
from services.order_service import OrderService
from utils.constants import NO_REQUIREMENTS_TEXT
from utils.helpers import callback_int, format_price, total_with_commission

logger = logging.getLogger(__name__)

SESSION_EXPIRED_TEXT = "⏰ Request session expired. Please select the service again."


def extract_request_file(message):
    """RequestFile for a document, photo (largest size) or video message, else None"""
    if message.document:
        return RequestFile(message.document.file_id, 'document', message.document.file_name or 'document')
    if message.photo:
        return RequestFile(message.photo[-1].file_id, 'photo', 'image.jpg')
    if message.video:
        return RequestFile(message.video.file_id, 'video', message.video.file_name or 'video.mp4')
    return None


def requirements_summary(state: RequirementsDraft):
    return "\n\n".join(state.requirements)


def _draft_for(context, telegram_id, service_id):
    """The user's requirements draft for this service, if still open"""
    state = get_conversations(context).get(telegram_id)
    if isinstance(state, RequirementsDraft) and state.service_id == service_id:
        return state
    return None


@per_user
async def buy_service(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    telegram_id = update.effective_user.id
    service_id = callback_int(query.data, 'buy_')

    if not load_user(telegram_id):
        await query.answer("Please register first with /start")
        return

    db = create_session()
    try:
        service = CatalogService(db).get_service(service_id)
        if not service:
            await query.answer("Service not found")
            return
        if service.seller_id == telegram_id:
            await query.answer("You cannot request your own service")
            return
        snapshot = ServiceSnapshot(
            service_id=service.id,
            title=service.title,
            seller_id=service.seller_id,
            seller_name=service.seller.name if service.seller else "Seller",
            net_price=service.net_price
        )
    finally:
        db.close()

    await query.answer("Starting request process...")
    get_conversations(context).set(telegram_id, CollectRequirements(service=snapshot))
    await query.edit_message_text(
        f"📋 Service Request: {snapshot.title}\n\n"
        f"👤 Seller: {snapshot.seller_name}\n"
        f"💰 Base Price: {format_price(total_with_commission(snapshot.net_price))}\n\n"
        "📝 Step 1: Share Your Requirements\n\n"
        "Please provide details about what you need:\n"
        "• Project description\n• Specific requirements\n• Files/documents\n• Deadline preferences\n\n"
        "The seller will review and provide a custom quote.",
        reply_markup=get_requirements_keyboard(service_id)
    )


@per_user
async def start_text_requirements(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id

    state = _draft_for(context, telegram_id, callback_int(query.data, 'req_text_'))
    if not state:
        await query.edit_message_text(SESSION_EXPIRED_TEXT, reply_markup=get_back_keyboard())
        return

    get_conversations(context).set(telegram_id, state.switch_to(TypingRequirements))
    await query.edit_message_text(
        "📝 Type your requirements\n\nDescribe what you need in as much detail as you like. "
        "You can send several messages."
    )


@per_user
async def start_document_upload(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id

    state = _draft_for(context, telegram_id, callback_int(query.data, 'req_docs_'))
    if not state:
        await query.edit_message_text(SESSION_EXPIRED_TEXT, reply_markup=get_back_keyboard())
        return

    get_conversations(context).set(telegram_id, state.switch_to(UploadingDocs))
    await query.edit_message_text(
        "📎 Upload your files\n\nSend documents, images or videos one at a time."
    )


async def handle_requirements_text(update: Update, context: ContextTypes.DEFAULT_TYPE, state: TypingRequirements):
    text = update.message.text.strip()
    if not text:
        return

    state = state.with_text(text)
    get_conversations(context).set(update.effective_user.id, state)
    await update.message.reply_text(
        f"✅ Requirements added!\n\n📋 Current Requirements:\n{requirements_summary(state)}\n\n"
        "What would you like to do next?",
        reply_markup=get_requirements_keyboard(state.service_id, last_added='text')
    )


async def handle_requirements_file(update: Update, context: ContextTypes.DEFAULT_TYPE, state: UploadingDocs):
    request_file = extract_request_file(update.message)
    if request_file is None:
        await update.message.reply_text("Please send a document, image or video.")
        return

    state = state.with_file(request_file)
    get_conversations(context).set(update.effective_user.id, state)
    await update.message.reply_text(
        f"✅ File received and saved!\n\n📋 Current Requirements:\n{requirements_summary(state)}\n\n"
        "What would you like to do next?",
        reply_markup=get_requirements_keyboard(state.service_id, last_added='file')
    )


async def handle_requirements_choice(update: Update, context: ContextTypes.DEFAULT_TYPE,
                                     state: CollectRequirements):
    """Input at the decision point: point the user at the buttons"""
    await update.message.reply_text(
        "Please choose how to add your requirements:",
        reply_markup=get_requirements_keyboard(state.service_id)
    )


@per_user
async def send_request(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Persist the order with its files, then forward everything to the seller"""
    query = update.callback_query
    telegram_id = update.effective_user.id
    service_id = callback_int(query.data, 'send_request_')

    state = _draft_for(context, telegram_id, service_id)
    if not state:
        await query.answer()
        await query.edit_message_text(SESSION_EXPIRED_TEXT, reply_markup=get_back_keyboard())
        return

    requirements = requirements_summary(state) or NO_REQUIREMENTS_TEXT

    buyer = load_user(telegram_id)
    if not buyer:
        await query.answer(REGISTER_FIRST_TEXT)
        return

    db = create_session()
    try:
        service = CatalogService(db).get_service(service_id)
        if not service:
            raise NotFoundError(f"Service {service_id} not found")

        order = OrderService(db).create_order(telegram_id, service, requirements, files=state.files)
        order_id = order.id
        seller_id = service.seller_id
        service_title = service.title
        seller_name = service.seller.name if service.seller else "the seller"
    finally:
        db.close()

    get_conversations(context).delete(telegram_id)
    await query.answer("Request sent successfully!")

    notifier = get_notifier(context)
    forwarded = 0
    for request_file in state.files:
        caption = f"📎 File from Order #{order_id}\n👤 Buyer: {buyer.name}\n📄 File: {request_file.file_name}"
        if await notifier.send_file(seller_id, request_file, caption):
            forwarded += 1

    files_text = f"\n\n📎 Attached Files: {forwarded} file(s) forwarded above" if forwarded else ""
    await notifier.notify_user(
        seller_id,
        f"🔔 New Service Request!\n\n"
        f"💼 Service: {service_title}\n"
        f"👤 Buyer: {buyer.name} (@{buyer.username or 'no username'})\n"
        f"📋 Request ID: {order_id}\n\n"
        f"📝 Requirements:\n{requirements}{files_text}\n\n"
        "💡 Next Steps:\n• Review the requirements and files\n• Create a custom quote\n• Or decline if not suitable",
        reply_markup=get_request_actions_keyboard(order_id)
    )

    file_count = len(state.files)
    await query.edit_message_text(
        f"✅ Request Sent!\n\n📋 Your request has been sent to {seller_name}.\n"
        + (f"📎 {file_count} file(s) attached.\n" if file_count else "")
        + "\n⏳ What happens next:\n"
        "1. Seller reviews your requirements and files\n"
        "2. You'll receive a custom quote\n"
        "3. Accept quote and pay\n"
        "4. Receive your completed work\n\n"
        "📱 You'll be notified when the seller responds."
    )
