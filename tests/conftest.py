import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment variables before importing the bot modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TELEGRAM_TOKEN"] = "123456:TEST-TOKEN"
os.environ["ADMIN_ID"] = "999"
os.environ["PAYMENT_LINK"] = "https://pay.example.com/checkout"

from conversation import ConversationStore, STORE_KEY  # noqa: E402
from database.db import Base, SessionLocal, engine  # noqa: E402
import database.models as _models  # noqa: E402,F401
from database.models import Service, UserRole  # noqa: E402
from services.catalog_service import CatalogService  # noqa: E402
from services.order_service import OrderService  # noqa: E402
from services.user_service import UserService  # noqa: E402

SELLER_ID = 1001
BUYER_ID = 2002
OTHER_ID = 3003


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seller(db):
    return UserService(db).create_user(SELLER_ID, "Sam Seller", "samsells", UserRole.SELLER)


@pytest.fixture
def buyer(db):
    return UserService(db).create_user(BUYER_ID, "Bea Buyer", "beabuys", UserRole.BUYER)


@pytest.fixture
def service(db, seller):
    """Service 7 at a net price of $10"""
    svc = Service(
        id=7,
        seller_id=seller.telegram_id,
        title="Logo Design",
        description="A clean vector logo for your brand",
        net_price=10.0,
        delivery_time="24 hours",
        payment_method="PayPal: sam@example.com"
    )
    db.add(svc)
    db.commit()
    return svc


@pytest.fixture
def catalog(db):
    return CatalogService(db)


@pytest.fixture
def context():
    """Handler context with a mocked bot, job queue and a fresh conversation store."""
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.send_document = AsyncMock()
    bot.send_photo = AsyncMock()
    bot.send_video = AsyncMock()

    job_queue = MagicMock()
    job_queue.get_jobs_by_name.return_value = []

    return SimpleNamespace(
        bot=bot,
        bot_data={STORE_KEY: ConversationStore()},
        job_queue=job_queue,
        args=[],
        error=None,
    )


@pytest.fixture
def store(context):
    return context.bot_data[STORE_KEY]


def _user(user_id, username="tester", first_name="Tester"):
    return SimpleNamespace(id=user_id, username=username, first_name=first_name)


@pytest.fixture
def make_message():
    """Build an update carrying a user message (text or file)."""
    def _make(user_id, text=None, document=None, photo=None, video=None, username="tester"):
        message = MagicMock()
        message.text = text
        message.document = document
        message.photo = photo or []
        message.video = video
        message.reply_text = AsyncMock()

        update = MagicMock()
        update.callback_query = None
        update.message = message
        update.effective_message = message
        update.effective_user = _user(user_id, username)
        return update
    return _make


@pytest.fixture
def make_callback():
    """Build an update for an inline button press."""
    def _make(user_id, data, username="tester"):
        query = MagicMock()
        query.data = data
        query.answer = AsyncMock()
        query.edit_message_text = AsyncMock()
        query.message.reply_text = AsyncMock()

        update = MagicMock()
        update.callback_query = query
        update.message = None
        update.effective_message = query.message
        update.effective_user = _user(user_id, username)
        return update
    return _make


def sent_texts(mock):
    """All text arguments an AsyncMock send/reply/edit was awaited with"""
    texts = []
    for call in mock.await_args_list:
        if call.args:
            texts.append(call.args[0])
        elif 'text' in call.kwargs:
            texts.append(call.kwargs['text'])
    return texts


@pytest.fixture
def texts():
    return sent_texts


@pytest.fixture
def order(db, buyer, service):
    """A fresh request from the buyer for service 7"""
    return OrderService(db).create_order(buyer.telegram_id, service, "📝 Blue and white please")
