from types import SimpleNamespace

import pytest

from conftest import BUYER_ID, SELLER_ID
from database.models import Order, OrderStatus, Review
from handlers.orders import rate_order
from services.exceptions import DuplicateReviewError, InvalidStatusTransition
from services.order_service import OrderService


@pytest.fixture
def accepted_order(db, order):
    orders = OrderService(db)
    orders.update_order_quote(order.id, 12.0, "rush job")
    orders.update_order_status(order.id, OrderStatus.QUOTE_ACCEPTED)
    return order


@pytest.mark.asyncio
async def test_rating_completes_order(db, accepted_order, context, make_callback, texts):
    update = make_callback(BUYER_ID, f"rate_{accepted_order.id}_5")
    await rate_order(update, context)

    db.expire_all()
    assert db.get(Order, accepted_order.id).status == OrderStatus.COMPLETED
    review = db.query(Review).one()
    assert (review.rating, review.buyer_id, review.seller_id) == (5, BUYER_ID, SELLER_ID)

    assert "Thank you for your rating!" in texts(update.callback_query.edit_message_text)[0]
    seller_note = context.bot.send_message.await_args.kwargs
    assert seller_note['chat_id'] == SELLER_ID
    assert "⭐⭐⭐⭐⭐ (5/5)" in seller_note['text']


@pytest.mark.asyncio
async def test_second_rating_is_rejected(db, accepted_order, context, make_callback):
    await rate_order(make_callback(BUYER_ID, f"rate_{accepted_order.id}_4"), context)

    with pytest.raises(DuplicateReviewError):
        await rate_order(make_callback(BUYER_ID, f"rate_{accepted_order.id}_1"), context)

    assert [r.rating for r in db.query(Review).all()] == [4]


@pytest.mark.asyncio
async def test_rating_out_of_range(db, accepted_order, context, make_callback, texts):
    update = make_callback(BUYER_ID, f"rate_{accepted_order.id}_9")
    await rate_order(update, context)

    assert texts(update.callback_query.edit_message_text) == ["❌ Invalid rating."]
    assert db.query(Review).count() == 0


@pytest.mark.asyncio
async def test_rating_before_acceptance_is_rejected(db, order, context, make_callback):
    with pytest.raises(InvalidStatusTransition):
        await rate_order(make_callback(BUYER_ID, f"rate_{order.id}_5"), context)
    assert db.query(Review).count() == 0


@pytest.mark.asyncio
async def test_rating_cancels_pending_prompt(db, accepted_order, context, make_callback):
    pending = SimpleNamespace(schedule_removal=lambda: pending.removed.append(True), removed=[])
    context.job_queue.get_jobs_by_name.return_value = [pending]

    await rate_order(make_callback(BUYER_ID, f"rate_{accepted_order.id}_3"), context)

    assert pending.removed == [True]
