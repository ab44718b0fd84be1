"""
Deferred and recurring jobs on the python-telegram-bot JobQueue.

One-shot jobs are named after the order or service they belong to so that a
later transition can find and cancel them. Callbacks always re-read the
database: the world may have changed since the job was scheduled.
"""
import logging

from config import (
    RATING_PROMPT_DELAY, PROMOTION_ACTIVATION_DELAY,
    PROMOTION_SWEEP_INTERVAL, SESSION_SWEEP_INTERVAL
)
from conversation import get_conversations
from database.db import create_session
from database.models import OrderStatus
from keyboards import get_rating_keyboard, get_back_keyboard
from services.catalog_service import CatalogService
from services.notify_service import NotificationService
from services.order_service import OrderService
from utils.helpers import format_date

logger = logging.getLogger(__name__)


def rating_job_name(order_id):
    return f"rating_prompt_{order_id}"


def promotion_job_name(service_id):
    return f"promotion_{service_id}"


# ========== JOB CALLBACKS ==========
async def rating_prompt_job(context):
    """Ask the buyer to rate an accepted order, unless it moved on meanwhile"""
    order_id = context.job.data['order_id']

    db = create_session()
    try:
        order = OrderService(db).get_order(order_id)
        if not order or order.status != OrderStatus.QUOTE_ACCEPTED:
            logger.info(f"⏭️ Skipping rating prompt for order {order_id}")
            return
        buyer_id = order.buyer_id
        title = order.service.title if order.service else f"Order #{order_id}"
    finally:
        db.close()

    await NotificationService(context.bot).notify_user(
        buyer_id,
        f"⭐ How was your experience?\n\n📦 {title}\n\nPlease rate the seller:",
        reply_markup=get_rating_keyboard(order_id)
    )


async def activate_promotion_job(context):
    service_id = context.job.data['service_id']
    seller_id = context.job.data['seller_id']

    db = create_session()
    try:
        service = CatalogService(db).promote_service(service_id)
        title = service.title
        expires = service.promotion_expires
    finally:
        db.close()

    await NotificationService(context.bot).notify_user(
        seller_id,
        f"🌟 Promotion Activated!\n\n\"{title}\" is now promoted until {format_date(expires)}.",
        reply_markup=get_back_keyboard()
    )


async def expire_promotions_job(context):
    db = create_session()
    try:
        CatalogService(db).expire_promotions()
    finally:
        db.close()


async def sweep_sessions_job(context):
    get_conversations(context).sweep_expired()


# ========== SCHEDULING ==========
def schedule_rating_prompt(job_queue, order_id, delay=RATING_PROMPT_DELAY):
    cancel_jobs(job_queue, rating_job_name(order_id))
    job_queue.run_once(
        rating_prompt_job, delay,
        data={'order_id': order_id},
        name=rating_job_name(order_id)
    )
    logger.info(f"⏰ Rating prompt for order {order_id} in {delay}s")


def schedule_promotion_activation(job_queue, service_id, seller_id, delay=PROMOTION_ACTIVATION_DELAY):
    cancel_jobs(job_queue, promotion_job_name(service_id))
    job_queue.run_once(
        activate_promotion_job, delay,
        data={'service_id': service_id, 'seller_id': seller_id},
        name=promotion_job_name(service_id)
    )
    logger.info(f"⏰ Promotion activation for service {service_id} in {delay}s")


def cancel_jobs(job_queue, name):
    """Remove every pending job with the given name, returning how many"""
    jobs = job_queue.get_jobs_by_name(name)
    for job in jobs:
        job.schedule_removal()
    if jobs:
        logger.info(f"🗑️ Cancelled {len(jobs)} job(s) named {name}")
    return len(jobs)


def cancel_order_jobs(job_queue, order_id):
    return cancel_jobs(job_queue, rating_job_name(order_id))


def register_recurring_jobs(job_queue):
    job_queue.run_repeating(
        expire_promotions_job, interval=PROMOTION_SWEEP_INTERVAL, first=PROMOTION_SWEEP_INTERVAL,
        name='expire_promotions'
    )
    job_queue.run_repeating(
        sweep_sessions_job, interval=SESSION_SWEEP_INTERVAL, first=SESSION_SWEEP_INTERVAL,
        name='sweep_sessions'
    )
    logger.info("✅ Recurring jobs registered")
