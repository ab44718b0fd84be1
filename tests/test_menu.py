import pytest

from conftest import BUYER_ID, OTHER_ID, SELLER_ID
from handlers.commands import stats_command
from handlers.menu import (
    back_to_menu, help_command, show_about, show_help, show_my_orders, show_my_services,
    show_profile, show_sales_dashboard, show_top_sellers
)
from handlers.seller import promote_service, show_promotion_options
from services.order_service import OrderService
from services.scheduler import promotion_job_name


def _callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


@pytest.mark.asyncio
async def test_back_to_menu_requires_registration(db, context, make_callback, texts):
    update = make_callback(OTHER_ID, "back_to_menu")
    await back_to_menu(update, context)

    assert "register first" in texts(update.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_profile(db, seller, context, make_message, texts):
    update = make_message(SELLER_ID, "/profile")
    await show_profile(update, context)

    profile = texts(update.message.reply_text)[0]
    assert "Name: Sam Seller" in profile
    assert "Username: @samsells" in profile
    assert "Role: Seller" in profile


@pytest.mark.asyncio
async def test_help_lists_commands(context, make_message, texts):
    update = make_message(BUYER_ID, "/help")
    await help_command(update, context)

    text = texts(update.message.reply_text)[0]
    assert "/addservice" in text
    assert "Sellers receive their net price; buyers pay +15%" in text
    assert "85%" not in text


@pytest.mark.asyncio
async def test_help_and_about_describe_net_payout(context, make_callback, texts):
    help_update = make_callback(SELLER_ID, "menu_help")
    await show_help(help_update, context)
    about_update = make_callback(SELLER_ID, "menu_about")
    await show_about(about_update, context)

    assert "seller gets the full net price" in texts(help_update.callback_query.edit_message_text)[0]
    assert "buyers pay a small 15% service fee on top" in texts(about_update.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_my_orders_offers_cancel_for_open_orders(db, order, context, make_callback, texts):
    update = make_callback(BUYER_ID, "menu_my_orders")
    await show_my_orders(update, context)

    listing = texts(update.callback_query.edit_message_text)[0]
    assert f"Order #{order.id} • Logo Design" in listing
    assert "$11.50" in listing
    markup = update.callback_query.edit_message_text.await_args.kwargs['reply_markup']
    assert _callbacks(markup) == [f"cancel_order_{order.id}", "back_to_menu"]


@pytest.mark.asyncio
async def test_my_orders_shows_quoted_total(db, order, context, make_callback, texts):
    OrderService(db).update_order_quote(order.id, 12.0, "rush job")

    update = make_callback(BUYER_ID, "menu_my_orders")
    await show_my_orders(update, context)

    assert "$13.80" in texts(update.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_my_services(db, service, context, make_message, texts):
    update = make_message(SELLER_ID, "/myservices")
    await show_my_services(update, context)

    assert "1. Logo Design" in texts(update.message.reply_text)[0]


@pytest.mark.asyncio
async def test_sales_dashboard_for_sellers_only(db, buyer, service, order, context, make_callback, texts):
    refused = make_callback(BUYER_ID, "menu_sales")
    await show_sales_dashboard(refused, context)
    assert "sellers only" in texts(refused.callback_query.edit_message_text)[0]

    update = make_callback(SELLER_ID, "menu_sales")
    await show_sales_dashboard(update, context)
    dashboard = texts(update.callback_query.edit_message_text)[0]
    assert "Total Orders: 1" in dashboard
    assert "Pending: 1" in dashboard
    assert "Average Rating: No ratings yet" in dashboard


@pytest.mark.asyncio
async def test_top_sellers(db, service, context, make_callback, texts):
    update = make_callback(BUYER_ID, "menu_top_sellers")
    await show_top_sellers(update, context)

    assert "🥇 Sam Seller" in texts(update.callback_query.edit_message_text)[0]


@pytest.mark.asyncio
async def test_promotion_flow(db, service, context, make_callback, texts):
    options = make_callback(SELLER_ID, "menu_promote")
    await show_promotion_options(options, context)
    markup = options.callback_query.edit_message_text.await_args.kwargs['reply_markup']
    assert _callbacks(markup)[0] == "promote_service_7"

    update = make_callback(SELLER_ID, "promote_service_7")
    await promote_service(update, context)

    message = texts(update.callback_query.edit_message_text)[0]
    assert 'Promote "Logo Design"' in message
    assert "Reference: PROMO_" in message
    pay_url = update.callback_query.edit_message_text.await_args.kwargs['reply_markup'].inline_keyboard[0][0].url
    assert "amount=1.99" in pay_url

    admin_note = context.bot.send_message.await_args.kwargs
    assert admin_note['chat_id'] == 999
    assert context.job_queue.run_once.call_args.kwargs['name'] == promotion_job_name(7)


@pytest.mark.asyncio
async def test_promote_someone_elses_service(db, service, buyer, context, make_callback, texts):
    update = make_callback(BUYER_ID, "promote_service_7")
    await promote_service(update, context)

    assert texts(update.callback_query.edit_message_text) == ["❌ Service not found."]
    context.job_queue.run_once.assert_not_called()


@pytest.mark.asyncio
async def test_stats_admin_only(db, seller, buyer, context, make_message, texts):
    refused = make_message(BUYER_ID, "/stats")
    await stats_command(refused, context)
    assert texts(refused.message.reply_text) == ["❌ Admin access required"]

    update = make_message(999, "/stats")
    await stats_command(update, context)
    stats = texts(update.message.reply_text)[0]
    assert "Users: 2" in stats
    assert "Active Sellers: 1" in stats
