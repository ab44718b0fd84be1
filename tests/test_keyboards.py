from types import SimpleNamespace

from database.models import UserRole
from keyboards import (
    get_back_keyboard, get_help_keyboard, get_main_menu_keyboard, get_my_orders_keyboard,
    get_payment_keyboard, get_promotion_keyboard, get_rating_keyboard,
    get_requirements_keyboard, get_services_keyboard
)


def _callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_main_menu_for_both_roles():
    callbacks = _callbacks(get_main_menu_keyboard(UserRole.BOTH))

    assert callbacks == [
        "menu_browse", "menu_search", "menu_my_orders",
        "menu_my_services", "menu_add_service", "menu_sales", "menu_promote",
        "menu_top_sellers", "menu_profile", "menu_about", "menu_help",
    ]


def test_main_menu_accepts_raw_role():
    assert "menu_sales" in _callbacks(get_main_menu_keyboard("Seller"))
    assert "menu_sales" not in _callbacks(get_main_menu_keyboard("Buyer"))


def test_back_keyboard_extra_rows():
    markup = get_back_keyboard(("🔍 Browse Services", "menu_browse"))
    assert _callbacks(markup) == ["menu_browse", "back_to_menu"]
    assert _callbacks(get_back_keyboard()) == ["back_to_menu"]


def test_help_keyboard_links_support():
    first = get_help_keyboard().inline_keyboard[0][0]
    assert first.url.startswith("https://t.me/")


def test_requirements_keyboard_labels_follow_last_action():
    after_file = get_requirements_keyboard(7, last_added='file')
    labels = [row[0].text for row in after_file.inline_keyboard]
    assert labels == ["📎 Add More Files", "✅ Send Request", "📝 Add Text Requirements"]
    assert _callbacks(after_file) == ["req_docs_7", "send_request_7", "req_text_7"]


def test_services_keyboard_numbers_buttons():
    listings = [SimpleNamespace(service=SimpleNamespace(id=7)), SimpleNamespace(service=SimpleNamespace(id=3))]
    markup = get_services_keyboard(listings)

    assert [row[0].text for row in markup.inline_keyboard[:2]] == ["🛒 Buy #1", "🛒 Buy #2"]
    assert _callbacks(markup) == ["buy_7", "buy_3", "back_to_menu"]


def test_promotion_keyboard():
    services = [SimpleNamespace(id=4, title="Essay Edit")]
    assert _callbacks(get_promotion_keyboard(services)) == ["promote_service_4", "back_to_menu"]


def test_rating_and_payment_keyboards():
    rating = get_rating_keyboard(9)
    assert len(rating.inline_keyboard[0]) == 5
    assert rating.inline_keyboard[0][4].callback_data == "rate_9_5"

    payment = get_payment_keyboard("https://pay.example.com/checkout?amount=13.80&ref=X")
    assert payment.inline_keyboard[0][0].url.endswith("ref=X")


def test_my_orders_keyboard():
    assert _callbacks(get_my_orders_keyboard([3, 5])) == ["cancel_order_3", "cancel_order_5", "back_to_menu"]
