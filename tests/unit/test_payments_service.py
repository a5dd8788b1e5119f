import pytest
from types import SimpleNamespace

from checkout_api.payments import (
    MissingSessionId,
    NoItems,
    ProviderError,
    ServerError,
    SessionNotFound,
    build_session_params,
    create_checkout_session,
    get_order_details,
)

CART = {"items": [{"name": "Hoodie", "price": 49.99, "qty": 2}]}


def test_build_session_params_uses_server_redirects(settings):
    params = build_session_params(
        {**CART, "success_url": "https://evil.example/steal", "cancel_url": "https://evil.example"},
        settings,
    )
    assert params["mode"] == "payment"
    assert params["payment_method_types"] == ["card"]
    assert params["success_url"] == "https://shop.example.com/success/?session_id={CHECKOUT_SESSION_ID}"
    assert params["cancel_url"] == "https://shop.example.com/cart/"
    assert params["allow_promotion_codes"] is True
    assert params["billing_address_collection"] == "auto"
    assert params["phone_number_collection"] == {"enabled": False}
    assert params["metadata"] == {"site": "shop.example.com", "env": "test"}
    assert "automatic_tax" not in params


def test_build_session_params_optional_flags(settings):
    custom = settings.model_copy(update={
        "automatic_tax": True,
        "collect_phone_number": True,
        "billing_address_collection": "required",
        "success_path": "/thanks?src=checkout",
    })
    params = build_session_params(CART, custom)
    assert params["automatic_tax"] == {"enabled": True}
    assert params["phone_number_collection"] == {"enabled": True}
    assert params["billing_address_collection"] == "required"
    assert params["success_url"] == "https://shop.example.com/thanks?src=checkout&session_id={CHECKOUT_SESSION_ID}"


def test_create_checkout_session_returns_id_and_url(settings, fake_checkout):
    created = create_checkout_session(CART, settings=settings, client=fake_checkout)
    assert created.id == "cs_test_1"
    assert created.url.startswith("https://checkout.stripe.com/")
    assert len(fake_checkout.created) == 1
    assert fake_checkout.created[0]["line_items"][0]["price_data"]["unit_amount"] == 4999


def test_create_checkout_session_validation_before_provider(settings, fake_checkout):
    with pytest.raises(NoItems):
        create_checkout_session({"items": []}, settings=settings, client=fake_checkout)
    assert fake_checkout.calls == 0


def test_create_checkout_session_unexpected_error_is_generic(settings, fake_checkout):
    fake_checkout.error = RuntimeError("secret detail sk_live_123")
    with pytest.raises(ServerError) as exc:
        create_checkout_session(CART, settings=settings, client=fake_checkout)
    assert exc.value.status_code == 500
    assert exc.value.detail == "Server error"


def test_create_checkout_session_provider_error_propagates(settings, fake_checkout):
    fake_checkout.error = ProviderError()
    with pytest.raises(ProviderError):
        create_checkout_session(CART, settings=settings, client=fake_checkout)


def test_create_checkout_session_without_url_is_provider_error(settings):
    class NoUrlClient:
        def create_session(self, params):
            return SimpleNamespace(id="cs_test_x", url=None)

    with pytest.raises(ProviderError):
        create_checkout_session(CART, settings=settings, client=NoUrlClient())


@pytest.mark.parametrize("session_id", [None, "", "   "])
def test_get_order_details_requires_session_id(fake_checkout, session_id):
    with pytest.raises(MissingSessionId) as exc:
        get_order_details(session_id, client=fake_checkout)
    assert exc.value.status_code == 400
    assert fake_checkout.calls == 0


def test_get_order_details_summarizes(fake_checkout):
    fake_checkout.sessions["cs_1"] = SimpleNamespace(
        id="cs_1", currency="usd", amount_total=2000, payment_status="paid",
        customer_details=None, customer_email="a@example.com",
    )
    fake_checkout.line_items["cs_1"] = [{"description": "Cap", "quantity": 2, "price": {"unit_amount": 1000}}]
    summary = get_order_details("cs_1", client=fake_checkout)
    assert summary.customer_email == "a@example.com"
    assert summary.line_items[0].currency == "usd"
    assert fake_checkout.retrieved == ["cs_1"]
    assert fake_checkout.listed == ["cs_1"]


def test_get_order_details_not_found_propagates(fake_checkout):
    fake_checkout.error = SessionNotFound()
    with pytest.raises(SessionNotFound):
        get_order_details("cs_missing", client=fake_checkout)


def test_get_order_details_unexpected_error_is_generic(fake_checkout):
    # KeyError: session inconnue du fake
    with pytest.raises(ServerError):
        get_order_details("cs_unknown", client=fake_checkout)
