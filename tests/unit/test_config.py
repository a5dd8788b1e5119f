import pytest

from checkout_api.config import ConfigError, settings_from_env, _clean_env


def test_clean_env_strips_quotes_and_backticks():
    assert _clean_env(' "sk_test_1" ') == "sk_test_1"
    assert _clean_env("`x`") == "x"
    assert _clean_env(None) == ""


def test_defaults():
    s = settings_from_env({"PROVIDER_SECRET_KEY": "sk_test_1"})
    assert s.site_base_url == "https://www.squarebidness.com"
    assert s.allowed_origin == "https://www.squarebidness.com"
    assert s.listen_port == 4242
    assert s.deployment_env is None
    assert s.site_name == "squarebidness.com"
    assert s.on_invalid_item == "drop"
    assert s.allow_promotion_codes is True
    assert s.billing_address_collection == "auto"
    assert s.collect_phone_number is False
    assert s.automatic_tax is False
    assert s.success_url == "https://www.squarebidness.com/success/?session_id={CHECKOUT_SESSION_ID}"
    assert s.cancel_url == "https://www.squarebidness.com/cart/"


def test_aliases_and_overrides():
    s = settings_from_env({
        "STRIPE_SECRET_KEY": "'sk_test_2'",
        "SITE_URL": "https://shop.example.com/",
        "ALLOW_ORIGIN": "https://app.example.com",
        "PORT": "8080",
        "VERCEL_ENV": "preview",
        "ON_INVALID_ITEM": "REJECT",
        "AUTOMATIC_TAX": "true",
        "PROVIDER_TIMEOUT": "15",
    })
    assert s.provider_secret_key.get_secret_value() == "sk_test_2"
    assert s.site_base_url == "https://shop.example.com"
    assert s.allowed_origin == "https://app.example.com"
    assert s.listen_port == 8080
    assert s.deployment_env == "preview"
    assert s.on_invalid_item == "reject"
    assert s.automatic_tax is True
    assert s.provider_timeout == 15.0


def test_missing_secret_raises():
    with pytest.raises(ConfigError):
        settings_from_env({"SITE_BASE_URL": "https://shop.example.com"})


def test_invalid_policy_raises():
    with pytest.raises(ConfigError) as exc:
        settings_from_env({"PROVIDER_SECRET_KEY": "sk_test_1", "ON_INVALID_ITEM": "maybe"})
    assert "on_invalid_item" in str(exc.value)


def test_secret_never_in_repr():
    s = settings_from_env({"PROVIDER_SECRET_KEY": "sk_live_supersecret"})
    assert "sk_live_supersecret" not in repr(s)
    assert "sk_live_supersecret" not in str(s.model_dump())


@pytest.mark.parametrize(
    "name, value, field",
    [
        ("PROVIDER_TIMEOUT", "0", "provider_timeout"),
        ("CHECKOUT_RATE_LIMIT", "0", "checkout_rate_limit"),
        ("CHECKOUT_RATE_WINDOW", "-5", "checkout_rate_window"),
    ],
)
def test_non_positive_limits_raise(name, value, field):
    with pytest.raises(ConfigError) as exc:
        settings_from_env({"PROVIDER_SECRET_KEY": "sk_test_1", name: value})
    assert field in str(exc.value)
