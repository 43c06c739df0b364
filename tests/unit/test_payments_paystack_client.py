import json
from decimal import Decimal

import httpx
import pytest

from storefront.errors import GatewayError
from storefront.payments.paystack_client import PaystackClient, to_minor_units


def _client(settings, handler) -> PaystackClient:
    return PaystackClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "amount, minor",
    [(Decimal("250"), 25000), (Decimal("19.99"), 1999), (Decimal("0.005"), 1), (Decimal("12.344"), 1234)],
)
def test_to_minor_units(amount, minor):
    assert to_minor_units(amount) == minor


@pytest.mark.parametrize("amount", [Decimal("1e30"), Decimal("Infinity"), Decimal("NaN")])
def test_to_minor_units_rejects_unrepresentable_amounts(amount):
    with pytest.raises(GatewayError) as exc:
        to_minor_units(amount)
    assert exc.value.message.startswith("Invalid payment amount")


def test_initialize_sends_minor_units_currency_and_bearer(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "status": True,
            "message": "Authorization URL created",
            "data": {"authorization_url": "https://checkout.paystack.test/abc", "access_code": "abc", "reference": "ref_1"},
        })

    session = _client(settings, handler).initialize("a@b.com", Decimal("250"))

    assert seen["url"] == "https://api.paystack.test/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["body"] == {"email": "a@b.com", "amount": 25000, "currency": "ZAR"}
    assert session.reference == "ref_1"
    assert session.access_code == "abc"
    assert session.authorization_url == "https://checkout.paystack.test/abc"
    assert session.raw["message"] == "Authorization URL created"


def test_initialize_surfaces_gateway_message(settings):
    def handler(request):
        return httpx.Response(401, json={"status": False, "message": "Invalid key"})

    with pytest.raises(GatewayError) as exc:
        _client(settings, handler).initialize("a@b.com", Decimal("10"))
    assert exc.value.message == "Invalid key"


def test_initialize_generic_message_without_json(settings):
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(GatewayError) as exc:
        _client(settings, handler).initialize("a@b.com", Decimal("10"))
    assert exc.value.message == "Payment initialization failed."


def test_network_failure_is_gateway_error(settings):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(GatewayError) as exc:
        _client(settings, handler).verify("ref_1")
    assert exc.value.message == "Payment gateway unreachable"


def test_verify_returns_raw_payload_unmodified(settings):
    payload = {"status": True, "message": "Verification successful",
               "data": {"status": "abandoned", "reference": "ref/1", "amount": 25000, "gateway_response": "The transaction was not completed"}}
    seen = {}

    def handler(request):
        seen["path"] = request.url.raw_path.decode()
        return httpx.Response(200, json=payload)

    assert _client(settings, handler).verify("ref/1") == payload
    assert seen["path"] == "/transaction/verify/ref%2F1"


def test_missing_secret_key_fails_before_any_call(settings):
    from dataclasses import replace
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(GatewayError):
        _client(replace(settings, paystack_secret_key=""), handler).verify("ref_1")
    assert calls == []
