from decimal import Decimal

import pytest

from storefront.checkout.models import parse_checkout_request
from storefront.errors import CheckoutValidationError


def test_parse_accepts_legacy_shipping_method_key(checkout_payload):
    payload = dict(checkout_payload)
    payload.pop("shippingOption")
    payload["shippingMethod"] = "Pickup"
    req = parse_checkout_request(payload)
    assert req.shipping_option == "pickup"
    assert req.cart[0].price == Decimal("50")


def test_missing_shipping_address_rejected(checkout_payload):
    payload = dict(checkout_payload)
    payload.pop("shippingAddress")
    with pytest.raises(CheckoutValidationError) as exc:
        parse_checkout_request(payload)
    assert exc.value.status_code == 400
    assert "shippingAddress" in exc.value.message


@pytest.mark.parametrize(
    "field, value",
    [
        ("cart", []),
        ("total", 0),
        ("email", ""),
        ("shippingAddress", "   "),
        ("shippingOption", "drone"),
        ("paymentMethod", "cash"),
    ],
)
def test_invalid_fields_rejected(checkout_payload, field, value):
    payload = dict(checkout_payload, **{field: value})
    with pytest.raises(CheckoutValidationError):
        parse_checkout_request(payload)


def test_negative_price_and_zero_quantity_rejected(checkout_payload):
    bad_price = dict(checkout_payload, cart=[{"title": "Vase", "quantity": 1, "price": -1}])
    bad_qty = dict(checkout_payload, cart=[{"title": "Vase", "quantity": 0, "price": 10}])
    for payload in (bad_price, bad_qty):
        with pytest.raises(CheckoutValidationError) as exc:
            parse_checkout_request(payload)
        assert "cart.0" in exc.value.message


def test_body_must_be_object():
    with pytest.raises(CheckoutValidationError):
        parse_checkout_request(["not", "an", "object"])


@pytest.mark.parametrize(
    "line",
    [
        {"title": "Vase", "quantity": 1, "price": "1e30"},
        {"title": "Vase", "quantity": 1, "price": "Infinity"},
        {"title": "Vase", "quantity": 10001, "price": 10},
    ],
)
def test_out_of_range_cart_line_rejected(checkout_payload, line):
    with pytest.raises(CheckoutValidationError) as exc:
        parse_checkout_request(dict(checkout_payload, cart=[line]))
    assert "cart.0" in exc.value.message


def test_huge_declared_total_rejected(checkout_payload):
    with pytest.raises(CheckoutValidationError) as exc:
        parse_checkout_request(dict(checkout_payload, total="1e30"))
    assert "total" in exc.value.message


def test_largest_accepted_amounts_still_price_exactly(checkout_payload):
    from storefront.checkout.models import MAX_QUANTITY, MAX_UNIT_PRICE
    from storefront.checkout.pricing import compute_subtotal

    line = {"title": "Vase", "quantity": MAX_QUANTITY, "price": str(MAX_UNIT_PRICE)}
    req = parse_checkout_request(dict(checkout_payload, cart=[line, line], total="1"))
    assert compute_subtotal(req.cart) == Decimal("20000000000000.00")
