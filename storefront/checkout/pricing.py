"""
Calcul des montants et rédaction des documents de commande (pur: pas d'I/O).
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from .models import CartLine, CheckoutRequest

CENT = Decimal("0.01")
NONE_SENTINEL = "none"

SHIPPING_LABELS = {
    "pickup": "Store pickup",
    "courier": "Courier delivery",
}
PAYMENT_LABELS = {
    "gateway": "Card payment (online gateway)",
    "offline-transfer": "Offline bank transfer",
}


@dataclass(frozen=True)
class PricedOrder:
    subtotal: Decimal
    shipping_fee: Decimal
    grand_total: Decimal
    customer_document: str
    admin_document: str


# module storefront.checkout.pricing
def to_money(value: Decimal) -> Decimal:
    """Arrondi monétaire au centime (ROUND_HALF_UP)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)

def line_total(line: CartLine) -> Decimal:
    """
    Prix étendu d'une ligne: prix unitaire × quantité, arrondi au centime.
    L'arrondi se fait ici, ligne par ligne, avant la somme du sous-total.
    """
    return to_money(line.price * line.quantity)

def compute_subtotal(cart: List[CartLine]) -> Decimal:
    return sum((line_total(line) for line in cart), Decimal("0.00"))

def compute_shipping_fee(shipping_option: str, fee: Decimal = Decimal("120")) -> Decimal:
    return to_money(fee) if shipping_option == "courier" else Decimal("0.00")

def _option_label(value: Optional[Union[bool, str]], label: str) -> Optional[str]:
    if value is None or value is False:
        return None
    if value is True:
        return label
    text = str(value).strip()
    if not text or text.lower() == NONE_SENTINEL:
        return None
    return f"{label}: {text}"

def describe_line(line: CartLine, currency: str = "R") -> str:
    """
    Rend une ligne du panier:
    - "- <qté> x <titre> (options)" puis couleur (N/A si absente), taille si présente, prix étendu.
    - Les options line art / socle sont ignorées si absentes ou égales à "none".
    """
    extras = [
        e for e in (
            _option_label(line.line_art, "Line Art"),
            _option_label(line.stand, "Wooden Stand"),
        ) if e
    ]
    head = f"- {line.quantity} x {line.title}"
    if extras:
        head += f" ({', '.join(extras)})"
    rows = [head, f"    Color: {line.color or 'N/A'}"]
    if line.size:
        rows.append(f"    Size: {line.size}")
    rows.append(f"    Price: {currency}{line_total(line):.2f}")
    return "\n".join(rows)

def _shipping_summary(option: str, fee: Decimal, currency: str) -> str:
    label = SHIPPING_LABELS.get(option, option)
    return f"{label} (+{currency}{fee:.2f})" if fee > 0 else label

def price_order(
    request: CheckoutRequest,
    transaction_id: str,
    *,
    shipping_fee: Decimal = Decimal("120"),
    store_name: str = "Horti Couture",
    currency: str = "R",
) -> PricedOrder:
    """
    Calcule sous-total, frais de port et total, puis rédige les deux documents.
    - subtotal = somme des prix étendus arrondis par ligne
    - frais = shipping_fee si "courier", sinon 0
    - grand_total = subtotal + frais
    Les deux documents partagent lignes et bloc de totaux; la version admin
    ajoute l'e-mail du client.
    """
    subtotal = compute_subtotal(request.cart)
    fee = compute_shipping_fee(request.shipping_option, shipping_fee)
    grand_total = subtotal + fee

    items = "\n".join(describe_line(line, currency) for line in request.cart)
    details = [
        f"Shipping Method: {_shipping_summary(request.shipping_option, fee, currency)}",
        f"Payment Method: {PAYMENT_LABELS.get(request.payment_method, request.payment_method)}",
        f"Shipping Address: {request.shipping_address}",
    ]
    if request.phone:
        details.append(f"Contact: {request.phone}")
    if request.notes:
        details.append(f"Notes: {request.notes}")
    totals = "\n".join([
        f"Subtotal: {currency}{subtotal:.2f}",
        f"Shipping: {currency}{fee:.2f}",
        f"Total: {currency}{grand_total:.2f}",
        f"Transaction ID: {transaction_id}",
    ])

    customer_document = "\n\n".join([
        f"Hello {request.name or 'there'},",
        "Thank you for your order! Here is your order summary:",
        items,
        "\n".join(details),
        totals,
        f"Best regards,\n{store_name} Team",
    ])
    admin_document = "\n\n".join([
        f"New order {transaction_id} received.",
        "\n".join([f"Customer: {request.name or 'N/A'}", f"Customer Email: {request.email}"]),
        items,
        "\n".join(details),
        totals,
    ])
    return PricedOrder(
        subtotal=subtotal,
        shipping_fee=fee,
        grand_total=grand_total,
        customer_document=customer_document,
        admin_document=admin_document,
    )
