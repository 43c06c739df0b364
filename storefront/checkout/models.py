# module storefront.checkout.models
"""Modèles (pydantic) du tunnel de commande.
- CartLine / CheckoutRequest: entrée client, immuables une fois reçues.
- TransactionRecord: ligne du registre, créée une seule fois par commande.
- Format JSON en camelCase (compatible avec le front existant).
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from storefront.errors import CheckoutValidationError

ShippingOption = Literal["pickup", "courier"]
PaymentMethod = Literal["gateway", "offline-transfer"]

# Bornes de saisie: les montants restent loin de la précision du contexte Decimal (28 chiffres)
MAX_UNIT_PRICE = Decimal("1000000000")
MAX_QUANTITY = 10000
MAX_DECLARED_TOTAL = Decimal("1000000000000000")


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CartLine(_FrozenModel):
    title: str = Field(min_length=1)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    color: Optional[str] = None
    size: Optional[str] = None
    line_art: Optional[Union[bool, str]] = None
    stand: Optional[Union[bool, str]] = None


class CheckoutRequest(_FrozenModel):
    email: EmailStr
    cart: List[CartLine] = Field(min_length=1)
    total: Decimal = Field(gt=0, le=MAX_DECLARED_TOTAL)
    shipping_address: str = Field(min_length=1)
    shipping_option: ShippingOption = Field(
        validation_alias=AliasChoices("shippingOption", "shippingMethod", "shipping_option"),
    )
    payment_method: PaymentMethod
    name: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("shipping_option", "payment_method", mode="before")
    @classmethod
    def _normalize_choice(cls, v: Any) -> Any:
        # Tolère "Courier" / " PICKUP " venant des formulaires
        return v.strip().lower() if isinstance(v, str) else v


class TransactionRecord(_FrozenModel):
    transaction_id: str
    email: str
    cart: List[CartLine]
    subtotal: Decimal
    shipping_fee: Decimal
    grand_total: Decimal
    shipping_address: str
    shipping_option: ShippingOption
    payment_method: PaymentMethod
    name: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def _describe_error(err: Dict[str, Any]) -> str:
    loc = ".".join(str(p) for p in err.get("loc") or ()) or "body"
    return f"{loc}: {err.get('msg')}"


def parse_checkout_request(payload: Any) -> CheckoutRequest:
    """
    Construit un CheckoutRequest depuis le body JSON.
    - Rejet global (CheckoutValidationError, 400) si un champ requis manque ou est invalide.
    - Le message liste les champs fautifs pour faciliter le debug côté front.
    """
    if not isinstance(payload, dict):
        raise CheckoutValidationError("Invalid checkout request: body must be a JSON object.")
    try:
        return CheckoutRequest.model_validate(payload)
    except ValidationError as e:
        details = "; ".join(_describe_error(err) for err in e.errors())
        raise CheckoutValidationError(f"Invalid checkout request: {details}") from e
