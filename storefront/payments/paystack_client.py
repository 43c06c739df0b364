"""
Adaptateur Paystack: centralise les appels et la configuration de la passerelle.
- initialize: ouvre une transaction (montant converti en unité mineure, devise fixe).
- verify: interroge l'état d'une transaction et renvoie la réponse brute.
Une seule tentative par appel, pas de cache local de l'état passerelle.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from storefront.config import Settings
from storefront.errors import GatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewaySession:
    reference: str
    access_code: Optional[str]
    authorization_url: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)


def to_minor_units(amount: Decimal) -> int:
    """Montant en unité majeure -> unité mineure de la passerelle (×100, arrondi au plus proche)."""
    try:
        return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError) as e:
        raise GatewayError(f"Invalid payment amount: {amount}") from e


# module storefront.payments.paystack_client
class PaystackClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        self.secret_key = settings.paystack_secret_key
        self.currency = settings.gateway_currency
        self._client = httpx.Client(
            base_url=settings.paystack_base_url,
            headers={"Authorization": f"Bearer {self.secret_key}"},
            timeout=settings.outbound_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, *, fallback: str, **kwargs) -> Dict[str, Any]:
        if not self.secret_key:
            raise GatewayError("Payment gateway is not configured (PAYSTACK_SECRET_KEY missing)")
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("paystack %s %s transport error: %s", method, url, e)
            raise GatewayError("Payment gateway unreachable") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error("paystack %s %s status=%s message=%s", method, url, response.status_code, message)
            raise GatewayError(message or fallback)
        if not isinstance(data, dict):
            logger.error("paystack %s %s invalid JSON body", method, url)
            raise GatewayError(fallback)
        return data

    def initialize(self, email: str, amount: Decimal) -> GatewaySession:
        """
        Ouvre une transaction pour (email, montant en unité majeure).
        - amount est converti en unité mineure (×100), devise Settings.gateway_currency.
        - Retour: GatewaySession (reference, access_code, authorization_url, raw).
        - Erreurs: GatewayError avec le message de la passerelle si disponible.
        """
        payload = {"email": email, "amount": to_minor_units(amount), "currency": self.currency}
        data = self._request(
            "POST", "/transaction/initialize", json=payload, fallback="Payment initialization failed."
        )
        body = data.get("data") or {}
        logger.info("paystack.initialize ok reference=%s", body.get("reference"))
        return GatewaySession(
            reference=body.get("reference") or "",
            access_code=body.get("access_code"),
            authorization_url=body.get("authorization_url"),
            raw=data,
        )

    def verify(self, reference: str) -> Dict[str, Any]:
        """
        Vérifie une transaction par sa référence.
        - Retour: corps JSON de la passerelle, non modifié (statut success/failed/abandoned, métadonnées).
        """
        data = self._request(
            "GET", f"/transaction/verify/{quote(reference, safe='')}", fallback="Verification failed."
        )
        logger.info("paystack.verify reference=%s status=%s", reference, (data.get("data") or {}).get("status"))
        return data
