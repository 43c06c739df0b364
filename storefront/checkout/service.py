"""
Cas d'usage 'checkout': orchestre validation, calcul, notifications et registre.

Séquence (arrêt à la première étape en échec):
  1) validation (déjà faite par parse_checkout_request) + rapprochement du total déclaré
  2) calcul des montants et des documents (pricing)
  3) identifiant de transaction
  4) facture envoyée au client
  5) notification envoyée à l'administrateur
  6) ajout au registre
Pas de rollback d'un e-mail déjà parti, pas de retry. Le rapport indique
l'état de chaque étape pour que l'appelant sache ce qui a réellement abouti.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Protocol

from storefront.errors import CheckoutValidationError, DeliveryError, StorageError
from storefront.notifications.mailer import Mailer

from .identifiers import new_transaction_id
from .models import CheckoutRequest, TransactionRecord
from .pricing import PricedOrder, compute_shipping_fee, compute_subtotal, price_order, to_money

logger = logging.getLogger(__name__)

STEP_CUSTOMER_NOTIFICATION = "customer_notification"
STEP_ADMIN_NOTIFICATION = "admin_notification"
STEP_LEDGER = "ledger"
STEPS = (STEP_CUSTOMER_NOTIFICATION, STEP_ADMIN_NOTIFICATION, STEP_LEDGER)

SUCCEEDED = "succeeded"
FAILED = "failed"
SKIPPED = "skipped"


class Ledger(Protocol):
    def append(self, record: TransactionRecord) -> None: ...
    def list_all(self) -> List[TransactionRecord]: ...


@dataclass
class CheckoutReport:
    transaction_id: str
    priced: PricedOrder
    steps: Dict[str, str] = field(default_factory=lambda: {s: SKIPPED for s in STEPS})
    failed_step: Optional[str] = None
    error: Optional[str] = None
    record: Optional[TransactionRecord] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None

    def as_error_payload(self) -> Dict[str, object]:
        return {
            "error": "Failed to process checkout.",
            "transactionId": self.transaction_id,
            "failedStep": self.failed_step,
            "steps": dict(self.steps),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def reconcile_total(request: CheckoutRequest, shipping_fee: Decimal = Decimal("120")) -> None:
    """
    Le total déclaré par le client doit correspondre au sous-total ou au total
    frais de port inclus, calculés côté serveur, au centime près.
    """
    subtotal = compute_subtotal(request.cart)
    grand_total = subtotal + compute_shipping_fee(request.shipping_option, shipping_fee)
    declared = to_money(request.total)
    if declared not in (subtotal, grand_total):
        raise CheckoutValidationError(
            f"Declared total {declared} does not match cart "
            f"(subtotal {subtotal}, total with shipping {grand_total})"
        )


# module storefront.checkout.service
class CheckoutService:
    def __init__(
        self,
        mailer: Mailer,
        ledger: Ledger,
        *,
        admin_email: str,
        shipping_fee: Decimal = Decimal("120"),
        store_name: str = "Horti Couture",
        id_factory: Callable[[], str] = new_transaction_id,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.mailer = mailer
        self.ledger = ledger
        self.admin_email = admin_email
        self.shipping_fee = shipping_fee
        self.store_name = store_name
        self.id_factory = id_factory
        self.clock = clock

    def customer_subject(self) -> str:
        return f"Your Order Confirmation - {self.store_name}"

    def admin_subject(self, transaction_id: str) -> str:
        return f"New Order Received ({transaction_id})"

    def _price(self, request: CheckoutRequest, transaction_id: str) -> PricedOrder:
        return price_order(
            request,
            transaction_id,
            shipping_fee=self.shipping_fee,
            store_name=self.store_name,
        )

    def _make_record(self, request: CheckoutRequest, transaction_id: str, priced: PricedOrder) -> TransactionRecord:
        return TransactionRecord(
            transaction_id=transaction_id,
            email=request.email,
            cart=request.cart,
            subtotal=priced.subtotal,
            shipping_fee=priced.shipping_fee,
            grand_total=priced.grand_total,
            shipping_address=request.shipping_address,
            shipping_option=request.shipping_option,
            payment_method=request.payment_method,
            name=request.name,
            phone=request.phone,
            notes=request.notes,
            created_at=self.clock(),
        )

    def checkout(self, request: CheckoutRequest) -> CheckoutReport:
        """
        Exécute le tunnel pour une requête déjà validée.
        - CheckoutValidationError si le total déclaré ne correspond pas (avant tout effet de bord).
        - Retourne un CheckoutReport; report.ok est False si une étape 4–6 a échoué.
        """
        reconcile_total(request, self.shipping_fee)

        transaction_id = self.id_factory()
        priced = self._price(request, transaction_id)
        record = self._make_record(request, transaction_id, priced)
        report = CheckoutReport(transaction_id=transaction_id, priced=priced, record=record)

        actions = (
            (STEP_CUSTOMER_NOTIFICATION,
             lambda: self.mailer.send(request.email, self.customer_subject(), priced.customer_document)),
            (STEP_ADMIN_NOTIFICATION,
             lambda: self.mailer.send(self.admin_email, self.admin_subject(transaction_id), priced.admin_document)),
            (STEP_LEDGER,
             lambda: self.ledger.append(record)),
        )
        for step, action in actions:
            try:
                action()
            except (DeliveryError, StorageError) as e:
                report.steps[step] = FAILED
                report.failed_step = step
                report.error = e.message
                logger.error(
                    "checkout %s failed at step=%s error=%s steps=%s",
                    transaction_id, step, e.message, report.steps,
                )
                return report
            report.steps[step] = SUCCEEDED

        logger.info(
            "checkout %s completed email=%s grand_total=%s",
            transaction_id, request.email, priced.grand_total,
        )
        return report
