"""
Factory d'application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional

from fastapi import FastAPI

from storefront.checkout.service import CheckoutService
from storefront.config import Settings
from storefront.ledger.repository import TransactionLedger
from storefront.notifications.mailer import Mailer, SmtpMailer
from storefront.payments.paystack_client import PaystackClient

from .exceptions import register_exception_handlers
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware
from .routers import register_routers

def create_app(
    settings: Optional[Settings] = None,
    *,
    mailer: Optional[Mailer] = None,
    ledger: Optional[TransactionLedger] = None,
    gateway: Optional[PaystackClient] = None,
) -> FastAPI:
    """
    Construit l'app FastAPI:
      1) Settings lu une seule fois (ou fourni par l'appelant, ex: tests)
      2) composants partagés dans app.state: mailer, registre, passerelle, service de commande
      3) middlewares, gestionnaires d'exceptions, routers
    Les composants peuvent être injectés (tests) à la place des implémentations réelles.
    """
    settings = settings or Settings.from_env()
    mailer = mailer or SmtpMailer(settings)
    ledger = ledger or TransactionLedger(settings.ledger_path)
    gateway = gateway or PaystackClient(settings)

    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.settings = settings
    app.state.mailer = mailer
    app.state.ledger = ledger
    app.state.gateway = gateway
    app.state.checkout_service = CheckoutService(
        mailer,
        ledger,
        admin_email=settings.admin_mailbox,
        shipping_fee=settings.shipping_fee,
        store_name=settings.store_name,
    )

    register_basic_middlewares(app, settings)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
