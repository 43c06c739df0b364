"""
Dépendances FastAPI: exposent aux vues les composants construits par la factory.
- Les composants vivent dans app.state (un seul Settings, un seul mailer, etc.).
- Les tests remplacent ces composants via create_app(...) ou dependency_overrides.
"""
from typing import Any

from fastapi import HTTPException, Request

from storefront.checkout.service import CheckoutService
from storefront.config import Settings
from storefront.ledger.repository import TransactionLedger
from storefront.notifications.mailer import Mailer
from storefront.payments.paystack_client import PaystackClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer

def get_ledger(request: Request) -> TransactionLedger:
    return request.app.state.ledger

def get_gateway(request: Request) -> PaystackClient:
    return request.app.state.gateway

def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service

async def read_json_body(request: Request) -> Any:
    """Lit le body JSON; 400 {"error": "Invalid JSON body"} si illisible."""
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
