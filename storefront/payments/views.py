import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from storefront.app_setup.dependencies import get_gateway, read_json_body
from storefront.errors import GatewayError
from storefront.payments.models import InitializePaymentRequest
from storefront.payments.paystack_client import PaystackClient
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Payments"])

# module storefront.payments.views
@router.post("/initialize-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def initialize_payment(request: Request, gateway: PaystackClient = Depends(get_gateway)):
    """
    Ouvre une transaction Paystack pour le client.
    - Entrée JSON: { "email": "...", "amount": 250 } (unité majeure)
    - Sortie: corps JSON brut de la passerelle (reference, access_code, authorization_url)
    - Erreurs: 400 si payload invalide, 500 avec le message de la passerelle si disponible
    """
    body = await read_json_body(request)
    try:
        payload = InitializePaymentRequest.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="A valid email and a positive amount are required.")
    try:
        session = await run_in_threadpool(gateway.initialize, payload.email, payload.amount)
    except GatewayError as e:
        logger.error("Erreur initialize_payment email=%s: %s", payload.email, e.message)
        raise HTTPException(status_code=500, detail=e.message)
    return JSONResponse(session.raw)

@router.get("/verify-payment/{reference}")
async def verify_payment(reference: str, gateway: PaystackClient = Depends(get_gateway)) -> Dict[str, Any]:
    """
    Vérifie une transaction Paystack (après redirection du client).
    - Sortie: corps JSON brut de la passerelle, non réinterprété.
    - Erreurs: 500 avec le message de la passerelle si disponible.
    """
    try:
        return await run_in_threadpool(gateway.verify, reference)
    except GatewayError as e:
        logger.error("Erreur verify_payment reference=%s: %s", reference, e.message)
        raise HTTPException(status_code=500, detail=e.message)
