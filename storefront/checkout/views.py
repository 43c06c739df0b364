# module storefront.checkout.views

"""Endpoint du tunnel de commande.
- POST /checkout: valide le panier, envoie facture + notification admin, enregistre la transaction.
Réponses:
- 200 {"message": "Invoice sent!", "transactionId": "TXN-..."}
- 400 {"error": ...} si la requête est invalide (aucun e-mail, aucune écriture)
- 500 {"error", "transactionId", "failedStep", "steps"} si une étape a échoué en cours de route
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import logging

from storefront.errors import StorefrontError
from storefront.app_setup.dependencies import get_checkout_service, read_json_body
from storefront.checkout.models import parse_checkout_request
from storefront.checkout.service import CheckoutService
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Checkout"])


@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def checkout(request: Request, service: CheckoutService = Depends(get_checkout_service)):
    """
    Étapes:
    - parse_checkout_request: rejet global (400) si un champ requis manque.
    - service.checkout (threadpool: SMTP et écriture disque sont bloquants).
    - Rapport d'étapes renvoyé au client en cas d'échec partiel.
    """
    body = await read_json_body(request)
    checkout_request = parse_checkout_request(body)
    try:
        report = await run_in_threadpool(service.checkout, checkout_request)
    except StorefrontError:
        raise
    except Exception:
        logger.exception("Erreur checkout")
        raise HTTPException(status_code=500, detail="Failed to process checkout.")
    if not report.ok:
        return JSONResponse(status_code=500, content=report.as_error_payload())
    return JSONResponse({"message": "Invoice sent!", "transactionId": report.transaction_id})
