from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront.app_setup.dependencies import get_ledger, get_settings
from storefront.config import Settings
from storefront.errors import StorageError
from storefront.ledger.repository import TransactionLedger
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/ledger")
def health_ledger(ledger: TransactionLedger = Depends(get_ledger)):
    info = {"path": str(ledger.path), "exists": ledger.path.exists(), "records": None, "error": None}
    try:
        info["records"] = ledger.count()
    except StorageError as e:
        info["error"] = e.message
        return JSONResponse(info, status_code=503)
    return JSONResponse(info)

@router.get("/config")
def health_config(request: Request, settings: Settings = Depends(get_settings)):
    # Uniquement l'état de chargement, jamais les secrets eux-mêmes
    return {
        "email_user_loaded": bool(settings.email_user),
        "email_pass_loaded": bool(settings.email_pass),
        "gateway_key_loaded": bool(settings.paystack_secret_key),
        "gateway_currency": settings.gateway_currency,
        "rate_limit": rate_limit_health_info(request),
    }
