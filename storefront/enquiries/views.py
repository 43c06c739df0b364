# module storefront.enquiries.views

"""Endpoints des formulaires publics.
- /send-email: formulaire de contact relayé vers la boîte de la boutique.
- /book-service: demande de réservation relayée vers la boîte de la boutique.
Sécurité:
- optional_rate_limit: limite le spam des formulaires.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from storefront.app_setup.dependencies import get_mailer, get_settings, read_json_body
from storefront.config import Settings
from storefront.enquiries import service as enquiries_service
from storefront.enquiries.models import BookingRequest, ContactMessage
from storefront.errors import DeliveryError
from storefront.notifications.mailer import Mailer
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Enquiries"])


@router.post("/send-email", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
async def send_contact_email(
    request: Request,
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    body = await read_json_body(request)
    try:
        form = ContactMessage.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="All fields are required.")
    try:
        await run_in_threadpool(enquiries_service.relay_contact, mailer, settings.admin_mailbox, form)
    except DeliveryError as e:
        logger.error("Erreur send_contact_email: %s", e.message)
        raise HTTPException(status_code=500, detail="Failed to send email")
    logger.info("contact email relayed from=%s", form.email)
    return {"message": "Email sent successfully!"}


@router.post("/book-service", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
async def book_service(
    request: Request,
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    body = await read_json_body(request)
    try:
        form = BookingRequest.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="All required fields must be filled.")
    try:
        await run_in_threadpool(enquiries_service.relay_booking, mailer, settings.admin_mailbox, form)
    except DeliveryError as e:
        logger.error("Erreur book_service: %s", e.message)
        raise HTTPException(status_code=500, detail="Failed to send booking request.")
    logger.info("booking request relayed from=%s service=%s", form.email, form.service)
    return {"message": "Booking request sent successfully!"}
