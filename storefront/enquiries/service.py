"""
Relais simples vers la boîte de la boutique (formulaire de contact, demande de réservation).
Un message par demande, sans calcul ni étape supplémentaire.
"""
from storefront.notifications.mailer import DeliveryReceipt, Mailer

from .models import BookingRequest, ContactMessage


def contact_subject(form: ContactMessage) -> str:
    return f"New Contact Form Submission from {form.name}"

def contact_body(form: ContactMessage) -> str:
    return f"Name: {form.name}\nEmail: {form.email}\nMessage:\n{form.message}"

def booking_subject(form: BookingRequest) -> str:
    return f"New Booking Request from {form.name}"

def booking_body(form: BookingRequest) -> str:
    return "\n".join([
        f"Service: {form.service}",
        f"Date: {form.date}",
        f"Time: {form.time}",
        f"Name: {form.name}",
        f"Email: {form.email}",
        f"Phone: {form.phone}",
        f"Address: {form.address}",
        f"Notes: {form.notes or 'No additional notes'}",
    ])

def relay_contact(mailer: Mailer, store_mailbox: str, form: ContactMessage) -> DeliveryReceipt:
    return mailer.send(store_mailbox, contact_subject(form), contact_body(form))

def relay_booking(mailer: Mailer, store_mailbox: str, form: BookingRequest) -> DeliveryReceipt:
    return mailer.send(store_mailbox, booking_subject(form), booking_body(form))
