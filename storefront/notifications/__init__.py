"""
Module 'notifications': envoi d'e-mails via SMTP.
"""

from .mailer import DeliveryReceipt, Mailer, SmtpMailer

__all__ = ["DeliveryReceipt", "Mailer", "SmtpMailer"]
