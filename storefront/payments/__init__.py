"""
Module 'payments' (feature-first): point d'entrée public.
Client Paystack (initialize/verify) et conversion en unité mineure.
"""

from .paystack_client import GatewaySession, PaystackClient, to_minor_units

__all__ = [
    "GatewaySession",
    "PaystackClient",
    "to_minor_units",
]
