"""
Module 'ledger': registre durable des transactions (ajout + listing).
"""

from .repository import TransactionLedger

__all__ = ["TransactionLedger"]
