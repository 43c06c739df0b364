# module storefront.payments.models
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field

# Même plafond que le total déclaré d'une commande
MAX_PAYMENT_AMOUNT = Decimal("1000000000000000")


class InitializePaymentRequest(BaseModel):
    email: EmailStr
    # Montant en unité majeure (ex: 250 pour R250.00)
    amount: Decimal = Field(gt=0, le=MAX_PAYMENT_AMOUNT)
