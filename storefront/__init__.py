"""Backend de la boutique: tunnel de commande, notifications, registre et paiement Paystack."""
