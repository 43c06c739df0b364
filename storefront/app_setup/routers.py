"""
Registre central des routers.
- Formulaires: /send-email, /book-service
- Paiement: /initialize-payment, /verify-payment/{reference}
- Commande: /checkout
- Health: /health, /health/ledger, /health/config
"""
from fastapi import FastAPI
from storefront.checkout import views as checkout_views
from storefront.enquiries import views as enquiries_views
from storefront.payments import views as payments_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - Les chemins reprennent ceux attendus par le front (pas de préfixe /api).
    """
    app.include_router(enquiries_views.router)
    app.include_router(payments_views.router)
    app.include_router(checkout_views.router)
    app.include_router(health_router)
