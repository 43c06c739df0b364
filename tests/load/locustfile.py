# Module-level imports & constants
from locust import HttpUser, task, between
import os
import csv
import itertools
import threading

# Par défaut un rythme de formulaire humain; LOCUST_WAIT_MAX=0 pour tester la concurrence
WAIT_MAX = float(os.getenv("LOCUST_WAIT_MAX", "2.0"))

_EMAILS: list[str] = []
_EMAIL_LOCK = threading.Lock()
_EMAIL_IDX = itertools.count()

def _ensure_emails_loaded():
    if _EMAILS:
        return
    csv_path = os.path.join(os.path.dirname(__file__), "customers.csv")
    if os.path.exists(csv_path):
        with open(csv_path, newline="", encoding="utf-8") as f:
            for row in csv.reader(f):
                if row and "@" in row[0]:
                    _EMAILS.append(row[0].strip())
    if not _EMAILS:
        # Adresses de test: le serveur SMTP cible doit être un bac à sable
        _EMAILS.extend(f"load{i}@example.com" for i in range(50))

def _next_email() -> str:
    with _EMAIL_LOCK:
        return _EMAILS[next(_EMAIL_IDX) % len(_EMAILS)]

class StorefrontCustomer(HttpUser):
    wait_time = between(0.0, WAIT_MAX)

    def on_start(self):
        _ensure_emails_loaded()
        self.headers = {"Accept": "application/json"}

    def _checkout_payload(self) -> dict:
        return {
            "email": _next_email(),
            "name": "Load Test",
            "cart": [
                {"title": "Vase", "quantity": 2, "price": 50.00, "color": "Red"},
                {"title": "Planter", "quantity": 1, "price": 75.50, "lineArt": True, "stand": "oak"},
            ],
            "total": 295.50,
            "shippingAddress": "1 Main St",
            "shippingOption": "courier",
            "paymentMethod": "offline-transfer",
        }

    @task(3)
    def checkout(self):
        with self.client.post(
            "/checkout",
            json=self._checkout_payload(),
            headers=self.headers,
            name="POST /checkout",
            catch_response=True,
        ) as resp:
            if resp.status_code == 429:
                # Limitation de débit attendue sous charge
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Checkout failed ({resp.status_code}): {resp.text[:200]}")
            elif not (resp.json().get("transactionId") or "").startswith("TXN-"):
                resp.failure("Checkout ok mais 'transactionId' manquant dans la réponse")

    @task(1)
    def health(self):
        self.client.get("/health", name="GET /health", headers=self.headers)
