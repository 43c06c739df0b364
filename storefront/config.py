# storefront.config
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import List
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Construit un objet Settings immuable, une seule fois au démarrage (factory)
- Les composants (mailer, passerelle de paiement, registre) reçoivent Settings
  explicitement: aucune lecture d'os.environ dans la logique métier
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env(name: str, default: str = "") -> str:
    return _clean_env(os.getenv(name) or default)

def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")

def _env_list(name: str, default: str) -> List[str]:
    return [v.strip() for v in (os.getenv(name) or default).split(",") if v.strip()]


@dataclass(frozen=True)
class Settings:
    # SMTP: identifiants du compte expéditeur (boîte de la boutique)
    email_user: str = ""
    email_pass: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_use_ssl: bool = True
    admin_email: str = ""

    # Passerelle de paiement (API Paystack)
    paystack_secret_key: str = ""
    paystack_base_url: str = "https://api.paystack.co"
    gateway_currency: str = "ZAR"

    # Boutique
    store_name: str = "Horti Couture"
    shipping_fee: Decimal = Decimal("120")
    ledger_path: Path = BASE_DIR / "transactions.jsonl"

    # Délai max (secondes) pour tout appel sortant (SMTP, passerelle)
    outbound_timeout: float = 10.0

    # CORS (dev) / hôtes autorisés
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    allowed_hosts: List[str] = field(default_factory=lambda: ["*"])

    @property
    def admin_mailbox(self) -> str:
        """Boîte de l'administrateur: ADMIN_EMAIL, sinon le compte expéditeur."""
        return self.admin_email or self.email_user

    @classmethod
    def from_env(cls, env_path: Path = ENV_PATH) -> "Settings":
        """
        Lit .env puis l'environnement du processus.
        - Les valeurs vides retombent sur les valeurs par défaut.
        - PAYSTACK_BASE_URL est normalisée (pas de / final).
        """
        load_dotenv(dotenv_path=env_path, override=False)
        base_url = _env("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/")
        ledger_path = _env("LEDGER_PATH")
        return cls(
            email_user=_env("EMAIL_USER"),
            email_pass=_env("EMAIL_PASS"),
            smtp_host=_env("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(_env("SMTP_PORT", "465")),
            smtp_use_ssl=_env_bool("SMTP_USE_SSL", True),
            admin_email=_env("ADMIN_EMAIL"),
            paystack_secret_key=_env("PAYSTACK_SECRET_KEY"),
            paystack_base_url=base_url,
            gateway_currency=_env("GATEWAY_CURRENCY", "ZAR").upper(),
            store_name=_env("STORE_NAME", "Horti Couture"),
            shipping_fee=Decimal(_env("SHIPPING_FEE", "120")),
            ledger_path=Path(ledger_path) if ledger_path else BASE_DIR / "transactions.jsonl",
            outbound_timeout=float(_env("OUTBOUND_TIMEOUT_SECONDS", "10")),
            cors_origins=_env_list("CORS_ORIGINS", "*"),
            allowed_hosts=_env_list("ALLOWED_HOSTS", "*"),
        )
