"""
Démarrage et arrêt de l'application storefront.
- Démarrage: état des secrets dans les logs (jamais leur valeur), connexion du limiteur Redis.
- Arrêt: fermeture du limiteur et du client HTTP de la passerelle.
Variables d'environnement du limiteur:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucun limiteur (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: Redis en mémoire via fakeredis
  - RATE_LIMIT_REDIS_URL: URL du serveur Redis (défaut redis://127.0.0.1:6379/0)
  - LOCAL_RATE_LIMIT_FALLBACK=1: limiteur mémoire si Redis est injoignable
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from redis import asyncio as aioredis

try:
    from fakeredis.aioredis import FakeRedis  # extra [test]
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379/0"


def _redis_connection():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        if FakeRedis is None:
            raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 requires the fakeredis package")
        return FakeRedis(decode_responses=True)
    url = os.getenv("RATE_LIMIT_REDIS_URL") or DEFAULT_REDIS_URL
    return aioredis.from_url(url, encoding="utf-8", decode_responses=True)


async def _start_rate_limiter(app: FastAPI) -> None:
    """Renseigne app.state.rate_limit_enabled; un Redis absent ne bloque jamais le démarrage."""
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("rate limiter: disabled for tests")
        return
    try:
        await FastAPILimiter.init(_redis_connection())
    except Exception as e:
        local = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = local
        logger.warning("rate limiter: redis unavailable (%s), %s", e,
                       "using in-memory fallback" if local else "limits disabled")
        return
    app.state.rate_limit_enabled = True
    logger.info("rate limiter: redis ready")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info("mail account: %s", settings.email_user or "<not set>")
    logger.info("mail password: %s", "loaded" if settings.email_pass else "not loaded")
    logger.info("gateway secret key: %s", "loaded" if settings.paystack_secret_key else "not loaded")
    await _start_rate_limiter(app)

    yield

    if getattr(FastAPILimiter, "redis", None) is not None:
        await FastAPILimiter.close()
    gateway = getattr(app.state, "gateway", None)
    if gateway is not None and hasattr(gateway, "close"):
        gateway.close()
