# module storefront.utils.rate_limit
"""
Limitation de débit des routes publiques (formulaires, commande, paiement).
- fastapi-limiter (Redis) quand il est initialisé par le lifespan.
- Fenêtre glissante en mémoire si LOCAL_RATE_LIMIT_FALLBACK=1 (dev/tests).
- Désactivé proprement si app.state.rate_limit_enabled est False.
La clé est l'adresse du client telle que vue par l'ASGI (request.client): derrière un
reverse proxy, uvicorn la réécrit depuis X-Forwarded-For uniquement pour les proxies
listés dans FORWARDED_ALLOW_IPS. Les en-têtes envoyés par le client ne sont jamais lus ici.
"""
from typing import Any, Dict, List, Tuple
from urllib.parse import urlparse
from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
import logging
import os
import time

logger = logging.getLogger(__name__)

_now = time.monotonic

# clé -> (fenêtre en secondes, horodatages des requêtes encore dans la fenêtre)
LocalStore = Dict[str, Tuple[int, List[float]]]


def _client_key(request: Request) -> str:
    host = request.client.host if request.client else "local"
    return f"ip:{host}:{request.url.path}"

async def _identifier(request: Request) -> str:
    return _client_key(request)

def _local_store(request: Request) -> LocalStore:
    store = getattr(request.app.state, "_rl_store", None)
    if store is None:
        store = request.app.state._rl_store = {}
    return store

def _local_hit(request: Request, times: int, seconds: int) -> None:
    now = _now()
    store = _local_store(request)
    # Purge: une clé dont la dernière requête est hors de sa propre fenêtre ne sert plus
    for key in [k for k, (window, hits) in store.items() if now - hits[-1] >= window]:
        del store[key]

    key = _client_key(request)
    hits = [t for t in store.get(key, (seconds, []))[1] if now - t < seconds]
    if len(hits) >= times:
        store[key] = (seconds, hits)
        raise HTTPException(status_code=429, detail="Too Many Requests")
    hits.append(now)
    store[key] = (seconds, hits)

def optional_rate_limit(times: int, seconds: int):
    limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier)

    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, times, seconds)
            return
        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return
        if getattr(FastAPILimiter, "redis", None) is None:
            return
        try:
            await limiter(request, response)
        except HTTPException:
            raise
        except Exception as e:
            # Redis indisponible en cours de route: pas de 429 côté client
            logger.warning("rate limiter unavailable, request allowed: %s", e)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    """État du limiteur pour /health/config (jamais de mot de passe Redis)."""
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    info: Dict[str, Any] = {
        "enabled": None if enabled is None else bool(enabled),
        "ready": ready,
        "backend": "redis" if ready else None,
        "local_fallback": os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1",
    }
    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if ready and redis_url:
        parsed = urlparse(redis_url)
        info["redis"] = {"scheme": parsed.scheme, "host": parsed.hostname, "port": parsed.port}
    return info
