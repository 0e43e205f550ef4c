from typing import Dict, Any, List
from fastapi import Request, Response, HTTPException
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import RedisError
import logging
import os
import time

logger = logging.getLogger(__name__)

def _client_key(req: Request) -> str:
    # request.client est déjà réécrit par ProxyHeadersMiddleware derrière un proxy de confiance
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{req.url.path}"

def _prune(store: Dict[str, List[float]], path: str, now: float, seconds: int) -> None:
    """Supprime les clés de ce chemin dont toute la fenêtre est expirée."""
    suffix = f":{path}"
    for key in [k for k, hits in store.items() if k.endswith(suffix) and all(now - t >= seconds for t in hits)]:
        del store[key]

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de débit par IP et par chemin.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev).
    - app.state.rate_limit_enabled == False: aucune limitation.
    - Sinon fastapi-limiter (Redis) initialisé dans le lifespan.
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            _prune(store, request.url.path, now, seconds)
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return
        # Limiteur non initialisé (lifespan non exécuté): pas de 429
        if getattr(FastAPILimiter, "redis", None) is None:
            return

        async def _identifier(req: Request) -> str:
            return _client_key(req)

        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except RedisError:
            logger.warning("rate_limit.redis_unavailable path=%s", request.url.path, exc_info=True)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": ready,
        "backend": "redis" if ready else None,
    }
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        info["backend"] = "memory"
    return info
