"""
Lifespan FastAPI: logs puis limiteur de débit des endpoints qui créent des commandes.
Variables d'environnement:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: limiteur désactivé (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: fakeredis à la place de Redis
  - RATE_LIMIT_REDIS_URL: URL Redis (défaut redis://127.0.0.1:6379/0)
  - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre en mémoire si Redis est injoignable
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from storefront.logging_config import setup_logging

logger = logging.getLogger(__name__)

def _make_redis():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        from fakeredis import FakeAsyncRedis
        return FakeAsyncRedis(decode_responses=True)
    url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
    return aioredis.from_url(url, encoding="utf-8", decode_responses=True)

async def _init_rate_limiter(app: FastAPI) -> bool:
    """Renvoie True si FastAPILimiter est branché sur Redis (réel ou fake)."""
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("rate_limit disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return False
    try:
        await FastAPILimiter.init(_make_redis())
    except Exception as e:
        # Redis absent: fenêtre locale si demandée, sinon pas de limitation
        fallback = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = fallback
        logger.warning("rate_limit init failed fallback=%s error=%s", "memory" if fallback else "none", e)
        return False
    app.state.rate_limit_enabled = True
    logger.info("rate_limit enabled backend=redis")
    return True

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    limiter_ready = await _init_rate_limiter(app)
    try:
        yield
    finally:
        if limiter_ready:
            await FastAPILimiter.close()
