"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Initialise FastAPILimiter (Redis) si RATE_LIMIT_REDIS_URL est configuré.
- LOCAL_RATE_LIMIT_FALLBACK=1: limite en mémoire si Redis est absent ou injoignable.
- Sinon le rate limiting est désactivé proprement.
"""
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure le rate limiting et gère les fallbacks.
    - Les logs indiquent l'état effectif (redis/memory/disabled) pour observabilité.
    """
    logger = logging.getLogger("uvicorn.error")
    settings = app.state.settings
    fallback = "memory" if settings.local_rate_limit_fallback else None
    app.state.rate_limit_backend = fallback
    redis_ready = False

    if settings.rate_limit_redis_url:
        try:
            r = aioredis.from_url(settings.rate_limit_redis_url, encoding="utf-8", decode_responses=True)
            await FastAPILimiter.init(r)
            app.state.rate_limit_backend = "redis"
            redis_ready = True
            logger.info("Rate limiting enabled (redis)")
        except Exception as e:
            logger.warning(f"Rate limiting init error, backend={fallback or 'disabled'}: {e}")
    elif fallback:
        logger.info("Rate limiting enabled (memory)")
    else:
        logger.info("Rate limiting disabled (RATE_LIMIT_REDIS_URL absent)")

    yield

    if redis_ready:
        await FastAPILimiter.close()
