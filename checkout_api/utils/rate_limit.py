import logging
import time
from typing import Any, Dict
from urllib.parse import urlparse

from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import RedisError

from checkout_api.payments.errors import TooManyRequests

logger = logging.getLogger(__name__)


def _client_key(request: Request) -> str:
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"


def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance de rate limiting selon app.state.rate_limit_backend:
    - "redis": fastapi-limiter (initialisé dans le lifespan)
    - "memory": fenêtre glissante locale (dev / tests)
    - autre: pas de limite
    Les préflights CORS (OPTIONS) ne sont jamais comptés.
    """
    async def _dep(request: Request, response: Response):
        if request.method == "OPTIONS":
            return
        backend = getattr(request.app.state, "rate_limit_backend", None)

        if backend == "memory":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            # Purge des clés dont la fenêtre est écoulée
            for stale in [k for k, v in store.items() if not v or now - v[-1] >= seconds]:
                del store[stale]
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise TooManyRequests()
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if backend == "redis":
            async def _identifier(req: Request) -> str:
                return _client_key(req)
            try:
                return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
            except RedisError as e:
                # Redis injoignable: pas de 429, la requête passe
                logger.warning("Rate limiting skipped, redis error on %s: %s", request.url.path, e)
                return
    return _dep


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    backend = getattr(request.app.state, "rate_limit_backend", None)
    info: Dict[str, Any] = {
        "enabled": backend is not None,
        "backend": backend,
        "ready": backend == "memory" or (backend == "redis" and getattr(FastAPILimiter, "redis", None) is not None),
    }
    if backend == "redis":
        settings = getattr(request.app.state, "settings", None)
        redis_url = getattr(settings, "rate_limit_redis_url", None)
        if redis_url:
            p = urlparse(redis_url)
            info["redis"] = {
                "scheme": p.scheme,
                "host": p.hostname,
                "port": p.port,
            }
    return info
