"""
Point d'entrée principal pour le service de checkout.

Usage:
    python -m checkout_api

Ce mode lance uvicorn directement et lit quelques variables d'environnement:
- LISTEN_PORT (ou PORT): port d'écoute (par défaut 4242)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn (ex: "info", "debug")
"""
import os

import uvicorn

from checkout_api.config import load_settings

if __name__ == "__main__":
    settings = load_settings()
    # Activer le reload uniquement si explicitement demandé (ex: en local)
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    log_level = os.environ.get("LOG_LEVEL", "info")
    uvicorn.run(
        "checkout_api.asgi:app",
        host="0.0.0.0",
        port=settings.listen_port,
        reload=reload_flag,
        log_level=log_level,
    )
