"""
Factory d'application pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import (
    register_basic_middlewares,
    register_security_middleware,
    register_no_cache_middleware,
    register_force_https_middleware,
)
from .exception_handlers import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Crée et configure l'instance FastAPI de l'application.
    Étapes et ordre:
      1) register_basic_middlewares: CORS, TrustedHost, ProxyHeaders.
      2) register_security_middleware: en-têtes de sécurité + CSP.
      3) register_no_cache_middleware: pas de cache sur /api/orders.
      4) register_exception_handlers: erreurs JSON {kind, message}.
      5) register_routers: commandes, paiements, catalogue, health.
      6) register_force_https_middleware: ajouté en dernier pour s'exécuter en premier.
    """
    app = FastAPI(title="Hoodie Storefront API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    register_force_https_middleware(app)
    return app
