"""
Registre central des routers.
- API: commandes, paiements, catalogue
- Health: health_router
"""
from fastapi import FastAPI
from storefront.orders import views as orders_views
from storefront.payments import views as payments_views
from storefront.catalog import views as catalog_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(orders_views.router)
    app.include_router(payments_views.router)
    app.include_router(catalog_views.router)
    app.include_router(health_router)
