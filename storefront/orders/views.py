# module storefront.orders.views

"""Endpoints des commandes.
- POST /api/orders: commande différée (paiement au retrait), total recalculé côté serveur.
- GET /api/orders: liste des commandes (plus récentes d'abord).
- GET /api/orders/{order_id}: détail d'une commande.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import logging

from storefront.catalog import Catalog
from storefront.deps import get_catalog, get_order_repository
from storefront.errors import http_error
from storefront.orders import service as orders_service
from storefront.orders.repository import OrderRepository
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.request import read_json_object

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["Orders API"])


@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_order(
    request: Request,
    orders: OrderRepository = Depends(get_order_repository),
    catalog: Catalog = Depends(get_catalog),
):
    """Crée une commande « pending ».
    - Entrée: CheckoutData {firstName, lastName, email, phone, items, totalPrice}
    - 201 + commande, 400 validation_error / price_mismatch.
    """
    body = await read_json_object(request)
    outcome = await run_in_threadpool(orders_service.submit_deferred_order, body, orders=orders, catalog=catalog)
    if not outcome.ok:
        raise http_error(outcome.error)
    return JSONResponse(outcome.value.to_api(), status_code=201)


@router.get("")
async def list_orders(orders: OrderRepository = Depends(get_order_repository)):
    outcome = await run_in_threadpool(orders_service.list_orders, orders=orders)
    if not outcome.ok:
        raise http_error(outcome.error)
    return JSONResponse([order.to_api() for order in outcome.value])


@router.get("/{order_id}")
async def get_order(order_id: str, orders: OrderRepository = Depends(get_order_repository)):
    outcome = await run_in_threadpool(orders_service.get_order, order_id, orders=orders)
    if not outcome.ok:
        raise http_error(outcome.error)
    return JSONResponse(outcome.value.to_api())
