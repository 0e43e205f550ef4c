import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront.catalog import Catalog
from storefront.deps import get_catalog, get_intent_store, get_order_repository
from storefront.errors import ALREADY_CONFIRMED, http_error
from storefront.orders.repository import OrderRepository
from storefront.payments import service as payments_service
from storefront.payments.intent_store import IntentStore
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.request import read_json_object

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Payments API"])

# module storefront.payments.views
@router.post("/create-payment-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_intent(
    request: Request,
    intents: IntentStore = Depends(get_intent_store),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Crée un PaymentIntent pour le panier et les coordonnées du client.
    - Entrée JSON: { "items": [ {color, size, quantity, unitPrice}, ... ], "customerInfo": {...} }
    - Sortie: { "clientSecret", "authorizationId", "amount" } (amount en centimes)
    - Erreurs: 400 validation_error / processor_error
    """
    body = await read_json_object(request)
    outcome = await run_in_threadpool(
        payments_service.create_authorization,
        body.get("items"),
        body.get("customerInfo"),
        intents=intents,
        catalog=catalog,
    )
    if not outcome.ok:
        raise http_error(outcome.error)
    return JSONResponse(outcome.value)

@router.post("/confirm-payment")
async def confirm_payment(
    request: Request,
    intents: IntentStore = Depends(get_intent_store),
    orders: OrderRepository = Depends(get_order_repository),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Confirme le paiement et crée la commande 'paid'.
    - Entrée JSON: { "authorizationId": "pi_..." } (alias historique: paymentIntentId)
    - 201 {order, message} à la création, 200 si la commande existait déjà.
    - Erreurs: 400 payment_incomplete / amount_mismatch / processor_error, 404 intent inconnu.
    """
    body = await read_json_object(request)
    authorization_id = body.get("authorizationId") or body.get("paymentIntentId")
    outcome = await run_in_threadpool(
        payments_service.confirm_and_persist,
        authorization_id,
        intents=intents,
        orders=orders,
        catalog=catalog,
    )
    if not outcome.ok:
        raise http_error(outcome.error)
    if outcome.status == ALREADY_CONFIRMED:
        return JSONResponse({"order": outcome.value.to_api(), "message": "Order already confirmed"}, status_code=200)
    return JSONResponse({"order": outcome.value.to_api(), "message": "Order created successfully"}, status_code=201)
