# module storefront.catalog.views
from fastapi import APIRouter, Depends

from storefront.catalog import Catalog
from storefront.config import STRIPE_PUBLIC_KEY
from storefront.deps import get_catalog

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/catalog")
def get_catalog_view(catalog: Catalog = Depends(get_catalog)):
    """
    Options du produit pour hydrater le formulaire côté client:
    couleurs, tailles, prix unitaire et clé publique Stripe.
    """
    data = catalog.to_dict()
    data["stripePublicKey"] = STRIPE_PUBLIC_KEY
    return data
