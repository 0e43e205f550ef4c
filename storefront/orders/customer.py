from typing import Any, Dict, Tuple

from pydantic import ValidationError

from storefront.errors import Outcome, first_violation, success
from storefront.orders.models import CustomerInfo
from storefront.utils.validators import MIN_PHONE_DIGITS, is_blank

# module storefront.orders.customer
LABELS = {"firstName": "First name", "lastName": "Last name", "email": "Email", "phone": "Phone"}
INVALID = {
    "email": ("invalid_email", "Please enter a valid email"),
    "phone": ("invalid_phone", f"Phone number must contain at least {MIN_PHONE_DIGITS} digits"),
}


def _describe(err: Dict[str, Any]) -> Tuple[str, str, str]:
    if not err["loc"]:
        return "customerInfo", "missing", "Customer information is required"
    name = str(err["loc"][0])
    if err["type"] == "missing" or is_blank(err.get("input")):
        return name, "required", f"{LABELS.get(name, name)} is required"
    reason, message = INVALID.get(name, ("invalid_type", err["msg"]))
    return name, reason, message


def validate_customer(raw: Any) -> Outcome:
    """
    Valide les coordonnées {firstName, lastName, email, phone} via CustomerInfo.
    - Champ absent ou vide -> reason "required"; email refusé par EmailStr -> "invalid_email";
      moins de 10 chiffres -> "invalid_phone".
    - Renvoie success(CustomerInfo) ou la première violation (validation_error).
    """
    try:
        return success(CustomerInfo.model_validate(raw))
    except ValidationError as exc:
        return first_violation(exc, _describe)
