from typing import Any, Dict

from fastapi import HTTPException, Request

from storefront.errors import VALIDATION_ERROR

async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Lit le body JSON de la requête et exige un objet.
    - 400 validation_error si le JSON est illisible ou n'est pas un objet.
    """
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail={"kind": VALIDATION_ERROR, "message": "Invalid JSON body", "field": "body"})
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail={"kind": VALIDATION_ERROR, "message": "Request body must be a JSON object", "field": "body"})
    return body
