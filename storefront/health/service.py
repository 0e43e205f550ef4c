from urllib.parse import urlparse
import socket

from storefront.config import SUPABASE_URL, ORDERS_TABLE, ORDER_BACKEND, STRIPE_SECRET_KEY, STRIPE_PUBLIC_KEY
import storefront.infra.supabase_client as supabase_client

def _check_table(client, name: str):
    try:
        res = client.table(name).select("id").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "order_backend": ORDER_BACKEND,
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    if not effective_url:
        info["error"] = "SUPABASE_URL non configuré"
        return info
    try:
        client = supabase_client.get_service_supabase()
        info["tables"][ORDERS_TABLE] = _check_table(client, ORDERS_TABLE)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def health_stripe_info():
    # Pas d'appel réseau: indique seulement si les clés sont présentes
    return {
        "secret_key_configured": bool(STRIPE_SECRET_KEY),
        "public_key_configured": bool(STRIPE_PUBLIC_KEY),
        "live_mode": STRIPE_SECRET_KEY.startswith("sk_live_"),
    }
