def test_health_root(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_health_stripe_has_no_network_call(client, monkeypatch):
    monkeypatch.setattr("storefront.health.service.STRIPE_SECRET_KEY", "sk_test_abc")
    data = client.get("/health/stripe").json()
    assert data["secret_key_configured"] is True
    assert data["live_mode"] is False


def test_health_supabase_without_url(client, monkeypatch):
    monkeypatch.setattr("storefront.health.service.SUPABASE_URL", "")
    data = client.get("/health/supabase").json()
    assert data["connect_ok"] is False
    assert data["error"]


def test_health_rate_limit_disabled_in_tests(client, monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    data = client.get("/health/rate-limit").json()
    assert data["enabled"] is False


def test_catalog(client):
    data = client.get("/api/catalog").json()
    assert data["unitPrice"] == 65
    assert data["currency"] == "usd"
    assert [c["value"] for c in data["colors"]] == ["black", "red", "navy-blue", "dark-grey", "sapphire-blue", "purple"]
    assert len(data["sizes"]) == 7
    assert data["minQuantity"] == 1
    assert data["maxQuantity"] == 10
    assert "stripePublicKey" in data


def test_security_headers(client):
    res = client.get("/health")
    assert res.headers["x-frame-options"] == "DENY"
    assert res.headers["x-content-type-options"] == "nosniff"
    assert "https://js.stripe.com" in res.headers["content-security-policy"]


def test_force_https_behind_proxy(client):
    res = client.get("/health", headers={"x-forwarded-proto": "http"}, follow_redirects=False)
    assert res.status_code == 301
    assert res.headers["location"].startswith("https://")
