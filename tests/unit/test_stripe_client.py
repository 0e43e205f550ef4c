import pytest
import stripe

from storefront.payments import stripe_client
from storefront.payments.intent_store import IntentNotFoundError, ProcessorError


class _FakeIntent:
    def __init__(self, **data):
        self._data = data

    def to_dict(self):
        return dict(self._data)


@pytest.fixture(autouse=True)
def _stripe_key(monkeypatch):
    monkeypatch.setattr(stripe_client, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe, "api_key", None)


def test_require_stripe_without_key(monkeypatch):
    monkeypatch.setattr(stripe_client, "STRIPE_SECRET_KEY", "")
    with pytest.raises(RuntimeError):
        stripe_client.require_stripe()


def test_create_maps_payment_intent(monkeypatch):
    calls = {}

    def fake_create(**kwargs):
        calls.update(kwargs)
        return _FakeIntent(
            id="pi_1", amount=kwargs["amount"], currency=kwargs["currency"],
            status="requires_payment_method", metadata=kwargs["metadata"], client_secret="pi_1_secret_x",
        )

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    auth = stripe_client.StripeIntentStore().create(amount=13000, currency="usd", metadata={"items": "[]"})

    assert calls["automatic_payment_methods"] == {"enabled": True}
    assert stripe.api_key == "sk_test_123"
    assert auth.id == "pi_1"
    assert auth.amount == 13000
    assert auth.metadata == {"items": "[]"}
    assert auth.client_secret == "pi_1_secret_x"


def test_create_stripe_error_is_processor_error(monkeypatch):
    def fake_create(**kwargs):
        raise stripe.APIConnectionError("Network error")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)
    with pytest.raises(ProcessorError):
        stripe_client.StripeIntentStore().create(amount=6500, currency="usd", metadata={})


def test_retrieve_resource_missing_is_not_found(monkeypatch):
    def fake_retrieve(intent_id):
        raise stripe.InvalidRequestError("No such payment_intent", "intent", code="resource_missing")

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake_retrieve)
    with pytest.raises(IntentNotFoundError) as exc:
        stripe_client.StripeIntentStore().retrieve("pi_missing")
    assert exc.value.authorization_id == "pi_missing"


def test_retrieve_other_invalid_request_is_processor_error(monkeypatch):
    def fake_retrieve(intent_id):
        raise stripe.InvalidRequestError("Invalid API key", None, code="api_key_invalid")

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake_retrieve)
    with pytest.raises(ProcessorError):
        stripe_client.StripeIntentStore().retrieve("pi_1")


def test_retrieve_maps_status_and_metadata(monkeypatch):
    def fake_retrieve(intent_id):
        return _FakeIntent(id=intent_id, amount=6500, currency="usd", status="succeeded", metadata={"email": "ada@example.com"})

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake_retrieve)
    auth = stripe_client.StripeIntentStore().retrieve("pi_2")
    assert auth.status == "succeeded"
    assert auth.amount == 6500
    assert auth.client_secret is None
