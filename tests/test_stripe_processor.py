"""StripeProcessor: per-call credentials and error translation."""

import logging
from types import SimpleNamespace

import pytest
import stripe

from salonpay.common.errors import ProcessorCallFailed
from salonpay.services.intent_broker.processor import IntentHandle, StripeProcessor


@pytest.fixture
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(kind, result):
        def create(**kwargs):
            calls.append((kind, kwargs))
            return result

        return create

    monkeypatch.setattr(stripe.Customer, "create", fake_create("customer", SimpleNamespace(id="cus_1")))
    monkeypatch.setattr(
        stripe.PaymentIntent,
        "create",
        fake_create("payment_intent", SimpleNamespace(id="pi_1", client_secret="pi_1_secret_x")),
    )
    monkeypatch.setattr(
        stripe.SetupIntent,
        "create",
        fake_create("setup_intent", SimpleNamespace(id="seti_1", client_secret="seti_1_secret_x")),
    )
    return calls


def test_api_key_passed_per_call(stripe_calls):
    processor = StripeProcessor("sk_test_123")

    assert processor.create_customer() == "cus_1"

    assert stripe_calls == [("customer", {"api_key": "sk_test_123"})]
    assert stripe.api_key != "sk_test_123"


def test_payment_intent_options_forwarded(stripe_calls):
    processor = StripeProcessor("sk_test_123")
    options = {"amount": 100, "currency": "gbp", "customer": "cus_1", "payment_method_types": ["card"]}

    handle = processor.create_payment_intent(options)

    assert handle == IntentHandle("pi_1", "pi_1_secret_x")
    assert stripe_calls[0] == ("payment_intent", {**options, "api_key": "sk_test_123"})


def test_connected_account_header(stripe_calls):
    processor = StripeProcessor("sk_test_123", connected_account_id="acct_9")

    processor.create_customer()
    processor.create_setup_intent({"customer": "cus_1", "payment_method_types": ["card"]})

    assert all(kwargs["stripe_account"] == "acct_9" for _, kwargs in stripe_calls)


def test_stripe_error_translated(monkeypatch):
    def create(**kwargs):
        raise stripe.InvalidRequestError("Amount must be at least £0.30 gbp", "amount")

    monkeypatch.setattr(stripe.PaymentIntent, "create", create)
    processor = StripeProcessor("sk_test_123")

    with pytest.raises(ProcessorCallFailed) as excinfo:
        processor.create_payment_intent({"amount": 1, "currency": "gbp"})

    assert excinfo.value.message == "Amount must be at least £0.30 gbp"
    assert isinstance(excinfo.value.__cause__, stripe.InvalidRequestError)


def test_authentication_error_translated(monkeypatch):
    def create(**kwargs):
        raise stripe.AuthenticationError("Invalid API Key provided: sk_test_***123")

    monkeypatch.setattr(stripe.Customer, "create", create)

    with pytest.raises(ProcessorCallFailed, match="Invalid API Key provided"):
        StripeProcessor("sk_test_123").create_customer()


def test_failure_log_omits_credentials(monkeypatch, caplog):
    def create(**kwargs):
        raise stripe.CardError("Your card was declined.", None, "card_declined")

    monkeypatch.setattr(stripe.SetupIntent, "create", create)
    processor = StripeProcessor("sk_test_very_secret", connected_account_id="acct_9")

    with caplog.at_level(logging.DEBUG, logger="salonpay"):
        with pytest.raises(ProcessorCallFailed):
            processor.create_setup_intent({"customer": "cus_1", "payment_method_types": ["card"]})

    assert "sk_test_very_secret" not in caplog.text
    assert "code=card_declined" in caplog.text
