"""Shared fixtures: a recording fake processor and a broker app built around it."""

import os

os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_dummy")

import pytest
from fastapi.testclient import TestClient

from salonpay.common.config import Settings
from salonpay.services.intent_broker.main import create_app
from salonpay.services.intent_broker.processor import IntentHandle


class FakeProcessor:
    """Records every call and hands out predictable ids and secrets."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.fail_on: dict[str, Exception] = {}
        self._counter = 0

    def _next(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def create_customer(self) -> str:
        self.calls.append(("customer", {}))
        self._maybe_fail("customer")
        return self._next("cus")

    def create_payment_intent(self, options: dict) -> IntentHandle:
        self.calls.append(("payment_intent", dict(options)))
        self._maybe_fail("payment_intent")
        intent_id = self._next("pi")
        return IntentHandle(intent_id, f"{intent_id}_secret_abc")

    def create_setup_intent(self, options: dict) -> IntentHandle:
        self.calls.append(("setup_intent", dict(options)))
        self._maybe_fail("setup_intent")
        intent_id = self._next("seti")
        return IntentHandle(intent_id, f"{intent_id}_secret_abc")


@pytest.fixture
def fake_processor():
    return FakeProcessor()


@pytest.fixture
def app_settings():
    return Settings(stripe_secret_key="sk_test_x", stripe_publishable_key="pk_test_x")


@pytest.fixture
def broker_app(app_settings, fake_processor):
    return create_app(app_settings, processor=fake_processor)


@pytest.fixture
def client(broker_app):
    return TestClient(broker_app)
