"""Payment processor client used by the intent broker.

`StripeProcessor` is built once per app and handed to each request handler;
it never touches the module-level `stripe.api_key`.
"""

from typing import NamedTuple, Protocol

import stripe

from salonpay.common.errors import ProcessorCallFailed
from salonpay.common.logging import logger


class IntentHandle(NamedTuple):
    """Processor-side intent id and the client secret handed to the browser."""

    id: str
    client_secret: str


class PaymentProcessor(Protocol):
    def create_customer(self) -> str: ...

    def create_payment_intent(self, options: dict) -> IntentHandle: ...

    def create_setup_intent(self, options: dict) -> IntentHandle: ...


class StripeProcessor:
    """Thin wrapper over the stripe SDK with per-call credentials."""

    def __init__(self, secret_key: str, connected_account_id: str | None = None) -> None:
        self.connected_account_id = connected_account_id
        self._request_options: dict = {"api_key": secret_key}
        if connected_account_id:
            self._request_options["stripe_account"] = connected_account_id

    def _raise_failed(self, operation: str, exc: stripe.StripeError) -> None:
        message = exc.user_message or str(exc)
        logger.warning(
            "stripe call failed operation=%s type=%s code=%s",
            operation,
            type(exc).__name__,
            exc.code,
        )
        raise ProcessorCallFailed(message) from exc

    def create_customer(self) -> str:
        try:
            customer = stripe.Customer.create(**self._request_options)
        except stripe.StripeError as exc:
            self._raise_failed("customer.create", exc)
        return customer.id

    def create_payment_intent(self, options: dict) -> IntentHandle:
        try:
            intent = stripe.PaymentIntent.create(**options, **self._request_options)
        except stripe.StripeError as exc:
            self._raise_failed("payment_intent.create", exc)
        return IntentHandle(intent.id, intent.client_secret)

    def create_setup_intent(self, options: dict) -> IntentHandle:
        try:
            intent = stripe.SetupIntent.create(**options, **self._request_options)
        except stripe.StripeError as exc:
            self._raise_failed("setup_intent.create", exc)
        return IntentHandle(intent.id, intent.client_secret)
