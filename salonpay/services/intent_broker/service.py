"""Intent creation: one customer, then one intent bound to it."""

from time import perf_counter

from salonpay.common.errors import ProcessorCallFailed
from salonpay.common.logging import logger
from salonpay.common.metrics import intent_failures_total, intent_requests_total, processor_call_seconds
from salonpay.common.modes import CheckoutMode
from salonpay.common.tracing import get_tracer
from salonpay.services.intent_broker.processor import IntentHandle, PaymentProcessor
from salonpay.services.intent_broker.schemas import IntentResponse


class IntentBroker:
    """Maps a checkout mode to the pair of processor calls behind it.

    Every call creates a new customer; nothing is looked up or reused. If the
    intent call fails after the customer was created, the customer is left
    behind at the processor.
    """

    def __init__(
        self,
        processor: PaymentProcessor,
        default_currency: str = "gbp",
        service_name: str = "intent-broker",
    ) -> None:
        self.processor = processor
        self.default_currency = default_currency
        self.service_name = service_name

    def _call(self, operation: str, fn, *args):
        """Run one processor call, timing it and normalising failures."""

        start = perf_counter()
        try:
            with get_tracer().start_as_current_span(f"processor.{operation}"):
                return fn(*args)
        except ProcessorCallFailed:
            raise
        except Exception as exc:
            raise ProcessorCallFailed(str(exc)) from exc
        finally:
            processor_call_seconds.labels(
                service=self.service_name,
                operation=operation,
            ).observe(max(0.0, perf_counter() - start))

    def _run(self, mode: CheckoutMode, create_intent) -> IntentResponse:
        intent_requests_total.labels(service=self.service_name, mode=mode.value).inc()
        try:
            customer_id = self._call("customer.create", self.processor.create_customer)
            intent: IntentHandle = create_intent(customer_id)
        except ProcessorCallFailed as exc:
            intent_failures_total.labels(service=self.service_name, mode=mode.value).inc()
            logger.warning("intent creation failed mode=%s reason=%s", mode.value, exc.message)
            raise
        logger.info("intent created mode=%s customer_id=%s intent_id=%s", mode.value, customer_id, intent.id)
        return IntentResponse(client_secret=intent.client_secret, customer_id=customer_id)

    def create_pay_now_intent(
        self,
        amount: int,
        currency: str | None = None,
        save_card: bool = False,
    ) -> IntentResponse:
        """Create a card payment intent for `amount` minor units.

        With `save_card` the intent is flagged for off-session reuse of the
        card; without it the flag is not sent at all.
        """

        def create_intent(customer_id: str) -> IntentHandle:
            options = {
                "amount": amount,
                "currency": currency or self.default_currency,
                "customer": customer_id,
                "payment_method_types": ["card"],
            }
            if save_card:
                options["setup_future_usage"] = "off_session"
            return self._call("payment_intent.create", self.processor.create_payment_intent, options)

        return self._run(CheckoutMode.PAY_NOW, create_intent)

    def _create_setup_intent(self, mode: CheckoutMode) -> IntentResponse:
        def create_intent(customer_id: str) -> IntentHandle:
            options = {"customer": customer_id, "payment_method_types": ["card"]}
            return self._call("setup_intent.create", self.processor.create_setup_intent, options)

        return self._run(mode, create_intent)

    def create_reserve_intent(self) -> IntentResponse:
        """Zero-value card verification to hold a booking slot."""

        return self._create_setup_intent(CheckoutMode.RESERVE)

    def create_save_card_intent(self) -> IntentResponse:
        """Same as reserve today; a separate operation so the two can diverge."""

        return self._create_setup_intent(CheckoutMode.SAVE_CARD)
