"""Checkout mode selector talking to the intent broker.

Python counterpart of the browser client in
`services/intent_broker/static/client.js`. All UI state sits in one
`CheckoutState`; every transition bumps `generation`, and a broker response
that arrives for an older generation is dropped.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

import httpx

from salonpay.common.modes import MODE_ENDPOINTS, CheckoutMode


logger = logging.getLogger("salonpay.client")


class PaymentWidget(Protocol):
    def mount(self) -> None: ...

    def unmount(self) -> None: ...


WidgetFactory = Callable[[str], PaymentWidget]


@dataclass
class CheckoutState:
    """Everything the checkout page knows between transitions."""

    mode: CheckoutMode = CheckoutMode.PAY_NOW
    save_card: bool = False
    generation: int = 0
    client_secret: str | None = None
    customer_id: str | None = None
    message: str | None = None


class CheckoutController:
    """Keeps exactly one mode selected and one widget mounted."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        widget_factory: WidgetFactory,
        amount: int = 100,
        currency: str = "gbp",
        on_message: Callable[[str], None] | None = None,
        save_card: bool = False,
    ) -> None:
        self.http = http
        self.widget_factory = widget_factory
        self.amount = amount
        self.currency = currency
        self.on_message = on_message
        # save_card seeds the toggle from a checkbox the page restored
        self.state = CheckoutState(save_card=save_card)
        self.widget: PaymentWidget | None = None

    @property
    def confirm_kind(self) -> str:
        """Which confirm call the widget needs: "payment" or "setup"."""

        return "payment" if self.state.mode.confirms_payment else "setup"

    def request_body(self) -> dict:
        if self.state.mode is CheckoutMode.PAY_NOW:
            return {"amount": self.amount, "currency": self.currency, "saveCard": self.state.save_card}
        return {}

    async def start(self) -> bool:
        """Load the widget for the initial mode."""

        return await self._refresh()

    async def select_mode(self, mode: CheckoutMode) -> bool:
        self.state.mode = mode
        return await self._refresh()

    async def toggle_save_card(self, checked: bool) -> bool:
        """Re-request the pay-now intent with the new flag; ignored in other modes."""

        if self.state.mode is not CheckoutMode.PAY_NOW:
            return False
        self.state.save_card = checked
        return await self._refresh()

    def _teardown(self) -> None:
        if self.widget is not None:
            self.widget.unmount()
            self.widget = None
        self.state.client_secret = None
        self.state.customer_id = None

    def _show_message(self, text: str) -> None:
        self.state.message = text
        if self.on_message is not None:
            self.on_message(text)

    async def _refresh(self) -> bool:
        """Issue one broker request for the current mode and mount its widget.

        Returns False when the request failed or was superseded by a newer
        transition before its response arrived.
        """

        self.state.generation += 1
        generation = self.state.generation
        mode = self.state.mode
        self._teardown()

        try:
            resp = await self.http.post(MODE_ENDPOINTS[mode], json=self.request_body())
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            if generation == self.state.generation:
                self._show_message(f"Network Error: {exc}")
            return False

        if generation != self.state.generation:
            logger.info("stale broker response dropped mode=%s generation=%s", mode.value, generation)
            return False

        if not isinstance(payload, dict):
            payload = {}
        error = payload.get("error")
        if error:
            self._show_message(error.get("message", "Unknown error"))
            return False

        client_secret = payload.get("clientSecret")
        if resp.is_error or not client_secret:
            self._show_message(f"Unexpected broker response: HTTP {resp.status_code}")
            return False

        self.state.client_secret = client_secret
        self.state.customer_id = payload.get("customerId")
        self.widget = self.widget_factory(self.state.client_secret)
        self.widget.mount()
        return True
