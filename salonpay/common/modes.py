"""Checkout modes and the broker endpoint each one calls."""

from enum import Enum


class CheckoutMode(str, Enum):
    PAY_NOW = "pay_now"
    RESERVE = "reserve"
    SAVE_CARD = "save_card"

    @property
    def confirms_payment(self) -> bool:
        """PayNow confirms a payment; the other modes confirm a setup."""

        return self is CheckoutMode.PAY_NOW


MODE_ENDPOINTS: dict[CheckoutMode, str] = {
    CheckoutMode.PAY_NOW: "/create-payment-intent",
    CheckoutMode.RESERVE: "/create-setup-intent",
    CheckoutMode.SAVE_CARD: "/create-customer-setup-intent",
}


def parse_mode(value: str) -> CheckoutMode:
    """Raise when a value does not name a checkout mode."""

    try:
        return CheckoutMode(value)
    except ValueError:
        raise ValueError(f"Invalid checkout mode: {value}") from None
