"""Unit tests for checkout mode parsing and endpoint mapping."""

import pytest

from salonpay.common.modes import MODE_ENDPOINTS, CheckoutMode, parse_mode


def test_parse_known_mode():
    assert parse_mode("reserve") is CheckoutMode.RESERVE


def test_parse_unknown_mode():
    """Unknown radio values must not silently fall back to a mode."""

    with pytest.raises(ValueError, match="Invalid checkout mode"):
        parse_mode("refund")


def test_every_mode_has_an_endpoint():
    assert set(MODE_ENDPOINTS) == set(CheckoutMode)
    assert MODE_ENDPOINTS[CheckoutMode.SAVE_CARD] == "/create-customer-setup-intent"


def test_only_pay_now_confirms_a_payment():
    assert CheckoutMode.PAY_NOW.confirms_payment
    assert not CheckoutMode.RESERVE.confirms_payment
    assert not CheckoutMode.SAVE_CARD.confirms_payment
