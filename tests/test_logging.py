"""Secret scrubbing in the log pipeline."""

import logging

from salonpay.common.logging import SecretRedactionFilter, redact_secrets


def test_client_secrets_and_keys_redacted():
    text = "secret=pi_3Nx_secret_Ab12 seti_1Q_secret_zz key=sk_live_51Habc customer=cus_9"

    assert redact_secrets(text) == "secret=<redacted> <redacted> key=<redacted> customer=cus_9"


def test_filter_rewrites_formatted_message():
    record = logging.LogRecord(
        "salonpay", logging.INFO, __file__, 1, "mounted %s for %s", ("pi_1_secret_abc", "cus_1"), None
    )

    assert SecretRedactionFilter().filter(record)
    assert record.getMessage() == "mounted <redacted> for cus_1"


def test_filter_leaves_clean_records_alone():
    record = logging.LogRecord("salonpay", logging.INFO, __file__, 1, "intent created id=%s", ("pi_1",), None)

    SecretRedactionFilter().filter(record)

    assert record.args == ("pi_1",)
