"""API request/response schemas for intent broker endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentRequest(BaseModel):
    """Payload accepted by `POST /create-payment-intent`.

    `amount` is checked here, before any processor call: it must be a real
    JSON integer greater than zero.
    """

    model_config = ConfigDict(populate_by_name=True)

    amount: int = Field(gt=0, strict=True)
    currency: str | None = None
    save_card: bool = Field(default=False, alias="saveCard")


class IntentResponse(BaseModel):
    """Client secret plus the freshly created customer id."""

    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")
    customer_id: str = Field(alias="customerId")


class ConfigResponse(BaseModel):
    """Public keys for the connected-account variant of the page."""

    model_config = ConfigDict(populate_by_name=True)

    publishable_key: str = Field(alias="publishableKey")
    connected_account_id: str = Field(alias="connectedAccountId")
