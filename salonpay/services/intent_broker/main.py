"""Intent broker API: checkout page, public config and intent creation.

Each intent endpoint creates a processor customer plus one intent and returns
the intent's client secret. Processor failures come back as HTTP 400 with
`{"error": {"message": ...}}`.
"""

from pathlib import Path
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from salonpay.common.config import Settings, settings
from salonpay.common.errors import ProcessorCallFailed
from salonpay.common.logging import checkout_mode_ctx, configure_logging, logger, request_id_ctx
from salonpay.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from salonpay.common.modes import CheckoutMode
from salonpay.common.startup import log_startup_config
from salonpay.common.tracing import instrument_app, setup_tracing
from salonpay.services.intent_broker.processor import PaymentProcessor, StripeProcessor
from salonpay.services.intent_broker.schemas import ConfigResponse, IntentResponse, PaymentIntentRequest
from salonpay.services.intent_broker.service import IntentBroker

BASE_DIR = Path(__file__).resolve().parent
DOMAIN_ASSOCIATION_ROUTE = "/.well-known/apple-developer-merchantid-domain-association"
CURRENCY_SYMBOLS = {"gbp": "£", "usd": "$", "eur": "€"}

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def format_amount(amount: int, currency: str) -> str:
    """Render minor units for the pay button, e.g. 100 gbp -> £1.00."""

    symbol = CURRENCY_SYMBOLS.get(currency.lower())
    value = f"{amount / 100:.2f}"
    if symbol is None:
        return f"{value} {currency.upper()}"
    return f"{symbol}{value}"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{loc or 'body'}: {first.get('msg', 'invalid value')}"


def get_broker(request: Request) -> IntentBroker:
    return request.app.state.broker


def create_app(
    app_settings: Settings | None = None,
    processor: PaymentProcessor | None = None,
) -> FastAPI:
    """Build the broker app around an explicitly constructed processor client."""

    app_settings = app_settings or settings
    if processor is None:
        processor = StripeProcessor(
            app_settings.stripe_secret_key,
            connected_account_id=app_settings.stripe_connected_account_id,
        )

    app = FastAPI(title="SalonPay Intent Broker")
    app.state.settings = app_settings
    app.state.broker = IntentBroker(
        processor,
        default_currency=app_settings.default_currency,
        service_name=app_settings.service_name,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    instrument_app(app)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Tag logs with a request id and record request count and latency."""

        request_id_ctx.set(request.headers.get("x-request-id") or str(uuid4()))
        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=app_settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=app_settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.exception_handler(ProcessorCallFailed)
    async def processor_error_handler(request: Request, exc: ProcessorCallFailed):
        logger.warning("processor call failed path=%s message=%s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning("request rejected path=%s message=%s", request.url.path, message)
        return JSONResponse(status_code=400, content={"error": {"message": message}})

    @app.get("/", include_in_schema=False)
    def index(request: Request):
        """Checkout page with the publishable key injected."""

        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "publishable_key": app_settings.stripe_publishable_key,
                "connected_account_id": app_settings.stripe_connected_account_id or "",
                "checkout_amount": app_settings.checkout_amount,
                "currency": app_settings.default_currency,
                "amount_label": format_amount(app_settings.checkout_amount, app_settings.default_currency),
            },
        )

    @app.get("/config", response_model=ConfigResponse)
    def config():
        """Public keys for the connected-account page variant."""

        if not app_settings.stripe_connected_account_id:
            raise HTTPException(status_code=404, detail="connected account not configured")
        return ConfigResponse(
            publishable_key=app_settings.stripe_publishable_key,
            connected_account_id=app_settings.stripe_connected_account_id,
        )

    @app.post("/create-payment-intent", response_model=IntentResponse)
    def create_payment_intent(req: PaymentIntentRequest, broker: IntentBroker = Depends(get_broker)):
        """Pay now, optionally keeping the card for off-session charges."""

        checkout_mode_ctx.set(CheckoutMode.PAY_NOW.value)
        return broker.create_pay_now_intent(req.amount, currency=req.currency, save_card=req.save_card)

    @app.post("/create-setup-intent", response_model=IntentResponse)
    def create_setup_intent(broker: IntentBroker = Depends(get_broker)):
        """Zero upfront payment: verify the card to reserve a slot."""

        checkout_mode_ctx.set(CheckoutMode.RESERVE.value)
        return broker.create_reserve_intent()

    @app.post("/create-customer-setup-intent", response_model=IntentResponse)
    def create_customer_setup_intent(broker: IntentBroker = Depends(get_broker)):
        """Save a card on file for a new customer."""

        checkout_mode_ctx.set(CheckoutMode.SAVE_CARD.value)
        return broker.create_save_card_intent()

    @app.get(DOMAIN_ASSOCIATION_ROUTE, include_in_schema=False)
    def domain_association():
        """Wallet domain verification file, served verbatim when configured."""

        path = Path(app_settings.domain_association_path) if app_settings.domain_association_path else None
        if path is None or not path.is_file():
            raise HTTPException(status_code=404, detail="not found")
        return FileResponse(path, media_type="text/plain")

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"ok": True}

    return app


configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    [
        "port",
        "allowed_origins",
        "default_currency",
        "stripe_secret_key",
        "stripe_publishable_key",
        "stripe_connected_account_id",
        "otel_exporter_otlp_endpoint",
    ],
)
app = create_app()


def run() -> None:
    """Console entrypoint: serve the broker on the configured port."""

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
