"""Smoke check: walk a running broker through the checkout modes."""

import argparse
import asyncio

import httpx

from salonpay.client.checkout import CheckoutController
from salonpay.common.modes import CheckoutMode, parse_mode


class PrintWidget:
    """Stand-in for the payment element; reports mount/unmount only."""

    def __init__(self, client_secret: str) -> None:
        self.masked = f"{client_secret[:12]}..." if client_secret else "<empty>"

    def mount(self) -> None:
        print(f"  widget mounted secret={self.masked}")

    def unmount(self) -> None:
        print("  widget torn down")


async def run(
    base_url: str,
    amount: int,
    currency: str,
    save_card: bool,
    modes: list[CheckoutMode],
) -> int:
    """Exercise each requested mode and return the number of failed transitions."""

    failures = 0
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as http:
        controller = CheckoutController(
            http,
            PrintWidget,
            amount=amount,
            currency=currency,
            on_message=lambda text: print(f"  message: {text}"),
        )
        for mode in modes:
            print(f"mode={mode.value}")
            ok = await controller.select_mode(mode)
            if ok and mode is CheckoutMode.PAY_NOW and save_card:
                print("  saveCard=true")
                ok = await controller.toggle_save_card(True)
            failures += 0 if ok else 1
            if ok:
                print(f"  customer_id={controller.state.customer_id} confirm={controller.confirm_kind}")
    print(f"failures={failures}")
    return failures


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:4242")
    parser.add_argument("--amount", type=int, default=100)
    parser.add_argument("--currency", default="gbp")
    parser.add_argument("--save-card", action="store_true")
    parser.add_argument(
        "--mode",
        dest="modes",
        action="append",
        type=parse_mode,
        help="pay_now, reserve or save_card; repeatable, defaults to all three",
    )
    args = parser.parse_args()
    modes = args.modes or list(CheckoutMode)
    failures = asyncio.run(run(args.base_url, args.amount, args.currency, args.save_card, modes))
    raise SystemExit(1 if failures else 0)
