"""CLI commands for paying an order."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

import click

from storefront.application.dto import PaymentSessionDTO
from storefront.domain.model.payment import PaymentProvider, PaymentSession
from storefront.infrastructure.bootstrap import Storefront
from storefront.infrastructure.cli.runner import run

_PROVIDERS = {"card": PaymentProvider.CARD, "wallet": PaymentProvider.WALLET}


def _to_dto(session: PaymentSession) -> PaymentSessionDTO:
    is_card = session.provider.confirms_in_process
    return PaymentSessionDTO(
        order_id=session.order_id,
        provider=session.provider.value,
        status=session.status.value,
        client_secret=session.provider_session_token if is_card else None,
        redirect_url=session.redirect_url,
    )


def parse_callback(raw: str) -> dict[str, str]:
    """Accept either a full return URL or just its query string."""
    query = urlsplit(raw).query if "?" in raw else raw.lstrip("?")
    return dict(parse_qsl(query))


@click.command("start")
@click.option("--order", "order_id", required=True, help="Order ID to pay.")
@click.option(
    "--provider",
    type=click.Choice(sorted(_PROVIDERS)),
    default="card",
    show_default=True,
    help="Payment provider.",
)
def pay_start(order_id: str, provider: str) -> None:
    """Open a payment session for a pending order."""

    async def action(storefront: Storefront) -> None:
        session = await storefront.payments.checkout(order_id, _PROVIDERS[provider])
        dto = _to_dto(session)
        click.echo(f"Payment session for order {dto.order_id}: {dto.status}")
        if dto.redirect_url:
            click.echo(f"Complete the payment at: {dto.redirect_url}")
            click.echo("Then run: storefront pay callback '<return url>'")
        if dto.client_secret:
            click.echo(f"Client secret: {dto.client_secret}")
            click.echo(
                f"Return URL:    {storefront.payments.return_url(dto.order_id)}"
            )

    run(action)


@click.command("callback")
@click.argument("return_url")
def pay_callback(return_url: str) -> None:
    """Resolve a provider's return redirect against the server."""
    params = parse_callback(return_url)

    async def action(storefront: Storefront) -> None:
        outcome = await storefront.payments.handle_callback(params)
        click.echo(
            f"Payment completed successfully! Order #{outcome.order.display_number} is paid."
        )

    run(action)
