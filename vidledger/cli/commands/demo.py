"""``vidledger demo``: run the reference marketplace scenario.

Lists a video, has a second identity buy it and resell it, then caps the
ledger at one listing and shows that a further listing is refused.  The
ledger state, recorded transfers and journal status are printed at the end.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from vidledger.config import settings
from vidledger.core.host import SimulatedHost
from vidledger.core.journal import JournalIntegrityError
from vidledger.core.marketplace import MarketplaceLedger
from vidledger.monitor.renderer import LedgerRenderer

logger = logging.getLogger(__name__)

console = Console()


def demo_cmd(
    creator: str = typer.Option(
        "ST1CREATOR", "--creator", "-c", help="Identity that lists the video."
    ),
    buyer: str = typer.Option(
        "ST2BUYER", "--buyer", "-b", help="Identity that buys and resells it."
    ),
    price: int = typer.Option(100, "--price", help="Initial listing price."),
    resell_price: int = typer.Option(200, "--resell-price", help="Resale price."),
) -> None:
    """Run the list / buy / resell / capacity scenario against a fresh ledger."""
    host = SimulatedHost()
    ledger = MarketplaceLedger.from_settings(host, settings)
    renderer = LedgerRenderer(console=console)
    admin = ledger.state.admin_principal

    console.print()
    console.print(
        Panel(
            "[bold]Video Marketplace Demo[/bold]\n\n"
            f"Creator [cyan]{escape(creator)}[/cyan] lists, buyer [cyan]{escape(buyer)}[/cyan] "
            f"buys and resells.\nAdmin: [cyan]{escape(admin)}[/cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    listed = ledger.list_video(host.context(creator), 1, price, 10)
    renderer.print_result(f"{creator} lists video 1 at {price}", listed)
    if not listed.ok:
        raise typer.Exit(code=1)
    listing_id = listed.value

    host.advance()
    renderer.print_result(
        f"{buyer} buys listing {listing_id}",
        ledger.buy_video(host.context(buyer), listing_id),
    )

    host.advance()
    renderer.print_result(
        f"{buyer} resells listing {listing_id} at {resell_price}",
        ledger.resell_video(host.context(buyer), listing_id, resell_price),
    )

    host.advance()
    renderer.print_result(
        f"{admin} caps listings at 1",
        ledger.set_max_listings(host.context(admin), 1),
    )
    renderer.print_result(
        f"{creator} lists video 2",
        ledger.list_video(host.context(creator), 2, price, 10),
    )

    console.print()
    renderer.print_ledger(ledger)
    console.print(renderer.build_transfer_table(host.transfers))

    if ledger.journal is not None:
        try:
            valid = ledger.journal.verify_chain()
        except JournalIntegrityError as exc:
            logger.error("Event journal verification failed: %s", exc)
            valid = False
        renderer.print_chain_verification(valid)
        if not valid:
            raise typer.Exit(code=1)
