"""Rich terminal renderer for the marketplace ledger.

Turns ledger state into Rich renderables for terminal display.

Color scheme
------------
- green     : active
- yellow    : sold
- dim       : inactive
- magenta   : pending
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vidledger.models.errors import ErrorKind
from vidledger.models.listings import ListingStatus

if TYPE_CHECKING:
    from vidledger.core.host import TransferRecord
    from vidledger.core.marketplace import MarketplaceLedger
    from vidledger.models.results import Result


# ---------------------------------------------------------------------------
# Status -> Rich markup
# ---------------------------------------------------------------------------

_STATUS_ICONS: dict[str, str] = {
    ListingStatus.ACTIVE.value: "[green]ACTIVE[/green]",
    ListingStatus.SOLD.value: "[yellow]SOLD[/yellow]",
    ListingStatus.INACTIVE.value: "[dim]INACTIVE[/dim]",
    ListingStatus.PENDING.value: "[magenta]PENDING[/magenta]",
}


class LedgerRenderer:
    """Renders ledger state as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Renderables
    # ------------------------------------------------------------------

    def render_ledger(self, ledger: MarketplaceLedger) -> Panel:
        """Render listings plus a configuration footer as one Panel."""
        state = ledger.state
        table = self.build_listing_table(ledger)
        summary = "  |  ".join(
            [
                f"[bold]Listings:[/bold] {state.listing_counter}/{state.max_listings}",
                f"[bold]Fee:[/bold] {state.platform_fee}",
                f"[bold]Admin:[/bold] {escape(state.admin_principal)}",
            ]
        )
        return Panel(
            Group(table, Text(""), Text.from_markup(summary)),
            title="[bold]Video Marketplace Ledger[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    def build_listing_table(self, ledger: MarketplaceLedger) -> Table:
        """Build a Rich Table with one row per listing."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=5, justify="right")
        table.add_column("Video", justify="right")
        table.add_column("Status", justify="center")
        table.add_column("Price", justify="right")
        table.add_column("Owner")
        table.add_column("Creator")
        table.add_column("Royalty", justify="right")
        table.add_column("Views", justify="right")
        table.add_column("Likes", justify="right")
        table.add_column("Height", justify="right")

        for listing_id, listing in ledger.all_listings():
            table.add_row(
                str(listing_id),
                str(listing.video_id),
                _STATUS_ICONS.get(listing.status, escape(listing.status)),
                str(listing.price),
                escape(listing.owner),
                escape(listing.creator),
                f"{listing.royalty_rate}%",
                str(listing.views),
                str(listing.likes),
                str(listing.timestamp),
            )
        return table

    def build_transfer_table(self, transfers: list[TransferRecord]) -> Table:
        table = Table(title="Value Transfers", header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Amount", justify="right")
        table.add_column("From")
        table.add_column("To")
        for i, record in enumerate(transfers):
            table.add_row(
                str(i),
                str(record.amount),
                escape(record.sender),
                escape(record.recipient),
            )
        return table

    @staticmethod
    def build_error_table() -> Table:
        """Table of every error kind with its numeric code."""
        table = Table(title="Marketplace Error Kinds", header_style="bold cyan")
        table.add_column("Code", justify="right")
        table.add_column("Kind")
        for kind in ErrorKind:
            table.add_row(f"u{kind.code}", kind.value)
        return table

    @staticmethod
    def format_result(result: Result) -> str:
        """One-line markup for an operation result.

        Operation names and values are escaped; only the ok/err tag is markup.
        """
        operation = escape(result.operation)
        if result.ok:
            return f"[green]ok[/green] {operation} -> {escape(repr(result.value))}"
        if result.error is None:
            return f"[bold red]err[/bold red] {operation} -> unknown error"
        return (
            f"[bold red]err[/bold red] {operation} -> "
            f"{result.error.value} (u{result.error.code})"
        )

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_ledger(self, ledger: MarketplaceLedger) -> None:
        self.console.print(self.render_ledger(ledger))

    def print_result(self, label: str, result: Result) -> None:
        self.console.print(f"[cyan]{escape(label)}[/cyan]  {self.format_result(result)}")

    def print_chain_verification(self, valid: bool) -> None:
        """Print a journal verification result."""
        if valid:
            self.console.print("[green]Event journal hash chain is valid.[/green]")
        else:
            self.console.print("[bold red]Event journal hash chain is BROKEN![/bold red]")
