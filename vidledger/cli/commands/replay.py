"""``vidledger replay``: run a JSON script of operations against a fresh ledger.

Script format::

    [
      {"caller": "ST1A", "op": "list_video",
       "args": {"video_id": 1, "price": 100, "royalty_rate": 10}},
      {"caller": "ST2B", "height": 5, "op": "buy_video",
       "args": {"listing_id": 0}},
      {"caller": "ST2B", "op": "buy_video", "args": {"listing_id": 0},
       "expect": "ListingInactive"}
    ]

``height`` (optional) moves the simulated block height forward before the
step.  ``expect`` (optional) is ``"ok"`` or an error kind name; any step
whose result differs makes the command exit with code 1.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape

from vidledger.config import settings
from vidledger.core.host import SimulatedHost
from vidledger.core.marketplace import MarketplaceLedger
from vidledger.models.results import Result
from vidledger.monitor.renderer import LedgerRenderer

logger = logging.getLogger(__name__)

console = Console()

REPLAYABLE_OPERATIONS: frozenset[str] = frozenset(
    {
        "set_admin_principal",
        "set_max_listings",
        "set_platform_fee",
        "list_video",
        "buy_video",
        "resell_video",
        "deactivate_listing",
        "update_listing",
        "increment_views",
        "like_video",
    }
)


class ReplayStep(BaseModel):
    """One scripted ledger call."""

    model_config = ConfigDict(frozen=True)

    caller: str
    op: str
    args: dict[str, Any] = {}
    height: int | None = None
    expect: str | None = None


_STEPS = TypeAdapter(list[ReplayStep])


def load_script(path: Path) -> list[ReplayStep]:
    """Parse and validate a replay script file."""
    return _STEPS.validate_json(path.read_text(encoding="utf-8"))


def run_step(ledger: MarketplaceLedger, host: SimulatedHost, step: ReplayStep) -> Result:
    """Apply *step* to *ledger*, moving *host* to the step's height first.

    Raises ``ValueError`` for an unknown operation or a height that would
    move backwards, and ``TypeError`` for arguments the operation does not
    accept.
    """
    if step.op not in REPLAYABLE_OPERATIONS:
        raise ValueError(f"Unknown operation: {step.op!r}")
    if step.height is not None:
        host.set_height(step.height)
    operation = getattr(ledger, step.op)
    return operation(host.context(step.caller), **step.args)


def matches_expectation(result: Result, expect: str | None) -> bool:
    if expect is None:
        return True
    if expect == "ok":
        return result.ok
    return result.error is not None and result.error.value == expect


def replay_cmd(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON script to run."),
    show_ledger: bool = typer.Option(
        True, "--show-ledger/--no-show-ledger", help="Print the final ledger table."
    ),
) -> None:
    """Run a JSON script of ledger operations and report each result."""
    try:
        steps = load_script(script)
    except ValidationError as exc:
        console.print(f"[bold red]Invalid script:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    host = SimulatedHost()
    ledger = MarketplaceLedger.from_settings(host, settings)
    renderer = LedgerRenderer(console=console)

    mismatches = 0
    for index, step in enumerate(steps):
        try:
            result = run_step(ledger, host, step)
        except (ValueError, TypeError) as exc:
            console.print(
                f"[bold red]Step {index} ({escape(step.op)}) is malformed:[/bold red] "
                f"{escape(str(exc))}"
            )
            raise typer.Exit(code=2)

        label = f"[{index}] {step.caller}"
        renderer.print_result(label, result)
        if not matches_expectation(result, step.expect):
            mismatches += 1
            console.print(f"    [bold red]expected {escape(step.expect or '')}[/bold red]")
            logger.warning("Step %d (%s) did not match expectation %s.", index, step.op, step.expect)

    if show_ledger:
        console.print()
        renderer.print_ledger(ledger)

    if mismatches:
        console.print(f"[bold red]{mismatches} step(s) did not match expectations.[/bold red]")
        raise typer.Exit(code=1)
