"""Tests for the Rich ledger renderer."""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vidledger.models.errors import ErrorKind
from vidledger.models.results import Result
from vidledger.monitor.renderer import LedgerRenderer


def _renderer() -> tuple[LedgerRenderer, StringIO]:
    buf = StringIO()
    return LedgerRenderer(console=Console(file=buf, width=200, force_terminal=False)), buf


class TestLedgerRenderer:
    def test_render_ledger_returns_panel(self, ledger):
        renderer, _ = _renderer()
        assert isinstance(renderer.render_ledger(ledger), Panel)

    def test_listing_table_has_one_row_per_listing(self, ledger, ctx):
        ledger.list_video(ctx("ST1CREATOR"), 1, 100, 10)
        ledger.list_video(ctx("ST1CREATOR"), 2, 300, 0)
        renderer, _ = _renderer()
        table = renderer.build_listing_table(ledger)
        assert isinstance(table, Table)
        assert table.row_count == 2

    def test_print_ledger_shows_listing(self, ledger, ctx):
        ledger.list_video(ctx("ST1CREATOR"), 77, 100, 10)
        renderer, buf = _renderer()
        renderer.print_ledger(ledger)
        output = buf.getvalue()
        assert "ST1CREATOR" in output
        assert "ACTIVE" in output
        assert "1/10000" in output

    def test_transfer_table(self, ledger, ctx, host):
        ledger.list_video(ctx("ST1CREATOR"), 1, 100, 10)
        renderer, _ = _renderer()
        assert renderer.build_transfer_table(host.transfers).row_count == 1

    def test_error_table_lists_all_kinds(self):
        assert LedgerRenderer.build_error_table().row_count == len(ErrorKind)

    def test_format_result(self):
        ok = LedgerRenderer.format_result(Result.success(0, operation="list_video"))
        err = LedgerRenderer.format_result(
            Result.failure(ErrorKind.DUPLICATE_LISTING, operation="list_video")
        )
        assert "list_video" in ok and "0" in ok
        assert "DuplicateListing" in err and "u114" in err

    def test_chain_verification_message(self):
        renderer, buf = _renderer()
        renderer.print_chain_verification(True)
        renderer.print_chain_verification(False)
        output = buf.getvalue()
        assert "valid" in output
        assert "BROKEN" in output

    def test_format_result_without_error_kind(self):
        text = LedgerRenderer.format_result(Result(ok=False, operation="buy_video"))
        assert "unknown error" in text

    def test_identities_with_markup_are_printed_literally(self, ledger, ctx, host):
        odd = "ST1[/bold]X"
        ledger.list_video(ctx(odd), 1, 100, 10)
        renderer, buf = _renderer()
        renderer.print_result(f"{odd} lists video 1", Result.success(0, operation="list_video"))
        renderer.print_ledger(ledger)
        renderer.console.print(renderer.build_transfer_table(host.transfers))
        output = buf.getvalue()
        assert f"{odd} lists video 1" in output
        assert output.count(odd) >= 4
