"""Shared test fixtures for vidledger."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from vidledger.core.host import CallContext, SimulatedHost
from vidledger.core.journal import EventJournal
from vidledger.core.marketplace import MarketplaceLedger

CREATOR = "ST1CREATOR"
BUYER = "ST2BUYER"


@pytest.fixture
def host() -> SimulatedHost:
    """Provide a fresh in-memory host at height 0."""
    return SimulatedHost()


@pytest.fixture
def journal() -> EventJournal:
    return EventJournal()


@pytest.fixture
def ledger(host: SimulatedHost, journal: EventJournal) -> MarketplaceLedger:
    """Provide a fresh ledger with default configuration and a journal."""
    return MarketplaceLedger(host, journal=journal)


@pytest.fixture
def ctx(host: SimulatedHost) -> Callable[[str], CallContext]:
    """Factory fixture: build a CallContext for a caller at the host height."""

    def _factory(caller: str) -> CallContext:
        return host.context(caller)

    return _factory


@pytest.fixture
def listed(ledger: MarketplaceLedger, ctx: Callable[[str], CallContext]) -> int:
    """A ledger with video 1 listed by CREATOR at 100 / 10%; returns its id."""
    return ledger.list_video(ctx(CREATOR), 1, 100, 10).unwrap()


@pytest.fixture
def sold(
    ledger: MarketplaceLedger,
    ctx: Callable[[str], CallContext],
    listed: int,
) -> int:
    """The ``listed`` listing after BUYER bought it; returns its id."""
    ledger.buy_video(ctx(BUYER), listed).unwrap()
    return listed
