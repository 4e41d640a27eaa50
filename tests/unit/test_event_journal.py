"""Tests for the EventJournal — append, hash chain, ledger integration."""

from __future__ import annotations

from vidledger.core.journal import EventJournal, seal, state_fingerprint
from vidledger.models.ledger import LedgerState

CREATOR = "ST1CREATOR"
BUYER = "ST2BUYER"


class TestEventJournal:
    def test_empty_chain_is_valid(self, journal: EventJournal):
        assert len(journal) == 0
        assert journal.latest() is None
        assert journal.verify_chain() is True

    def test_append_links_entries(self, journal: EventJournal):
        first = journal.append("list_video", CREATOR, 0, listing_id=0)
        second = journal.append("buy_video", BUYER, 1, listing_id=0)
        assert first.sequence == 0
        assert first.previous_entry_hash == ""
        assert second.previous_entry_hash == first.entry_hash
        assert len(first.entry_hash) == 64
        assert journal.verify_chain() is True

    def test_seal_matches_stored_hash(self, journal: EventJournal):
        entry = journal.append("list_video", CREATOR, 0, listing_id=0, payload={"price": 100})
        assert seal(entry) == entry.entry_hash
        assert seal(entry.model_copy(update={"entry_hash": "x"})) == entry.entry_hash

    def test_state_fingerprint_prefix_and_stability(self):
        digest = state_fingerprint(LedgerState())
        assert digest.startswith("sha256:")
        assert digest == state_fingerprint(LedgerState())
        assert digest != state_fingerprint(LedgerState(platform_fee=1))

    def test_for_listing_filters(self, journal: EventJournal):
        journal.append("list_video", CREATOR, 0, listing_id=0)
        journal.append("list_video", CREATOR, 0, listing_id=1)
        journal.append("set_platform_fee", "ST1TEST", 0)
        assert [e.listing_id for e in journal.for_listing(1)] == [1]

    def test_entries_returns_copy(self, journal: EventJournal):
        journal.append("list_video", CREATOR, 0)
        journal.entries().clear()
        assert len(journal) == 1


class TestLedgerJournaling:
    def test_successful_mutations_are_journaled(self, ledger, ctx, journal):
        ledger.list_video(ctx(CREATOR), 1, 100, 10)
        ledger.buy_video(ctx(BUYER), 0)
        ledger.resell_video(ctx(BUYER), 0, 200)
        assert [e.operation for e in journal.entries()] == [
            "list_video",
            "buy_video",
            "resell_video",
        ]
        assert journal.entries()[1].payload == {"seller": CREATOR, "price": 100}
        assert journal.verify_chain()

    def test_rejections_are_not_journaled(self, ledger, ctx, journal):
        ledger.list_video(ctx(CREATOR), 0, 100, 10)
        ledger.buy_video(ctx(BUYER), 0)
        assert len(journal) == 0

    def test_counter_bumps_are_journaled(self, ledger, ctx, journal, listed):
        ledger.like_video(ctx(CREATOR), listed)
        assert journal.latest().operation == "like_video"
        assert journal.latest().payload == {"likes": 1}

    def test_ledger_without_journal(self, host, ctx):
        from vidledger.core.marketplace import MarketplaceLedger

        ledger = MarketplaceLedger(host)
        assert ledger.journal is None
        assert ledger.list_video(ctx(CREATOR), 1, 100, 10).ok
