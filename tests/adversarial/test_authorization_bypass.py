"""Adversarial tests — authorization bypass and state-corruption attempts.

These tests verify that:
1. No non-admin identity can change ledger configuration
2. No identity other than the owner/creator can move a listing
3. Rejected calls never leave partial writes behind
4. The video index is permanent across every lifecycle path
"""

from __future__ import annotations

import pytest

from vidledger.core.host import SimulatedHost
from vidledger.core.marketplace import MarketplaceLedger
from vidledger.models.errors import ErrorKind

ADMIN = "ST1TEST"
CREATOR = "ST1CREATOR"
BUYER = "ST2BUYER"
ATTACKER = "ST6ATTACKER"


def _snapshot(ledger: MarketplaceLedger) -> dict:
    return ledger.state.model_dump()


class TestAdminBypassAttempts:
    @pytest.mark.parametrize(
        "method,arg",
        [
            ("set_admin_principal", ATTACKER),
            ("set_max_listings", 1),
            ("set_platform_fee", 0),
        ],
    )
    def test_attacker_cannot_configure(self, ledger, ctx, method, arg):
        before = _snapshot(ledger)
        result = getattr(ledger, method)(ctx(ATTACKER), arg)
        assert result.error == ErrorKind.NOT_AUTHORIZED
        assert _snapshot(ledger) == before

    def test_admin_cannot_be_burned(self, ledger, ctx):
        burned = ledger.set_admin_principal(ctx(ADMIN), "SP000000000000000000002Q6VF78")
        assert burned.error == ErrorKind.NOT_AUTHORIZED
        # Admin keeps authority afterwards.
        assert ledger.set_platform_fee(ctx(ADMIN), 1).ok

    def test_custom_burn_identity_honoured(self, host, ctx):
        ledger = MarketplaceLedger(host, burn_principal="ST0BURN")
        assert ledger.set_admin_principal(ctx(ADMIN), "ST0BURN").error == ErrorKind.NOT_AUTHORIZED


class TestListingBypassAttempts:
    def test_attacker_cannot_touch_listing(self, ledger, ctx, listed):
        before = _snapshot(ledger)
        assert ledger.resell_video(ctx(ATTACKER), listed, 1).error == ErrorKind.NOT_AUTHORIZED
        assert ledger.deactivate_listing(ctx(ATTACKER), listed).error == ErrorKind.NOT_AUTHORIZED
        assert ledger.update_listing(ctx(ATTACKER), listed, 1, "sold").error == ErrorKind.NOT_AUTHORIZED
        assert ledger.increment_views(ctx(ATTACKER), listed).error == ErrorKind.ACCESS_DENIED
        assert ledger.like_video(ctx(ATTACKER), listed).error == ErrorKind.ACCESS_DENIED
        assert _snapshot(ledger) == before

    def test_creator_cannot_resell_what_they_sold(self, ledger, ctx, sold):
        assert ledger.resell_video(ctx(CREATOR), sold, 1).error == ErrorKind.NOT_AUTHORIZED

    def test_status_update_cannot_fake_inactive(self, ledger, ctx, listed):
        result = ledger.update_listing(ctx(CREATOR), listed, 100, "inactive")
        assert result.error == ErrorKind.INVALID_STATUS
        assert ledger.get_listing(listed).status == "active"

    def test_cannot_relist_used_video_after_deactivation(self, ledger, ctx, listed):
        ledger.deactivate_listing(ctx(CREATOR), listed)
        assert ledger.list_video(ctx(CREATOR), 1, 100, 10).error == ErrorKind.DUPLICATE_LISTING
        assert ledger.list_video(ctx(ATTACKER), 1, 1, 0).error == ErrorKind.DUPLICATE_LISTING


class TestNoPartialWrites:
    def test_every_rejection_leaves_state_unchanged(self, ledger, ctx, host, sold):
        host.advance(50)
        before = _snapshot(ledger)
        rejected = [
            ledger.list_video(ctx(CREATOR), 1, 100, 10),
            ledger.list_video(ctx(CREATOR), 2, 0, 10),
            ledger.buy_video(ctx(ATTACKER), sold),
            ledger.buy_video(ctx(ATTACKER), 42),
            ledger.resell_video(ctx(BUYER), sold, 0),
            ledger.update_listing(ctx(CREATOR), sold, 0, "active"),
            ledger.update_listing(ctx(CREATOR), sold, 10, "bogus"),
            ledger.deactivate_listing(ctx(BUYER), sold),
            ledger.increment_views(ctx(CREATOR), sold),
            ledger.set_platform_fee(ctx(ADMIN), -1),
            ledger.set_max_listings(ctx(ADMIN), 0),
        ]
        assert all(not r.ok for r in rejected)
        assert _snapshot(ledger) == before

    def test_refused_fee_leaves_counter_and_index(self, ledger, ctx, host, listed):
        host.fail_transfers = True
        before = _snapshot(ledger)
        assert ledger.list_video(ctx(CREATOR), 2, 100, 10).error == ErrorKind.PAYMENT_FAILED
        assert _snapshot(ledger) == before
        host.fail_transfers = False
        assert ledger.list_video(ctx(CREATOR), 2, 100, 10).value == 1


class TestVideoIndexPermanence:
    def test_index_survives_full_lifecycle(self, ledger, ctx):
        ledger.list_video(ctx(CREATOR), 7, 100, 10)
        ledger.buy_video(ctx(BUYER), 0)
        ledger.resell_video(ctx(BUYER), 0, 300)
        ledger.update_listing(ctx(CREATOR), 0, 350, "pending")
        ledger.deactivate_listing(ctx(BUYER), 0)
        ledger.resell_video(ctx(BUYER), 0, 400)
        ledger.buy_video(ctx(ATTACKER), 0)
        assert ledger.state.listings_by_video == {7: 0}
        assert ledger.get_listing(0).video_id == 7

    def test_counter_matches_listings(self):
        host = SimulatedHost()
        ledger = MarketplaceLedger(host)
        for vid in range(1, 6):
            ledger.list_video(host.context(CREATOR), vid, 10, 0)
            ledger.list_video(host.context(CREATOR), vid, 10, 0)  # duplicate, rejected
        assert ledger.get_listing_count() == 5
        assert sorted(ledger.state.listings) == list(range(5))
        assert sorted(ledger.state.listings_by_video.values()) == list(range(5))
