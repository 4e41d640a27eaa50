"""Marketplace ledger: the listing state machine.

Enforces:
- Admin-only configuration changes
- Validation order on listing (capacity, video id, price, royalty, duplicate)
- Ownership and creator checks on every listing mutation
- One permanent ``video_id -> listing_id`` index entry per listing
- Whole-record replacement: every operation validates fully, then swaps
  in a new frozen record, so a rejected call leaves state untouched

Listing state transitions::

    list_video          -> active
    active   --buy-->      sold      (owner := buyer)
    sold     --resell-->   active
    active   --deactivate-> inactive
    any      --update-->   active | sold | pending   (creator only)

Every operation returns a ``Result``; nothing here raises for a rejected
request.
"""

from __future__ import annotations

import logging
from typing import Any

from vidledger.config import LedgerSettings
from vidledger.core.host import CallContext, ValueTransfer
from vidledger.core.journal import EventJournal, state_fingerprint
from vidledger.core.production_guard import enforce_production_constraints
from vidledger.models.errors import ErrorKind
from vidledger.models.ledger import BURN_PRINCIPAL, LedgerState
from vidledger.models.listings import (
    UPDATABLE_STATUSES,
    Listing,
    ListingStatus,
    ListingUpdate,
)
from vidledger.models.results import Result

logger = logging.getLogger(__name__)


class MarketplaceLedger:
    """The marketplace state machine.

    Parameters
    ----------
    transfer:
        Host value-transfer capability, used for the platform fee.
    state:
        Initial ledger state.  A fresh default ``LedgerState`` if omitted.
    journal:
        Optional event journal; one entry is appended per successful
        mutation.
    burn_principal:
        Reserved identity that can never become admin.

    Examples
    --------
    >>> from vidledger.core.host import SimulatedHost
    >>> host = SimulatedHost()
    >>> ledger = MarketplaceLedger(host)
    >>> ledger.list_video(host.context("ST1A"), 1, 100, 10).value
    0
    >>> ledger.get_listing_count()
    1
    """

    def __init__(
        self,
        transfer: ValueTransfer,
        *,
        state: LedgerState | None = None,
        journal: EventJournal | None = None,
        burn_principal: str = BURN_PRINCIPAL,
    ) -> None:
        self._transfer = transfer
        self._state = state if state is not None else LedgerState()
        self._journal = journal
        self._burn_principal = burn_principal

    @classmethod
    def from_settings(
        cls, transfer: ValueTransfer, settings: LedgerSettings
    ) -> MarketplaceLedger:
        """Build a ledger whose initial configuration comes from *settings*.

        Raises ``ProductionConfigError`` if *settings* target production
        and violate its constraints.
        """
        enforce_production_constraints(settings)
        state = LedgerState(
            max_listings=settings.max_listings,
            platform_fee=settings.platform_fee,
            admin_principal=settings.admin_principal,
        )
        journal = EventJournal() if settings.journal_enabled else None
        return cls(
            transfer,
            state=state,
            journal=journal,
            burn_principal=settings.burn_principal,
        )

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def journal(self) -> EventJournal | None:
        return self._journal

    # ------------------------------------------------------------------
    # Admin configuration
    # ------------------------------------------------------------------

    def set_admin_principal(self, ctx: CallContext, new_admin: str) -> Result:
        """Hand admin authority to *new_admin* (admin only)."""
        op = "set_admin_principal"
        if ctx.caller != self._state.admin_principal:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if new_admin == self._burn_principal:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)

        previous = self._state.admin_principal
        self._state.admin_principal = new_admin
        self._record(op, ctx, payload={"previous": previous, "new_admin": new_admin})
        logger.info("Admin principal changed from %s to %s.", previous, new_admin)
        return Result.success(operation=op)

    def set_max_listings(self, ctx: CallContext, new_max: int) -> Result:
        """Replace the cap on total listings ever created (admin only)."""
        op = "set_max_listings"
        if ctx.caller != self._state.admin_principal:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if new_max <= 0:
            return self._reject(op, ErrorKind.INVALID_UPDATE_PARAM, ctx)

        self._state.max_listings = new_max
        self._record(op, ctx, payload={"max_listings": new_max})
        logger.info("Max listings set to %d.", new_max)
        return Result.success(operation=op)

    def set_platform_fee(self, ctx: CallContext, new_fee: int) -> Result:
        """Replace the flat per-listing platform fee (admin only)."""
        op = "set_platform_fee"
        if ctx.caller != self._state.admin_principal:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if new_fee < 0:
            return self._reject(op, ErrorKind.INVALID_UPDATE_PARAM, ctx)

        self._state.platform_fee = new_fee
        self._record(op, ctx, payload={"platform_fee": new_fee})
        logger.info("Platform fee set to %d.", new_fee)
        return Result.success(operation=op)

    # ------------------------------------------------------------------
    # Listing lifecycle
    # ------------------------------------------------------------------

    def list_video(
        self, ctx: CallContext, video_id: int, price: int, royalty_rate: int
    ) -> Result:
        """List *video_id* for sale at *price*; returns the new listing id.

        Validation order (first failure wins): capacity, video id, price,
        royalty rate, duplicate video.  The platform fee is then charged;
        a refused transfer aborts with ``PaymentFailed`` before any state
        is written.
        """
        op = "list_video"
        state = self._state
        if state.listing_counter >= state.max_listings:
            return self._reject(op, ErrorKind.MAX_LISTINGS_EXCEEDED, ctx)
        if video_id <= 0:
            return self._reject(op, ErrorKind.INVALID_VIDEO_ID, ctx)
        if price <= 0:
            return self._reject(op, ErrorKind.INVALID_PRICE, ctx)
        if royalty_rate > 100 or royalty_rate < 0:
            return self._reject(op, ErrorKind.INVALID_UPDATE_PARAM, ctx)
        if video_id in state.listings_by_video:
            return self._reject(op, ErrorKind.DUPLICATE_LISTING, ctx)

        # The record is built before the fee is charged: a malformed argument
        # raises here with no transfer made.
        listing_id = state.listing_counter
        listing = Listing(
            video_id=video_id,
            creator=ctx.caller,
            owner=ctx.caller,
            price=price,
            is_active=True,
            status=ListingStatus.ACTIVE.value,
            timestamp=ctx.height,
            royalty_rate=royalty_rate,
        )

        if not self._transfer.transfer(state.platform_fee, ctx.caller, state.admin_principal):
            return self._reject(op, ErrorKind.PAYMENT_FAILED, ctx)

        state.listings[listing_id] = listing
        state.listings_by_video[video_id] = listing_id
        state.listing_counter = listing_id + 1

        self._record(
            op,
            ctx,
            listing_id=listing_id,
            payload={
                "video_id": video_id,
                "price": price,
                "royalty_rate": royalty_rate,
                "platform_fee": state.platform_fee,
            },
        )
        logger.info(
            "Listed video %d as listing %d at %d (creator %s).",
            video_id,
            listing_id,
            price,
            ctx.caller,
        )
        return Result.success(listing_id, operation=op)

    def buy_video(self, ctx: CallContext, listing_id: int) -> Result:
        """Purchase an active listing; the caller becomes its owner.

        Settlement to the previous owner is the host's concern; the ledger
        records the ownership and status transition only.
        """
        op = "buy_video"
        listing, error = self._lookup(listing_id)
        if error is not None:
            return self._reject(op, error, ctx)
        if not listing.is_active:
            return self._reject(op, ErrorKind.LISTING_INACTIVE, ctx)
        if ctx.caller == listing.owner:
            return self._reject(op, ErrorKind.ALREADY_OWNER, ctx)

        previous_owner = listing.owner
        self._replace(
            listing_id,
            listing,
            owner=ctx.caller,
            is_active=False,
            status=ListingStatus.SOLD.value,
            timestamp=ctx.height,
        )
        self._record(
            op,
            ctx,
            listing_id=listing_id,
            payload={"seller": previous_owner, "price": listing.price},
        )
        logger.info(
            "Listing %d sold by %s to %s for %d.",
            listing_id,
            previous_owner,
            ctx.caller,
            listing.price,
        )
        return Result.success(operation=op)

    def resell_video(self, ctx: CallContext, listing_id: int, new_price: int) -> Result:
        """Relist a previously sold (inactive) listing at *new_price*.

        The listing must currently be inactive; an active listing is
        rejected with ``ListingInactive``.
        """
        op = "resell_video"
        listing, error = self._lookup(listing_id)
        if error is not None:
            return self._reject(op, error, ctx)
        if ctx.caller != listing.owner:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if listing.is_active:
            return self._reject(op, ErrorKind.LISTING_INACTIVE, ctx)
        if new_price <= 0:
            return self._reject(op, ErrorKind.INVALID_PRICE, ctx)

        self._replace(
            listing_id,
            listing,
            price=new_price,
            is_active=True,
            status=ListingStatus.ACTIVE.value,
            timestamp=ctx.height,
        )
        self._record(op, ctx, listing_id=listing_id, payload={"price": new_price})
        logger.info("Listing %d relisted by %s at %d.", listing_id, ctx.caller, new_price)
        return Result.success(operation=op)

    def deactivate_listing(self, ctx: CallContext, listing_id: int) -> Result:
        """Take an active listing off the market (owner or creator)."""
        op = "deactivate_listing"
        listing, error = self._lookup(listing_id)
        if error is not None:
            return self._reject(op, error, ctx)
        if ctx.caller not in (listing.owner, listing.creator):
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if not listing.is_active:
            return self._reject(op, ErrorKind.LISTING_INACTIVE, ctx)

        self._replace(
            listing_id,
            listing,
            is_active=False,
            status=ListingStatus.INACTIVE.value,
            timestamp=ctx.height,
        )
        self._record(op, ctx, listing_id=listing_id)
        logger.info("Listing %d deactivated by %s.", listing_id, ctx.caller)
        return Result.success(operation=op)

    def update_listing(
        self,
        ctx: CallContext,
        listing_id: int,
        update_price: int,
        update_status: str,
    ) -> Result:
        """Amend price and status (creator only) and overwrite the audit record.

        ``inactive`` is not a settable status here; use
        ``deactivate_listing``.  ``is_active`` is left as it is.
        """
        op = "update_listing"
        listing, error = self._lookup(listing_id)
        if error is not None:
            return self._reject(op, error, ctx)
        if ctx.caller != listing.creator:
            return self._reject(op, ErrorKind.NOT_AUTHORIZED, ctx)
        if update_price <= 0:
            return self._reject(op, ErrorKind.INVALID_PRICE, ctx)
        if update_status not in UPDATABLE_STATUSES:
            return self._reject(op, ErrorKind.INVALID_STATUS, ctx)

        self._replace(
            listing_id,
            listing,
            price=update_price,
            status=update_status,
            timestamp=ctx.height,
        )
        self._state.listing_updates[listing_id] = ListingUpdate(
            update_price=update_price,
            update_status=update_status,
            update_timestamp=ctx.height,
            updater=ctx.caller,
        )
        self._record(
            op,
            ctx,
            listing_id=listing_id,
            payload={"price": update_price, "status": update_status},
        )
        logger.info(
            "Listing %d updated by %s: price=%d status=%s.",
            listing_id,
            ctx.caller,
            update_price,
            update_status,
        )
        return Result.success(operation=op)

    # ------------------------------------------------------------------
    # Engagement counters (owner only)
    # ------------------------------------------------------------------

    def increment_views(self, ctx: CallContext, listing_id: int) -> Result:
        return self._bump_counter("increment_views", "views", ctx, listing_id)

    def like_video(self, ctx: CallContext, listing_id: int) -> Result:
        return self._bump_counter("like_video", "likes", ctx, listing_id)

    def _bump_counter(
        self, op: str, field: str, ctx: CallContext, listing_id: int
    ) -> Result:
        listing, error = self._lookup(listing_id)
        if error is not None:
            return self._reject(op, error, ctx)
        if ctx.caller != listing.owner:
            return self._reject(op, ErrorKind.ACCESS_DENIED, ctx)

        value = getattr(listing, field) + 1
        self._replace(listing_id, listing, **{field: value})
        self._record(op, ctx, listing_id=listing_id, payload={field: value})
        logger.debug("Listing %d %s -> %d.", listing_id, field, value)
        return Result.success(operation=op)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    def get_listing(self, listing_id: int) -> Listing | None:
        """Return the listing for *listing_id*, or ``None``."""
        return self._state.listings.get(listing_id)

    def get_listing_count(self) -> int:
        """Return the number of listings ever created."""
        return self._state.listing_counter

    def get_listing_update(self, listing_id: int) -> ListingUpdate | None:
        """Return the most recent metadata edit for *listing_id*, or ``None``."""
        return self._state.listing_updates.get(listing_id)

    def get_listing_by_video(self, video_id: int) -> int | None:
        """Return the listing id registered for *video_id*, or ``None``."""
        return self._state.listings_by_video.get(video_id)

    def all_listings(self) -> list[tuple[int, Listing]]:
        """Return ``(listing_id, listing)`` pairs ordered by id."""
        return sorted(self._state.listings.items())

    def state_digest(self) -> str:
        """Content address of the full ledger state.

        Two ledgers that went through the same accepted operations have
        the same digest.
        """
        return state_fingerprint(self._state)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, listing_id: int) -> tuple[Listing, None] | tuple[None, ErrorKind]:
        if listing_id < 0:
            return None, ErrorKind.INVALID_LISTING_ID
        listing = self._state.listings.get(listing_id)
        if listing is None:
            return None, ErrorKind.LISTING_NOT_FOUND
        return listing, None

    def _replace(self, listing_id: int, listing: Listing, **changes: Any) -> Listing:
        updated = listing.model_copy(update=changes)
        self._state.listings[listing_id] = updated
        return updated

    def _record(
        self,
        op: str,
        ctx: CallContext,
        *,
        listing_id: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        if self._journal is not None:
            self._journal.append(
                op, ctx.caller, ctx.height, listing_id=listing_id, payload=payload
            )

    @staticmethod
    def _reject(op: str, kind: ErrorKind, ctx: CallContext) -> Result:
        logger.debug("%s rejected for %s: %s (u%d).", op, ctx.caller, kind.value, kind.code)
        return Result.failure(kind, operation=op)
