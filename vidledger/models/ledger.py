"""Ledger state container and journal entry model.

``LedgerState`` is the single owner of every mutable value in the
marketplace: process-wide configuration, the listing map, the audit map
and the video index.  One instance per ledger; nothing is module-global,
so test instances never leak into each other.

``JournalEntry`` is one sealed record of the append-only event journal:
- Append-only (no update, no delete)
- Hash-chained (each entry links to the previous via SHA-256)
- One entry per successful mutating operation
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vidledger.models.listings import Listing, ListingUpdate

DEFAULT_MAX_LISTINGS = 10_000
DEFAULT_PLATFORM_FEE = 500
DEFAULT_ADMIN_PRINCIPAL = "ST1TEST"
BURN_PRINCIPAL = "SP000000000000000000002Q6VF78"


class LedgerState(BaseModel):
    """All mutable marketplace state.

    ``listing_counter`` is the next id to assign and always equals the
    number of listings ever created.  ``listings_by_video`` is the
    permanent ``video_id -> listing_id`` index.
    """

    listing_counter: int = Field(default=0, ge=0)
    max_listings: int = Field(default=DEFAULT_MAX_LISTINGS, gt=0)
    platform_fee: int = Field(default=DEFAULT_PLATFORM_FEE, ge=0)
    admin_principal: str = DEFAULT_ADMIN_PRINCIPAL
    listings: dict[int, Listing] = Field(default_factory=dict)
    listing_updates: dict[int, ListingUpdate] = Field(default_factory=dict)
    listings_by_video: dict[int, int] = Field(default_factory=dict)


class JournalEntry(BaseModel):
    """A single sealed entry in the event journal."""

    model_config = ConfigDict(frozen=True)

    sequence: int
    operation: str  # e.g. "list_video", "buy_video"
    caller: str
    height: int
    listing_id: int | None = None
    payload: dict[str, Any] = {}
    previous_entry_hash: str = ""  # SHA-256 of the previous entry
    entry_hash: str = ""  # computed on append, seals this entry
