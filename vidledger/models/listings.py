"""Listing records and the listing status vocabulary."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ListingStatus(str, Enum):
    """Status values assigned by ledger operations."""

    ACTIVE = "active"
    SOLD = "sold"
    INACTIVE = "inactive"
    PENDING = "pending"


# Statuses a creator may set through update_listing.  INACTIVE is only
# reachable through deactivate_listing.
UPDATABLE_STATUSES: frozenset[str] = frozenset(
    {ListingStatus.ACTIVE.value, ListingStatus.SOLD.value, ListingStatus.PENDING.value}
)


class Listing(BaseModel):
    """A single video listing.

    Records are frozen; the ledger replaces the whole record on every
    mutation via ``model_copy(update=...)`` so no reader ever sees a
    half-written listing.
    """

    model_config = ConfigDict(frozen=True)

    video_id: int = Field(gt=0)
    creator: str
    owner: str
    price: int
    is_active: bool = True
    status: str = ListingStatus.ACTIVE.value
    timestamp: int = Field(default=0, ge=0)  # block height of last state change
    royalty_rate: int = Field(default=0, ge=0, le=100)  # stored, never enforced
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)


class ListingUpdate(BaseModel):
    """Most recent metadata edit for a listing (one per listing, overwritten)."""

    model_config = ConfigDict(frozen=True)

    update_price: int
    update_status: str
    update_timestamp: int
    updater: str
