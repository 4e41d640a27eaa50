"""vidledger data models — all Pydantic v2; records are frozen (immutable)."""

from vidledger.models.errors import ERROR_CODES, ErrorKind, MarketplaceError
from vidledger.models.ledger import (
    BURN_PRINCIPAL,
    DEFAULT_ADMIN_PRINCIPAL,
    DEFAULT_MAX_LISTINGS,
    DEFAULT_PLATFORM_FEE,
    JournalEntry,
    LedgerState,
)
from vidledger.models.listings import (
    UPDATABLE_STATUSES,
    Listing,
    ListingStatus,
    ListingUpdate,
)
from vidledger.models.results import Result

__all__ = [
    # errors
    "ERROR_CODES",
    "ErrorKind",
    "MarketplaceError",
    # listings
    "Listing",
    "ListingStatus",
    "ListingUpdate",
    "UPDATABLE_STATUSES",
    # ledger
    "BURN_PRINCIPAL",
    "DEFAULT_ADMIN_PRINCIPAL",
    "DEFAULT_MAX_LISTINGS",
    "DEFAULT_PLATFORM_FEE",
    "JournalEntry",
    "LedgerState",
    # results
    "Result",
]
