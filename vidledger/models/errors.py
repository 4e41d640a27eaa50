"""Error taxonomy for the marketplace ledger.

Every rejected operation reports exactly one ``ErrorKind``.  The numeric
codes are stable and match the on-chain contract the ledger mirrors, so
clients that only see codes can still map them back to a kind.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """The fixed, enumerable set of failure kinds."""

    NOT_AUTHORIZED = "NotAuthorized"
    INVALID_VIDEO_ID = "InvalidVideoId"
    INVALID_PRICE = "InvalidPrice"
    LISTING_NOT_FOUND = "ListingNotFound"
    LISTING_INACTIVE = "ListingInactive"
    ALREADY_OWNER = "AlreadyOwner"
    PAYMENT_FAILED = "PaymentFailed"
    ACCESS_DENIED = "AccessDenied"
    INVALID_LISTING_ID = "InvalidListingId"
    ROYALTY_FAILED = "RoyaltyFailed"
    REWARDS_FAILED = "RewardsFailed"
    INVALID_OWNER = "InvalidOwner"
    GENERATE_KEY_FAILED = "GenerateKeyFailed"
    INVALID_CREATOR = "InvalidCreator"
    DUPLICATE_LISTING = "DuplicateListing"
    INVALID_STATUS = "InvalidStatus"
    MAX_LISTINGS_EXCEEDED = "MaxListingsExceeded"
    INVALID_UPDATE_PARAM = "InvalidUpdateParam"
    UPDATE_NOT_ALLOWED = "UpdateNotAllowed"

    @property
    def code(self) -> int:
        """Numeric error code (``u100`` .. ``u118`` on chain)."""
        return ERROR_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> ErrorKind:
        """Look up a kind by its numeric code.

        Raises ``ValueError`` for codes outside the taxonomy.
        """
        for kind, kind_code in ERROR_CODES.items():
            if kind_code == code:
                return kind
        raise ValueError(f"Unknown marketplace error code: {code}")


ERROR_CODES: dict[ErrorKind, int] = {
    kind: 100 + offset for offset, kind in enumerate(ErrorKind)
}


class MarketplaceError(RuntimeError):
    """Raised by ``Result.unwrap()`` when an operation was rejected.

    The ledger itself never raises this; it is the bridge for callers
    (the CLI, scripts) that would rather handle an exception than inspect
    a ``Result``.
    """

    def __init__(self, kind: ErrorKind, operation: str = "") -> None:
        self.kind = kind
        self.operation = operation
        where = f" in {operation}" if operation else ""
        super().__init__(f"{kind.value} (u{kind.code}){where}")
