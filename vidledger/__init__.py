"""vidledger: marketplace ledger for digital video listings.

Participants list a video for sale, buyers purchase it, owners resell or
deactivate it, and creators amend listing metadata.  The ledger is a single
state machine guarded by validation and authorization checks; the host
supplies value transfer, block height and caller identity.
"""

__version__ = "0.1.0"
__description__ = "Marketplace ledger for digital video listings"

from vidledger.core.host import CallContext, SimulatedHost
from vidledger.core.marketplace import MarketplaceLedger
from vidledger.models import ErrorKind, Listing, ListingUpdate, MarketplaceError, Result

__all__ = [
    "CallContext",
    "ErrorKind",
    "Listing",
    "ListingUpdate",
    "MarketplaceError",
    "MarketplaceLedger",
    "Result",
    "SimulatedHost",
    "__version__",
]
