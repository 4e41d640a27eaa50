"""vidledger monitor — read-only Rich rendering of ledger state.

The renderer never mutates the ledger.  It reads listings, configuration,
recorded transfers and journal status and turns them into Rich
renderables for terminal display.
"""

from vidledger.monitor.renderer import LedgerRenderer

__all__ = ["LedgerRenderer"]
