"""Host capabilities consumed by the marketplace ledger.

The ledger never reads ambient execution context.  The host supplies:

1. **Value transfer**: ``ValueTransfer.transfer(amount, sender, recipient)``,
   used once per listing to move the platform fee.
2. **Current height**: ``BlockHeightSource.current_height()``, a
   monotonically non-decreasing integer stamped onto mutated listings.
3. **Caller identity**: carried per call in a ``CallContext``.

``SimulatedHost`` satisfies both protocols in memory and is what the tests
and the CLI run against.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class ValueTransfer(Protocol):
    """Protocol for value-transfer backends."""

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        """Move *amount* from *sender* to *recipient*.

        Returns ``True`` on success, ``False`` if the transfer was refused.
        """
        ...


@runtime_checkable
class BlockHeightSource(Protocol):
    """Protocol for the current-height capability."""

    def current_height(self) -> int:
        ...


# ---------------------------------------------------------------------------
# Per-call context
# ---------------------------------------------------------------------------


class CallContext(BaseModel):
    """Identity and height for a single ledger operation."""

    model_config = ConfigDict(frozen=True)

    caller: str = Field(min_length=1)
    height: int = Field(default=0, ge=0)


class TransferRecord(BaseModel):
    """One recorded value transfer."""

    model_config = ConfigDict(frozen=True)

    amount: int
    sender: str
    recipient: str


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------


class SimulatedHost:
    """In-memory host: records transfers and tracks block height.

    Parameters
    ----------
    height:
        Starting block height.
    fail_transfers:
        When ``True`` every transfer is refused (and not recorded).

    Examples
    --------
    >>> host = SimulatedHost()
    >>> host.transfer(500, "ST1A", "ST1TEST")
    True
    >>> host.transfers[0].amount
    500
    >>> host.context("ST1A").height
    0
    """

    def __init__(self, height: int = 0, *, fail_transfers: bool = False) -> None:
        if height < 0:
            raise ValueError(f"Block height cannot be negative: {height}")
        self._height = height
        self.fail_transfers = fail_transfers
        self.transfers: list[TransferRecord] = []

    # -- ValueTransfer ------------------------------------------------------

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if self.fail_transfers:
            logger.warning(
                "Refusing transfer of %d from %s to %s.", amount, sender, recipient
            )
            return False
        self.transfers.append(
            TransferRecord(amount=amount, sender=sender, recipient=recipient)
        )
        logger.debug("Recorded transfer of %d from %s to %s.", amount, sender, recipient)
        return True

    # -- BlockHeightSource --------------------------------------------------

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Advance the height by *blocks* and return the new height."""
        if blocks < 0:
            raise ValueError("Block height is monotonic; cannot advance by a negative amount.")
        self._height += blocks
        return self._height

    def set_height(self, height: int) -> None:
        """Jump to *height*, which must not be below the current height."""
        if height < self._height:
            raise ValueError(
                f"Block height is monotonic: {height} < current {self._height}"
            )
        self._height = height

    # -- Convenience --------------------------------------------------------

    def context(self, caller: str) -> CallContext:
        """Build a ``CallContext`` for *caller* at the current height."""
        return CallContext(caller=caller, height=self._height)

    def reset(self) -> None:
        """Clear recorded transfers and return to height 0."""
        self._height = 0
        self.fail_transfers = False
        self.transfers.clear()
