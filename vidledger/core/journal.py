"""Append-only, hash-chained event journal of ledger mutations.

The journal is an observer: the marketplace appends one entry per
successful mutating operation and never consults it to decide anything.

Design:
- Append-only: only ``append()`` writes; there is no update or delete.
- Hash-chained: each entry includes the SHA-256 of the previous entry.
- ``verify_chain()`` recomputes every seal and link.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any

from vidledger.models.ledger import JournalEntry, LedgerState

logger = logging.getLogger(__name__)


def _sha256_of(obj: Any) -> str:
    # Sorted keys and compact separators so equal content hashes equally.
    body = json.dumps(obj, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def seal(entry: JournalEntry) -> str:
    """Hash of *entry* over every field except ``entry_hash`` itself."""
    return _sha256_of(entry.model_dump(mode="json", exclude={"entry_hash"}))


def state_fingerprint(state: LedgerState) -> str:
    """``sha256:<hex>`` fingerprint of a full ledger state."""
    return f"sha256:{_sha256_of(state.model_dump(mode='json'))}"


class JournalIntegrityError(RuntimeError):
    """Raised when the hash chain is broken."""


class EventJournal:
    """In-memory append-only journal."""

    def __init__(self) -> None:
        self._entries: list[JournalEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def append(
        self,
        operation: str,
        caller: str,
        height: int,
        *,
        listing_id: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> JournalEntry:
        """Seal and append a new entry, returning it."""
        previous_hash = self._entries[-1].entry_hash if self._entries else ""
        entry = JournalEntry(
            sequence=len(self._entries),
            operation=operation,
            caller=caller,
            height=height,
            listing_id=listing_id,
            payload=payload or {},
            previous_entry_hash=previous_hash,
        )
        sealed = entry.model_copy(
            update={"entry_hash": seal(entry)}
        )
        self._entries.append(sealed)
        logger.debug("Journaled #%d %s by %s.", sealed.sequence, operation, caller)
        return sealed

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def entries(self) -> list[JournalEntry]:
        """Return all entries in append order."""
        return list(self._entries)

    def for_listing(self, listing_id: int) -> list[JournalEntry]:
        """Return the entries that touched *listing_id*."""
        return [e for e in self._entries if e.listing_id == listing_id]

    def latest(self) -> JournalEntry | None:
        return self._entries[-1] if self._entries else None

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Verify the hash chain.

        Returns True if the chain is valid, raises JournalIntegrityError
        otherwise.
        """
        prev_hash = ""
        for entry in self._entries:
            if entry.previous_entry_hash != prev_hash:
                raise JournalIntegrityError(
                    f"Chain broken at entry #{entry.sequence}: "
                    f"expected previous_hash={prev_hash!r}, "
                    f"got {entry.previous_entry_hash!r}"
                )
            expected_hash = seal(entry)
            if entry.entry_hash != expected_hash:
                raise JournalIntegrityError(
                    f"Tampered entry #{entry.sequence}: "
                    f"expected hash={expected_hash!r}, "
                    f"got {entry.entry_hash!r}"
                )
            prev_hash = entry.entry_hash
        return True
