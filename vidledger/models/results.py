"""Operation result envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from vidledger.models.errors import ErrorKind, MarketplaceError


class Result(BaseModel):
    """Outcome of a single ledger operation.

    Exactly one of ``value`` (on success) or ``error`` (on failure) is
    meaningful.  Build instances with ``Result.success`` / ``Result.failure``
    rather than the constructor.

    Examples
    --------
    >>> Result.success(0).ok
    True
    >>> Result.failure(ErrorKind.INVALID_PRICE).error_code
    102
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    value: Any = None
    error: ErrorKind | None = None
    operation: str = ""

    @classmethod
    def success(cls, value: Any = True, operation: str = "") -> Result:
        return cls(ok=True, value=value, operation=operation)

    @classmethod
    def failure(cls, error: ErrorKind, operation: str = "") -> Result:
        return cls(ok=False, error=error, operation=operation)

    @property
    def error_code(self) -> int | None:
        """Numeric code of the error, or ``None`` on success."""
        return self.error.code if self.error is not None else None

    def unwrap(self) -> Any:
        """Return ``value`` or raise ``MarketplaceError`` for a failure."""
        if self.ok:
            return self.value
        if self.error is None:
            raise RuntimeError(
                f"Failed result for {self.operation!r} carries no error kind"
            )
        raise MarketplaceError(self.error, self.operation)
