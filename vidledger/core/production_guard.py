"""Production configuration guard — enforces hard constraints in production.

The guard validates that production-critical settings are correctly
configured before a ledger is built.  It fails hard (raises
``ProductionConfigError``) if any constraint is violated.
"""

from __future__ import annotations

import logging

from vidledger.config import LedgerSettings
from vidledger.models.ledger import DEFAULT_ADMIN_PRINCIPAL

logger = logging.getLogger(__name__)


class ProductionConfigError(RuntimeError):
    """Raised when production configuration constraints are violated.

    The ledger cannot safely start in production mode with the current
    configuration.  It must not be caught and ignored.
    """


def enforce_production_constraints(settings: LedgerSettings) -> None:
    """Validate all production-critical configuration constraints.

    Constraints enforced
    --------------------
    1. Debug mode must be disabled.
    2. The admin principal must not be the development default.
    3. The admin principal must not be the burn identity.
    4. The initial listing cap must be positive and the fee non-negative.

    Raises
    ------
    ProductionConfigError
        If any production constraint is violated.
    """
    if not settings.is_production:
        return

    violations: list[str] = []

    if settings.debug:
        violations.append(
            "debug=True is not allowed in production. Set VIDLEDGER_DEBUG=false."
        )
    if settings.admin_principal == DEFAULT_ADMIN_PRINCIPAL:
        violations.append(
            f"admin_principal is the development default ({DEFAULT_ADMIN_PRINCIPAL}). "
            "Set VIDLEDGER_ADMIN_PRINCIPAL."
        )
    if settings.admin_principal == settings.burn_principal:
        violations.append("admin_principal must not be the burn principal.")
    if settings.max_listings <= 0:
        violations.append(f"max_listings must be positive, got {settings.max_listings}.")
    if settings.platform_fee < 0:
        violations.append(f"platform_fee must be non-negative, got {settings.platform_fee}.")

    if violations:
        msg = "Production configuration violations:\n" + "\n".join(
            f"  - {v}" for v in violations
        )
        logger.critical(msg)
        raise ProductionConfigError(msg)

    logger.info("Production constraints verified.")
