"""
Trade Order - Configuration.

============================================================
PURPOSE
============================================================
All configuration for the order-placement workflow.

CRITICAL CONSTRAINTS:
- Status codes must match the loaded reference data
- No retries inside the workflow
- Deterministic behavior

============================================================
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from dotenv import load_dotenv

from core.constants import STATUS_PENDING, STATUS_SUBMITTED, TAXABLE_STATUSES
from core.exceptions import InvalidConfigError
from database.config import DatabaseConfig, load_database_config


# ============================================================
# STATUS CONFIGURATION
# ============================================================

@dataclass
class StatusConfig:
    """
    Initial trade status codes.
    """

    pending_id: str = STATUS_PENDING
    """Status of a newly placed limit order."""

    submitted_id: str = STATUS_SUBMITTED
    """Status of a newly placed market order."""

    def validate(self) -> None:
        for key, value in (("pending_id", self.pending_id), ("submitted_id", self.submitted_id)):
            if not value or len(value) > 4:
                raise InvalidConfigError(key, value, "status id must be 1-4 characters")
        if self.pending_id == self.submitted_id:
            raise InvalidConfigError(
                "submitted_id", self.submitted_id, "must differ from pending_id"
            )


# ============================================================
# MASTER CONFIGURATION
# ============================================================

@dataclass
class TradeOrderConfig:
    """
    Master configuration for the trade order workflow.
    """

    status: StatusConfig = field(default_factory=StatusConfig)
    """Initial status codes."""

    taxable_statuses: FrozenSet[int] = TAXABLE_STATUSES
    """Account tax statuses subject to capital gains tax."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    """Data store connection."""

    def validate(self) -> None:
        """Validate the configuration, raising InvalidConfigError."""
        self.status.validate()


def load_config(env_file: Optional[str] = None) -> TradeOrderConfig:
    """
    Build the workflow configuration from environment variables.

    Args:
        env_file: Optional path to a .env file

    Returns:
        Validated TradeOrderConfig
    """
    load_dotenv(env_file)

    config = TradeOrderConfig(
        status=StatusConfig(
            pending_id=os.getenv("TRADE_ORDER_STATUS_PENDING", STATUS_PENDING),
            submitted_id=os.getenv("TRADE_ORDER_STATUS_SUBMITTED", STATUS_SUBMITTED),
        ),
        database=load_database_config(env_file),
    )
    config.validate()
    return config
