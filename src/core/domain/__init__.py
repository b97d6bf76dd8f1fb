"""
Domain models and value objects.

Contains account identity, contract events and ledger snapshots.
"""

from src.core.domain.account import ZERO_ACCOUNT, AccountId, is_zero_account
from src.core.domain.events import (
    ApprovalEvent,
    ContractEvent,
    PausedEvent,
    TransferEvent,
    UnpausedEvent,
)
from src.core.domain.ledger_snapshot import LedgerSnapshot

__all__ = [
    # Account identity
    "AccountId",
    "ZERO_ACCOUNT",
    "is_zero_account",
    # Events
    "ContractEvent",
    "TransferEvent",
    "ApprovalEvent",
    "PausedEvent",
    "UnpausedEvent",
    # Snapshots
    "LedgerSnapshot",
]
