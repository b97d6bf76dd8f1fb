"""
Contract Validation Module

Модуль для валидации log records событий против JSON Schema контрактов.
"""

from .validators import (
    ApprovalEventValidator,
    ContractValidator,
    PausedEventValidator,
    SchemaLoader,
    TransferEventValidator,
    UnpausedEventValidator,
    validate_approval_event,
    validate_event_record,
    validate_paused_event,
    validate_transfer_event,
    validate_unpaused_event,
    validator_for_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TransferEventValidator",
    "ApprovalEventValidator",
    "PausedEventValidator",
    "UnpausedEventValidator",
    # Functions
    "validator_for_event",
    "validate_event_record",
    "validate_transfer_event",
    "validate_approval_event",
    "validate_paused_event",
    "validate_unpaused_event",
]
