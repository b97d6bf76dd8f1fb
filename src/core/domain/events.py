"""
Contract events — модели событий ledger и guard.

Immutable Pydantic модели (frozen=True). Каждое событие знает своё имя
и набор indexed полей и умеет отдавать log record, совместимый с JSON Schema
контрактами (src/core/contracts/schema/*.json):

    {"event": "Transfer", "indexed": {"from": ..., "to": ...}, "data": {"value": ...}}

Порядок эмиссии значим для наблюдателей; сами модели порядок не хранят.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from src.core.domain.account import AccountId
from src.core.math.uint256 import UINT256_MAX


# =============================================================================
# BASE
# =============================================================================


class ContractEvent(BaseModel):
    """Базовая модель события с indexed/data разбиением."""

    event_name: ClassVar[str] = ""
    indexed_fields: ClassVar[tuple[str, ...]] = ()

    model_config = {"frozen": True, "populate_by_name": True}

    def to_log_record(self) -> dict[str, Any]:
        """
        Представление события для внешнего log sink.

        Имена полей берутся по alias (from, не from_).
        """
        payload = self.model_dump(by_alias=True)
        indexed = {name: payload[name] for name in self.indexed_fields}
        data = {
            name: value
            for name, value in payload.items()
            if name not in self.indexed_fields
        }
        return {"event": self.event_name, "indexed": indexed, "data": data}


# =============================================================================
# LEDGER EVENTS
# =============================================================================


class TransferEvent(ContractEvent):
    """
    Перемещение токенов между аккаунтами.

    from == ZERO_ACCOUNT означает mint, to == ZERO_ACCOUNT означает burn.
    """

    event_name: ClassVar[str] = "Transfer"
    indexed_fields: ClassVar[tuple[str, ...]] = ("from", "to")

    from_: AccountId = Field(..., alias="from", description="Источник")
    to: AccountId = Field(..., description="Получатель")
    value: int = Field(..., ge=0, le=UINT256_MAX, description="Сумма (uint256)")


class ApprovalEvent(ContractEvent):
    """Новое абсолютное значение allowance (owner → spender)."""

    event_name: ClassVar[str] = "Approval"
    indexed_fields: ClassVar[tuple[str, ...]] = ("owner", "spender")

    owner: AccountId = Field(..., description="Владелец токенов")
    spender: AccountId = Field(..., description="Уполномоченный spender")
    value: int = Field(..., ge=0, le=UINT256_MAX, description="Allowance (uint256)")


# =============================================================================
# GUARD EVENTS
# =============================================================================


class PausedEvent(ContractEvent):
    """Guard переведён в Paused."""

    event_name: ClassVar[str] = "Paused"

    account: AccountId = Field(..., description="Инициатор перехода")


class UnpausedEvent(ContractEvent):
    """Guard переведён в Unpaused."""

    event_name: ClassVar[str] = "Unpaused"

    account: AccountId = Field(..., description="Инициатор перехода")
