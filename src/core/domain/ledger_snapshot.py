"""
LedgerSnapshot — снапшот состояния TokenLedger.

Immutable Pydantic модель. Нулевые балансы и allowance в снапшот
не попадают: отсутствие ключа и ноль эквивалентны.
"""

from pydantic import BaseModel, Field

from src.core.domain.account import AccountId


class LedgerSnapshot(BaseModel):
    """
    Снапшот ledger (supply, балансы, allowance).

    allowances: owner -> spender -> value
    """

    name: str = Field(..., description="Display name токена")
    symbol: str = Field(..., description="Display symbol токена")
    decimals: int = Field(..., ge=0, description="Количество десятичных знаков")
    total_supply: int = Field(..., ge=0, description="Текущий total supply")
    balances: dict[AccountId, int] = Field(
        default_factory=dict, description="Ненулевые балансы"
    )
    allowances: dict[AccountId, dict[AccountId, int]] = Field(
        default_factory=dict, description="Ненулевые allowance"
    )

    model_config = {"frozen": True}

    @property
    def balances_sum(self) -> int:
        """Сумма всех балансов (для проверки supply-инварианта)."""
        return sum(self.balances.values())

    def supply_matches_balances(self) -> bool:
        """totalSupply == sum(balances)."""
        return self.total_supply == self.balances_sum
