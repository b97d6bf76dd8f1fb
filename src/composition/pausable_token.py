"""PausableToken — composing контракт поверх TokenLedger и PauseGuard.

Порядок проверок для каждой мутации:
1. Права доступа (только для owner-only операций) → UnauthorizedError
2. require_not_paused() → PausedError
3. Делегирование в TokenLedger

Views никогда не блокируются паузой. mint/burn ledger-а доступны только
через обёртки ниже: mint доступен только owner, burn сжигает только токены caller.
"""

import logging
from typing import Optional

from src.core.domain.account import AccountId, is_zero_account
from src.core.errors import UnauthorizedError
from src.core.event_log import EventLog, EventSink
from src.guard.pause_guard import PauseGuard
from src.ledger.token_ledger import TokenConfig, TokenLedger

logger = logging.getLogger(__name__)


class PausableToken:
    """Токен с owner-gated supply и emergency stop.

    Ledger и guard пишут в общий sink, поэтому наблюдатель видит единый
    упорядоченный поток событий.
    """

    def __init__(
        self,
        owner: AccountId,
        name: str,
        symbol: str,
        initial_supply: int = 0,
        sink: Optional[EventSink] = None,
        config: Optional[TokenConfig] = None
    ):
        """
        Args:
            owner: единственный аккаунт с правом mint/pause/unpause
            name: display name
            symbol: display symbol
            initial_supply: supply, эмитируемый owner при создании
            sink: общий приёмник событий (default: новый EventLog)
            config: конфигурация ledger
        """
        if is_zero_account(owner):
            raise ValueError("owner must not be the zero account")

        self.owner = owner
        self.sink: EventSink = sink if sink is not None else EventLog()
        self.ledger = TokenLedger(sink=self.sink, config=config)
        self.guard = PauseGuard(sink=self.sink)

        self.ledger.initialize(name, symbol)
        if initial_supply:
            self.ledger.mint(owner, initial_supply)

        logger.debug("token %s deployed, owner=%s", symbol, owner)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def name(self) -> str:
        return self.ledger.name()

    def symbol(self) -> str:
        return self.ledger.symbol()

    def decimals(self) -> int:
        return self.ledger.decimals()

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, account: AccountId) -> int:
        return self.ledger.balance_of(account)

    def allowance(self, owner: AccountId, spender: AccountId) -> int:
        return self.ledger.allowance(owner, spender)

    def paused(self) -> bool:
        return self.guard.paused()

    # ------------------------------------------------------------------
    # Gated mutations
    # ------------------------------------------------------------------

    def transfer(self, caller: AccountId, to: AccountId, value: int) -> bool:
        self.guard.require_not_paused()
        return self.ledger.transfer(caller, to, value)

    def approve(self, caller: AccountId, spender: AccountId, amount: int) -> bool:
        self.guard.require_not_paused()
        return self.ledger.approve(caller, spender, amount)

    def transfer_from(
        self,
        caller: AccountId,
        from_: AccountId,
        to: AccountId,
        value: int
    ) -> bool:
        self.guard.require_not_paused()
        return self.ledger.transfer_from(caller, from_, to, value)

    def increase_allowance(self, caller: AccountId, spender: AccountId, added_value: int) -> bool:
        self.guard.require_not_paused()
        return self.ledger.increase_allowance(caller, spender, added_value)

    def decrease_allowance(
        self,
        caller: AccountId,
        spender: AccountId,
        subtracted_value: int
    ) -> bool:
        self.guard.require_not_paused()
        return self.ledger.decrease_allowance(caller, spender, subtracted_value)

    def mint(self, caller: AccountId, to: AccountId, value: int) -> bool:
        """Owner-only эмиссия."""
        self._require_owner(caller)
        self.guard.require_not_paused()
        self.ledger.mint(to, value)
        return True

    def burn(self, caller: AccountId, value: int) -> bool:
        """Сжигание собственных токенов caller."""
        self.guard.require_not_paused()
        self.ledger.burn(caller, value)
        return True

    # ------------------------------------------------------------------
    # Guard control (owner-only)
    # ------------------------------------------------------------------

    def pause(self, caller: AccountId) -> None:
        self._require_owner(caller)
        self.guard.pause(caller)

    def unpause(self, caller: AccountId) -> None:
        self._require_owner(caller)
        self.guard.unpause(caller)

    # camelCase aliases
    totalSupply = total_supply
    balanceOf = balance_of
    transferFrom = transfer_from
    increaseAllowance = increase_allowance
    decreaseAllowance = decrease_allowance

    def _require_owner(self, caller: AccountId) -> None:
        if caller != self.owner:
            logger.debug("unauthorized call by %s", caller)
            raise UnauthorizedError(detail=f"caller {caller} is not the owner")
