"""TokenLedger — учёт fungible-токена: supply, балансы, allowance.

Операции:
- Views: total_supply / balance_of / allowance / name / symbol / decimals
- Public (caller явно): approve, increase/decrease_allowance, transfer, transfer_from
- Internal (для composing кода): mint, burn, spend_allowance

Инварианты:
- total_supply == sum(balances) после каждой мутации
- zero identity никогда не держит баланс/allowance и не является actor-ом
- вся арифметика checked (src.core.math.uint256), без wrap-around
- операция атомарна: при любой ошибке (Revert, нарушение контракта события,
  отказ sink) состояние и лог событий не меняются

Infinite allowance: allowance == UINT256_MAX не уменьшается при transfer_from
и Approval событие при таком списании не эмитится.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Final, Iterator, Optional

from src.core.contracts import validate_event_record
from src.core.domain.account import ZERO_ACCOUNT, AccountId, is_zero_account
from src.core.domain.events import ApprovalEvent, ContractEvent, TransferEvent
from src.core.domain.ledger_snapshot import LedgerSnapshot
from src.core.errors import (
    APPROVE_FROM_ZERO,
    APPROVE_TO_ZERO,
    BURN_FROM_ZERO,
    MINT_TO_ZERO,
    TRANSFER_FROM_ZERO,
    TRANSFER_TO_ZERO,
    Revert,
    ZeroAddressError,
)
from src.core.event_log import EventLog, EventSink
from src.core.math.uint256 import (
    UINT256_MAX,
    checked_add,
    checked_sub,
    validate_uint256,
)

logger = logging.getLogger(__name__)

# Фиксированное количество десятичных знаков
DECIMALS: Final[int] = 18


@dataclass(frozen=True)
class TokenConfig:
    """Конфигурация TokenLedger."""
    decimals: int = DECIMALS


@dataclass
class _Journal:
    """Журнал одной логической транзакции.

    Хранит значения ключей ДО первой записи (None = ключ отсутствовал)
    и буфер событий, которые уходят в sink только при успехе.
    """
    balances: dict[AccountId, Optional[int]] = field(default_factory=dict)
    allowances: dict[tuple[AccountId, AccountId], Optional[int]] = field(default_factory=dict)
    total_supply: Optional[int] = None
    events: list[ContractEvent] = field(default_factory=list)


class TokenLedger:
    """Fungible-token ledger с checked-арифметикой и атомарными операциями.

    Ledger ничего не знает о PauseGuard и о правах доступа: composing код
    решает, кто может вызывать mint/burn, и проверяет guard перед мутациями.
    """

    def __init__(
        self,
        sink: Optional[EventSink] = None,
        config: Optional[TokenConfig] = None
    ):
        """
        Args:
            sink: приёмник событий (default: новый EventLog)
            config: конфигурация токена
        """
        self.sink: EventSink = sink if sink is not None else EventLog()
        self.config = config or TokenConfig()

        self._name = ""
        self._symbol = ""
        self._total_supply = 0
        self._balances: dict[AccountId, int] = {}
        self._allowances: dict[tuple[AccountId, AccountId], int] = {}

        # Активная транзакция (None вне операции)
        self._journal: Optional[_Journal] = None

    def initialize(self, name: str, symbol: str) -> None:
        """Установка display metadata. Supply и балансы остаются нулевыми.

        Повторный вызов не блокируется: это ответственность composing кода.
        """
        self._name = name
        self._symbol = symbol
        logger.debug("ledger initialized: name=%s symbol=%s", name, symbol)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    def decimals(self) -> int:
        return self.config.decimals

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: AccountId) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: AccountId, spender: AccountId) -> int:
        return self._allowances.get((owner, spender), 0)

    def snapshot(self) -> LedgerSnapshot:
        """Снапшот текущего состояния (только ненулевые записи)."""
        allowances: dict[AccountId, dict[AccountId, int]] = {}
        for (owner, spender), value in self._allowances.items():
            allowances.setdefault(owner, {})[spender] = value

        return LedgerSnapshot(
            name=self._name,
            symbol=self._symbol,
            decimals=self.decimals(),
            total_supply=self._total_supply,
            balances=dict(self._balances),
            allowances=allowances,
        )

    def check_supply_invariant(self) -> bool:
        """total_supply == сумма всех балансов."""
        return self._total_supply == sum(self._balances.values())

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def approve(self, caller: AccountId, spender: AccountId, amount: int) -> bool:
        """Абсолютная установка allowance[caller, spender] = amount."""
        validate_uint256(amount, "amount")

        with self._atomic("approve"):
            self._approve(caller, spender, amount)

        return True

    def increase_allowance(
        self,
        caller: AccountId,
        spender: AccountId,
        added_value: int
    ) -> bool:
        """allowance += added_value (checked), затем как approve."""
        validate_uint256(added_value, "added_value")

        with self._atomic("increase_allowance"):
            current = self.allowance(caller, spender)
            self._approve(caller, spender, checked_add(current, added_value))

        return True

    def decrease_allowance(
        self,
        caller: AccountId,
        spender: AccountId,
        subtracted_value: int
    ) -> bool:
        """allowance -= subtracted_value, затем как approve.

        Уменьшение ниже нуля даёт generic arithmetic ошибку, а не отдельную
        "insufficient allowance".
        """
        validate_uint256(subtracted_value, "subtracted_value")

        with self._atomic("decrease_allowance"):
            current = self.allowance(caller, spender)
            self._approve(caller, spender, checked_sub(current, subtracted_value))

        return True

    def transfer(self, caller: AccountId, to: AccountId, value: int) -> bool:
        """Перевод value с баланса caller на to. Supply не меняется."""
        validate_uint256(value, "value")

        with self._atomic("transfer"):
            self._transfer(caller, to, value)

        return True

    def transfer_from(
        self,
        caller: AccountId,
        from_: AccountId,
        to: AccountId,
        value: int
    ) -> bool:
        """Перевод от имени from_; spender это caller.

        Сначала списывается allowance, затем выполняется перевод. Если перевод
        откатывается, списание allowance откатывается вместе с ним.
        """
        validate_uint256(value, "value")

        with self._atomic("transfer_from"):
            self._spend_allowance(from_, caller, value)
            self._transfer(from_, to, value)

        return True

    # ------------------------------------------------------------------
    # Internal operations (composing код)
    # ------------------------------------------------------------------

    def mint(self, to: AccountId, value: int) -> None:
        """Эмиссия value на to; Transfer(from=ZERO_ACCOUNT)."""
        validate_uint256(value, "value")

        with self._atomic("mint"):
            if is_zero_account(to):
                raise ZeroAddressError(MINT_TO_ZERO)

            new_supply = checked_add(self._total_supply, value)
            new_balance = checked_add(self.balance_of(to), value)

            self._write_total_supply(new_supply)
            self._write_balance(to, new_balance)
            self._emit(TransferEvent(from_=ZERO_ACCOUNT, to=to, value=value))

    def burn(self, from_: AccountId, value: int) -> None:
        """Сжигание value с баланса from_; Transfer(to=ZERO_ACCOUNT)."""
        validate_uint256(value, "value")

        with self._atomic("burn"):
            if is_zero_account(from_):
                raise ZeroAddressError(BURN_FROM_ZERO)

            new_balance = checked_sub(self.balance_of(from_), value)
            new_supply = checked_sub(self._total_supply, value)

            self._write_balance(from_, new_balance)
            self._write_total_supply(new_supply)
            self._emit(TransferEvent(from_=from_, to=ZERO_ACCOUNT, value=value))

    def spend_allowance(self, owner: AccountId, spender: AccountId, value: int) -> None:
        """Списание allowance по правилу infinite allowance (см. _spend_allowance)."""
        validate_uint256(value, "value")

        with self._atomic("spend_allowance"):
            self._spend_allowance(owner, spender, value)

    # camelCase aliases: та же реализация, другое написание
    totalSupply = total_supply
    balanceOf = balance_of
    increaseAllowance = increase_allowance
    decreaseAllowance = decrease_allowance
    transferFrom = transfer_from
    spendAllowance = spend_allowance

    # ------------------------------------------------------------------
    # Core rules
    # ------------------------------------------------------------------

    def _approve(self, owner: AccountId, spender: AccountId, value: int) -> None:
        if is_zero_account(owner):
            raise ZeroAddressError(APPROVE_FROM_ZERO)
        if is_zero_account(spender):
            raise ZeroAddressError(APPROVE_TO_ZERO)

        self._write_allowance(owner, spender, value)
        self._emit(ApprovalEvent(owner=owner, spender=spender, value=value))

    def _spend_allowance(self, owner: AccountId, spender: AccountId, value: int) -> None:
        current = self.allowance(owner, spender)

        # Infinite allowance: без записи и без Approval
        if current == UINT256_MAX:
            return

        self._approve(owner, spender, checked_sub(current, value))

    def _transfer(self, from_: AccountId, to: AccountId, value: int) -> None:
        if is_zero_account(from_):
            raise ZeroAddressError(TRANSFER_FROM_ZERO)
        if is_zero_account(to):
            raise ZeroAddressError(TRANSFER_TO_ZERO)

        # Последовательные записи: from_ == to корректно оставляет баланс прежним
        self._write_balance(from_, checked_sub(self.balance_of(from_), value))
        self._write_balance(to, checked_add(self.balance_of(to), value))
        self._emit(TransferEvent(from_=from_, to=to, value=value))

    # ------------------------------------------------------------------
    # Transaction journal
    # ------------------------------------------------------------------

    @contextmanager
    def _atomic(self, operation: str) -> Iterator[None]:
        """Логическая транзакция: всё или ничего.

        Буфер событий публикуется до снятия журнала: если событие нарушает
        контракт или sink его отклоняет, состояние откатывается.
        Вложенный вызов присоединяется к внешней транзакции.
        """
        if self._journal is not None:
            yield
            return

        journal = _Journal()
        self._journal = journal
        try:
            yield
            self._publish(journal.events)
        except Revert as e:
            self._rollback(journal)
            logger.debug("%s reverted: %s", operation, e.tag)
            raise
        except Exception as e:
            self._rollback(journal)
            logger.debug("%s aborted: %s", operation, type(e).__name__)
            raise
        finally:
            self._journal = None

        logger.debug("%s committed: %d event(s)", operation, len(journal.events))

    def _publish(self, events: list[ContractEvent]) -> None:
        # Все records проверяются до первой эмиссии
        for event in events:
            validate_event_record(event.to_log_record())
        for event in events:
            self.sink.emit(event)

    def _rollback(self, journal: _Journal) -> None:
        for account, previous in journal.balances.items():
            if previous is None:
                self._balances.pop(account, None)
            else:
                self._balances[account] = previous

        for key, previous in journal.allowances.items():
            if previous is None:
                self._allowances.pop(key, None)
            else:
                self._allowances[key] = previous

        if journal.total_supply is not None:
            self._total_supply = journal.total_supply

    def _write_balance(self, account: AccountId, value: int) -> None:
        journal = self._require_journal()
        if account not in journal.balances:
            journal.balances[account] = self._balances.get(account)

        if value:
            self._balances[account] = value
        else:
            self._balances.pop(account, None)

    def _write_allowance(self, owner: AccountId, spender: AccountId, value: int) -> None:
        journal = self._require_journal()
        key = (owner, spender)
        if key not in journal.allowances:
            journal.allowances[key] = self._allowances.get(key)

        if value:
            self._allowances[key] = value
        else:
            self._allowances.pop(key, None)

    def _write_total_supply(self, value: int) -> None:
        journal = self._require_journal()
        if journal.total_supply is None:
            journal.total_supply = self._total_supply
        self._total_supply = value

    def _emit(self, event: ContractEvent) -> None:
        self._require_journal().events.append(event)

    def _require_journal(self) -> _Journal:
        if self._journal is None:
            raise RuntimeError("ledger state written outside of a transaction")
        return self._journal
