"""Тесты для TokenLedger.

Coverage:
- Initializer и views
- approve / increase / decrease allowance
- transfer / transfer_from и infinite allowance
- mint / burn
- Zero identity отклоняется без изменения состояния
- Checked-арифметика (overflow/underflow)
- Атомарность: откат состояния и событий
- Supply-инвариант после последовательности операций
- camelCase aliases
"""

import jsonschema
import pydantic
import pytest

from src.core.domain import ZERO_ACCOUNT, ApprovalEvent, TransferEvent
from src.core.errors import (
    APPROVE_FROM_ZERO,
    APPROVE_TO_ZERO,
    ARITHMETIC_ERROR_TAG,
    BURN_FROM_ZERO,
    MINT_TO_ZERO,
    TRANSFER_FROM_ZERO,
    TRANSFER_TO_ZERO,
    ArithmeticOverflowError,
    Revert,
    ZeroAddressError,
)
from src.core.event_log import EventLog
from src.core.math import UINT256_MAX
from src.ledger import DECIMALS, TokenConfig, TokenLedger

ALICE = "0x" + "aa" * 20
BOB = "0x" + "bb" * 20
CAROL = "0x" + "cc" * 20


@pytest.fixture
def log():
    return EventLog()


@pytest.fixture
def ledger(log):
    """Ledger с 1000 токенов у ALICE; лог событий очищен."""
    token = TokenLedger(sink=log)
    token.initialize("Test Token", "TST")
    token.mint(ALICE, 1000)
    log.clear()
    return token


class TestInitialization:
    """Тесты initializer и views."""

    def test_metadata(self):
        token = TokenLedger()
        token.initialize("Test Token", "TST")

        assert token.name() == "Test Token"
        assert token.symbol() == "TST"
        assert token.decimals() == DECIMALS == 18

    def test_starts_empty(self):
        token = TokenLedger()
        token.initialize("Test Token", "TST")

        assert token.total_supply() == 0
        assert token.balance_of(ALICE) == 0
        assert token.allowance(ALICE, BOB) == 0

    def test_custom_decimals(self):
        token = TokenLedger(config=TokenConfig(decimals=6))
        assert token.decimals() == 6

    def test_default_sink_is_event_log(self):
        token = TokenLedger()
        token.mint(ALICE, 1)
        assert isinstance(token.sink, EventLog)
        assert len(token.sink) == 1

    def test_unseen_account_zero(self, ledger):
        assert ledger.balance_of(CAROL) == 0


class TestApprove:
    """Тесты approve."""

    def test_sets_allowance_and_emits(self, ledger, log):
        assert ledger.approve(ALICE, BOB, 50) is True

        assert ledger.allowance(ALICE, BOB) == 50
        assert log.events == [ApprovalEvent(owner=ALICE, spender=BOB, value=50)]

    def test_second_approve_overwrites(self, ledger):
        """approve устанавливает абсолютное значение, а не добавляет."""
        ledger.approve(ALICE, BOB, 50)
        ledger.approve(ALICE, BOB, 20)

        assert ledger.allowance(ALICE, BOB) == 20

    def test_approve_zero_resets(self, ledger, log):
        ledger.approve(ALICE, BOB, 50)
        ledger.approve(ALICE, BOB, 0)

        assert ledger.allowance(ALICE, BOB) == 0
        assert log.events[-1] == ApprovalEvent(owner=ALICE, spender=BOB, value=0)

    def test_allowance_is_directional(self, ledger):
        ledger.approve(ALICE, BOB, 50)
        assert ledger.allowance(BOB, ALICE) == 0

    def test_approve_from_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.approve(ZERO_ACCOUNT, BOB, 50)

        assert exc_info.value.tag == APPROVE_FROM_ZERO
        assert ledger.allowance(ZERO_ACCOUNT, BOB) == 0
        assert len(log) == 0

    def test_approve_to_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.approve(ALICE, ZERO_ACCOUNT, 50)

        assert exc_info.value.tag == APPROVE_TO_ZERO
        assert len(log) == 0

    def test_negative_amount_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.approve(ALICE, BOB, -1)


class TestAllowanceAdjustment:
    """Тесты increase_allowance / decrease_allowance."""

    def test_increase(self, ledger, log):
        ledger.approve(ALICE, BOB, 10)
        ledger.increase_allowance(ALICE, BOB, 5)

        assert ledger.allowance(ALICE, BOB) == 15
        assert log.events[-1] == ApprovalEvent(owner=ALICE, spender=BOB, value=15)

    def test_increase_overflow(self, ledger, log):
        ledger.approve(ALICE, BOB, UINT256_MAX)
        log.clear()

        with pytest.raises(ArithmeticOverflowError):
            ledger.increase_allowance(ALICE, BOB, 1)

        assert ledger.allowance(ALICE, BOB) == UINT256_MAX
        assert len(log) == 0

    def test_decrease(self, ledger, log):
        ledger.approve(ALICE, BOB, 10)
        ledger.decrease_allowance(ALICE, BOB, 4)

        assert ledger.allowance(ALICE, BOB) == 6
        assert log.events[-1] == ApprovalEvent(owner=ALICE, spender=BOB, value=6)

    def test_decrease_below_zero_is_generic_arithmetic_error(self, ledger):
        """Underflow allowance даёт generic тег, а не 'insufficient allowance'."""
        ledger.approve(ALICE, BOB, 3)

        with pytest.raises(ArithmeticOverflowError) as exc_info:
            ledger.decrease_allowance(ALICE, BOB, 4)

        assert exc_info.value.tag == ARITHMETIC_ERROR_TAG
        assert ledger.allowance(ALICE, BOB) == 3

    def test_increase_to_zero_spender(self, ledger):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.increase_allowance(ALICE, ZERO_ACCOUNT, 1)
        assert exc_info.value.tag == APPROVE_TO_ZERO

    def test_decrease_arithmetic_checked_before_zero_address(self, ledger):
        """Сначала вычисляется новое значение, затем проверяются адреса."""
        with pytest.raises(ArithmeticOverflowError):
            ledger.decrease_allowance(ZERO_ACCOUNT, BOB, 1)


class TestTransfer:
    """Тесты transfer."""

    def test_transfer_scenario(self, ledger, log):
        """ALICE (1000) → BOB 100: балансы 900/100, supply 1000, одно событие."""
        assert ledger.transfer(ALICE, BOB, 100) is True

        assert ledger.balance_of(ALICE) == 900
        assert ledger.balance_of(BOB) == 100
        assert ledger.total_supply() == 1000
        assert log.events == [TransferEvent(from_=ALICE, to=BOB, value=100)]

    def test_transfer_entire_balance(self, ledger):
        ledger.transfer(ALICE, BOB, 1000)

        assert ledger.balance_of(ALICE) == 0
        assert ledger.balance_of(BOB) == 1000

    def test_transfer_zero_value(self, ledger, log):
        ledger.transfer(ALICE, BOB, 0)

        assert ledger.balance_of(ALICE) == 1000
        assert log.events == [TransferEvent(from_=ALICE, to=BOB, value=0)]

    def test_self_transfer_keeps_balance(self, ledger):
        ledger.transfer(ALICE, ALICE, 400)

        assert ledger.balance_of(ALICE) == 1000
        assert ledger.check_supply_invariant()

    def test_insufficient_balance(self, ledger, log):
        with pytest.raises(ArithmeticOverflowError) as exc_info:
            ledger.transfer(ALICE, BOB, 1001)

        assert exc_info.value.tag == ARITHMETIC_ERROR_TAG
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(BOB) == 0
        assert len(log) == 0

    def test_transfer_from_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.transfer(ZERO_ACCOUNT, BOB, 0)

        assert exc_info.value.tag == TRANSFER_FROM_ZERO
        assert len(log) == 0

    def test_transfer_to_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.transfer(ALICE, ZERO_ACCOUNT, 10)

        assert exc_info.value.tag == TRANSFER_TO_ZERO
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(ZERO_ACCOUNT) == 0
        assert len(log) == 0

    def test_value_out_of_range(self, ledger):
        with pytest.raises(ValueError):
            ledger.transfer(ALICE, BOB, UINT256_MAX + 1)


class TestTransferFrom:
    """Тесты transfer_from и правила списания allowance."""

    def test_transfer_from_scenario(self, ledger, log):
        """Approval(A,B,0) эмитится до Transfer(A,C,50)."""
        ledger.approve(ALICE, BOB, 50)
        log.clear()

        assert ledger.transfer_from(BOB, ALICE, CAROL, 50) is True

        assert ledger.allowance(ALICE, BOB) == 0
        assert ledger.balance_of(ALICE) == 950
        assert ledger.balance_of(CAROL) == 50
        assert log.events == [
            ApprovalEvent(owner=ALICE, spender=BOB, value=0),
            TransferEvent(from_=ALICE, to=CAROL, value=50),
        ]

    def test_partial_spend(self, ledger):
        ledger.approve(ALICE, BOB, 50)
        ledger.transfer_from(BOB, ALICE, CAROL, 20)

        assert ledger.allowance(ALICE, BOB) == 30

    def test_insufficient_allowance(self, ledger, log):
        ledger.approve(ALICE, BOB, 10)
        log.clear()

        with pytest.raises(ArithmeticOverflowError):
            ledger.transfer_from(BOB, ALICE, CAROL, 11)

        assert ledger.allowance(ALICE, BOB) == 10
        assert ledger.balance_of(ALICE) == 1000
        assert len(log) == 0

    def test_no_allowance(self, ledger):
        with pytest.raises(ArithmeticOverflowError):
            ledger.transfer_from(BOB, ALICE, CAROL, 1)

    @pytest.mark.parametrize("value", [0, 1, 500, 1000])
    def test_infinite_allowance_not_decremented(self, ledger, log, value):
        ledger.approve(ALICE, BOB, UINT256_MAX)
        log.clear()

        ledger.transfer_from(BOB, ALICE, CAROL, value)

        assert ledger.allowance(ALICE, BOB) == UINT256_MAX
        assert log.of_type(ApprovalEvent) == []
        assert log.events == [TransferEvent(from_=ALICE, to=CAROL, value=value)]

    def test_allowance_restored_when_balance_insufficient(self, ledger, log):
        """Allowance списывается первым, но откатывается вместе с переводом."""
        ledger.approve(ALICE, BOB, 5000)
        log.clear()

        with pytest.raises(ArithmeticOverflowError):
            ledger.transfer_from(BOB, ALICE, CAROL, 2000)

        assert ledger.allowance(ALICE, BOB) == 5000
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(CAROL) == 0
        assert len(log) == 0

    def test_allowance_restored_when_to_is_zero(self, ledger, log):
        ledger.approve(ALICE, BOB, 50)
        log.clear()

        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.transfer_from(BOB, ALICE, ZERO_ACCOUNT, 10)

        assert exc_info.value.tag == TRANSFER_TO_ZERO
        assert ledger.allowance(ALICE, BOB) == 50
        assert len(log) == 0

    def test_from_zero_fails(self, ledger, log):
        with pytest.raises(Revert):
            ledger.transfer_from(BOB, ZERO_ACCOUNT, CAROL, 0)

        assert ledger.balance_of(CAROL) == 0
        assert len(log) == 0


class TestSpendAllowance:
    """Тесты spend_allowance (internal interface)."""

    def test_spend(self, ledger, log):
        ledger.approve(ALICE, BOB, 50)
        log.clear()

        ledger.spend_allowance(ALICE, BOB, 30)

        assert ledger.allowance(ALICE, BOB) == 20
        assert log.events == [ApprovalEvent(owner=ALICE, spender=BOB, value=20)]

    def test_spend_infinite(self, ledger, log):
        ledger.approve(ALICE, BOB, UINT256_MAX)
        log.clear()

        ledger.spend_allowance(ALICE, BOB, 10**30)

        assert ledger.allowance(ALICE, BOB) == UINT256_MAX
        assert len(log) == 0


class TestMintBurn:
    """Тесты mint / burn."""

    def test_mint(self, log):
        token = TokenLedger(sink=log)
        token.mint(ALICE, 500)

        assert token.total_supply() == 500
        assert token.balance_of(ALICE) == 500
        assert log.events == [TransferEvent(from_=ZERO_ACCOUNT, to=ALICE, value=500)]

    def test_mint_to_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.mint(ZERO_ACCOUNT, 10)

        assert exc_info.value.tag == MINT_TO_ZERO
        assert ledger.total_supply() == 1000
        assert len(log) == 0

    def test_mint_supply_overflow(self, ledger, log):
        with pytest.raises(ArithmeticOverflowError):
            ledger.mint(BOB, UINT256_MAX)

        assert ledger.total_supply() == 1000
        assert ledger.balance_of(BOB) == 0
        assert len(log) == 0

    def test_burn(self, ledger, log):
        ledger.burn(ALICE, 300)

        assert ledger.total_supply() == 700
        assert ledger.balance_of(ALICE) == 700
        assert log.events == [TransferEvent(from_=ALICE, to=ZERO_ACCOUNT, value=300)]

    def test_burn_from_zero(self, ledger, log):
        with pytest.raises(ZeroAddressError) as exc_info:
            ledger.burn(ZERO_ACCOUNT, 0)

        assert exc_info.value.tag == BURN_FROM_ZERO
        assert len(log) == 0

    def test_burn_more_than_balance(self, ledger, log):
        ledger.transfer(ALICE, BOB, 100)
        log.clear()

        with pytest.raises(ArithmeticOverflowError):
            ledger.burn(BOB, 101)

        assert ledger.balance_of(BOB) == 100
        assert ledger.total_supply() == 1000
        assert len(log) == 0


class _RejectingSink:
    """Sink, который принимает события, пока reject=False."""

    def __init__(self):
        self.events = []
        self.reject = False

    def emit(self, event):
        if self.reject:
            raise RuntimeError("sink unavailable")
        self.events.append(event)


class TestAtomicity:
    """Ошибка при фиксации транзакции откатывает состояние и буфер событий."""

    def test_contract_violating_account_rolls_back(self, ledger, log):
        """Пустой account id нарушает контракт Transfer: перевод не фиксируется."""
        before = ledger.snapshot()

        with pytest.raises(jsonschema.ValidationError):
            ledger.transfer(ALICE, "", 10)

        assert ledger.snapshot() == before
        assert ledger.balance_of("") == 0
        assert len(log) == 0

    def test_contract_violation_drops_earlier_events(self, ledger, log):
        """Approval не публикуется, если следующий Transfer нарушает контракт."""
        ledger.approve(ALICE, BOB, 50)
        log.clear()

        with pytest.raises(jsonschema.ValidationError):
            ledger.transfer_from(BOB, ALICE, "", 10)

        assert ledger.allowance(ALICE, BOB) == 50
        assert ledger.balance_of(ALICE) == 1000
        assert len(log) == 0

    def test_event_construction_failure_rolls_back(self, ledger, log):
        """Не-строковый account отклоняется моделью события."""
        before = ledger.snapshot()

        with pytest.raises(pydantic.ValidationError):
            ledger.transfer(ALICE, 123, 10)

        assert ledger.snapshot() == before
        assert len(log) == 0

    def test_rejecting_sink_rolls_back(self):
        sink = _RejectingSink()
        token = TokenLedger(sink=sink)
        token.mint(ALICE, 100)
        token.approve(ALICE, BOB, 40)
        sink.reject = True

        with pytest.raises(RuntimeError):
            token.transfer(ALICE, BOB, 10)
        with pytest.raises(RuntimeError):
            token.transfer_from(BOB, ALICE, CAROL, 10)
        with pytest.raises(RuntimeError):
            token.mint(BOB, 5)

        assert token.balance_of(ALICE) == 100
        assert token.balance_of(BOB) == 0
        assert token.balance_of(CAROL) == 0
        assert token.allowance(ALICE, BOB) == 40
        assert token.total_supply() == 100
        assert len(sink.events) == 2

    def test_ledger_usable_after_rejected_commit(self):
        sink = _RejectingSink()
        token = TokenLedger(sink=sink)
        token.mint(ALICE, 100)
        sink.reject = True

        with pytest.raises(RuntimeError):
            token.transfer(ALICE, BOB, 10)

        sink.reject = False
        token.transfer(ALICE, BOB, 10)

        assert token.balance_of(ALICE) == 90
        assert token.balance_of(BOB) == 10
        assert sink.events[-1] == TransferEvent(from_=ALICE, to=BOB, value=10)


class TestSupplyInvariant:
    """totalSupply == sum(balances) после последовательности операций."""

    def test_invariant_after_sequence(self, ledger):
        ledger.mint(BOB, 250)
        ledger.transfer(ALICE, CAROL, 400)
        ledger.approve(CAROL, BOB, 100)
        ledger.transfer_from(BOB, CAROL, BOB, 100)
        ledger.burn(BOB, 50)
        ledger.burn(ALICE, 600)

        snapshot = ledger.snapshot()
        assert ledger.check_supply_invariant()
        assert snapshot.supply_matches_balances()
        assert snapshot.total_supply == 600

    def test_invariant_after_failed_operations(self, ledger):
        for operation in (
            lambda: ledger.transfer(ALICE, BOB, 5000),
            lambda: ledger.burn(ALICE, 5000),
            lambda: ledger.mint(ZERO_ACCOUNT, 1),
            lambda: ledger.mint(ALICE, UINT256_MAX),
        ):
            with pytest.raises(Revert):
                operation()

        assert ledger.check_supply_invariant()
        assert ledger.total_supply() == 1000

    @pytest.mark.parametrize(
        "operation",
        [
            lambda t: t.transfer(ZERO_ACCOUNT, BOB, 0),
            lambda t: t.transfer(ALICE, ZERO_ACCOUNT, 1),
            lambda t: t.transfer_from(BOB, ZERO_ACCOUNT, CAROL, 0),
            lambda t: t.transfer_from(BOB, ALICE, ZERO_ACCOUNT, 0),
            lambda t: t.mint(ZERO_ACCOUNT, 1),
            lambda t: t.burn(ZERO_ACCOUNT, 0),
        ],
    )
    def test_zero_identity_never_changes_state(self, ledger, log, operation):
        before = ledger.snapshot()

        with pytest.raises(Revert):
            operation(ledger)

        assert ledger.snapshot() == before
        assert len(log) == 0


class TestSnapshot:
    """Тесты snapshot()."""

    def test_snapshot_contents(self, ledger):
        ledger.transfer(ALICE, BOB, 100)
        ledger.approve(ALICE, CAROL, 7)

        snapshot = ledger.snapshot()

        assert snapshot.name == "Test Token"
        assert snapshot.symbol == "TST"
        assert snapshot.decimals == 18
        assert snapshot.balances == {ALICE: 900, BOB: 100}
        assert snapshot.allowances == {ALICE: {CAROL: 7}}

    def test_zero_entries_omitted(self, ledger):
        ledger.transfer(ALICE, BOB, 1000)
        ledger.approve(ALICE, CAROL, 5)
        ledger.approve(ALICE, CAROL, 0)

        snapshot = ledger.snapshot()

        assert snapshot.balances == {BOB: 1000}
        assert snapshot.allowances == {}


class TestAliases:
    """camelCase aliases ведут в ту же реализацию."""

    def test_aliases_are_same_functions(self):
        assert TokenLedger.transferFrom is TokenLedger.transfer_from
        assert TokenLedger.increaseAllowance is TokenLedger.increase_allowance
        assert TokenLedger.decreaseAllowance is TokenLedger.decrease_allowance
        assert TokenLedger.balanceOf is TokenLedger.balance_of
        assert TokenLedger.totalSupply is TokenLedger.total_supply
        assert TokenLedger.spendAllowance is TokenLedger.spend_allowance

    def test_alias_behaviour(self, ledger, log):
        ledger.increaseAllowance(ALICE, BOB, 60)
        ledger.decreaseAllowance(ALICE, BOB, 10)
        ledger.transferFrom(BOB, ALICE, CAROL, 50)

        assert ledger.balanceOf(CAROL) == 50
        assert ledger.totalSupply() == 1000
        assert ledger.allowance(ALICE, BOB) == 0
