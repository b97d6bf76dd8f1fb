"""
Revert hierarchy — ошибки, прерывающие операцию ledger/guard.

Каждая ошибка несёт короткий тег (tag), который наблюдатели и вызывающий
код могут сравнивать напрямую. Структурированных payload нет: только тег
и опциональная диагностическая строка.

Любой Revert поднимается ДО видимого изменения состояния и до эмиссии
событий текущего вызова.
"""

from typing import Final

# =============================================================================
# ТЕГИ
# =============================================================================

# Общий тег для overflow и underflow (не зависит от операции)
ARITHMETIC_ERROR_TAG: Final[str] = "arithmetic overflow"

APPROVE_FROM_ZERO: Final[str] = "approve from zero"
APPROVE_TO_ZERO: Final[str] = "approve to zero"
TRANSFER_FROM_ZERO: Final[str] = "transfer from zero"
TRANSFER_TO_ZERO: Final[str] = "transfer to zero"
MINT_TO_ZERO: Final[str] = "mint to zero"
BURN_FROM_ZERO: Final[str] = "burn from zero"

PAUSED_TAG: Final[str] = "paused"
NOT_PAUSED_TAG: Final[str] = "not paused"

UNAUTHORIZED_TAG: Final[str] = "unauthorized"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class Revert(Exception):
    """
    Базовый класс для всех abort-ов операции.

    Attributes:
        tag: Короткий описательный тег (например, "transfer to zero")
        detail: Опциональная диагностика для логов
    """

    def __init__(self, tag: str, detail: str = ""):
        self.tag = tag
        self.detail = detail
        super().__init__(tag if not detail else f"{tag}: {detail}")


class ZeroAddressError(Revert):
    """Zero identity использован как участник операции."""
    pass


class ArithmeticOverflowError(Revert):
    """
    Checked-арифметика вышла за пределы uint256.

    Покрывает и overflow, и underflow, в том числе недостаточный баланс
    и decrease allowance ниже нуля.
    """

    def __init__(self, detail: str = ""):
        super().__init__(ARITHMETIC_ERROR_TAG, detail)


class PausedError(Revert):
    """Операция требует состояния Unpaused, а guard на паузе."""

    def __init__(self, detail: str = ""):
        super().__init__(PAUSED_TAG, detail)


class NotPausedError(Revert):
    """Операция требует состояния Paused, а guard не на паузе."""

    def __init__(self, detail: str = ""):
        super().__init__(NOT_PAUSED_TAG, detail)


class UnauthorizedError(Revert):
    """Caller не имеет права на привилегированную операцию."""

    def __init__(self, detail: str = ""):
        super().__init__(UNAUTHORIZED_TAG, detail)
