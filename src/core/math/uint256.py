"""
Uint256 — Checked 256-bit Unsigned Arithmetic

Модуль обеспечивает целочисленную арифметику в диапазоне [0, 2**256 - 1]
для всех операций над supply, балансами и allowance:
- Проверка принадлежности значения домену uint256
- Checked сложение/вычитание без wrap-around
- Единый generic тег ошибки для overflow и underflow

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат операции всегда в [0, UINT256_MAX] (иначе ArithmeticOverflowError)
2. Overflow и underflow неразличимы для наблюдателя (один тег)
3. Все операции детерминированы, float никогда не используется
"""

from typing import Final

from src.core.errors import ARITHMETIC_ERROR_TAG, ArithmeticOverflowError

# =============================================================================
# ГРАНИЦЫ ДИАПАЗОНА
# =============================================================================

UINT256_BITS: Final[int] = 256

# Максимальное значение uint256. Используется также как sentinel
# "infinite allowance": такой allowance никогда не уменьшается.
UINT256_MAX: Final[int] = 2**UINT256_BITS - 1


# =============================================================================
# ПРОВЕРКА ДОМЕНА
# =============================================================================


def is_uint256(value: object) -> bool:
    """
    Проверка, является ли значение валидным uint256.

    bool формально является подклассом int, но как сумма не допускается.

    Examples:
        >>> is_uint256(0)
        True
        >>> is_uint256(UINT256_MAX + 1)
        False
        >>> is_uint256(True)
        False
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= UINT256_MAX


def validate_uint256(value: object, name: str) -> None:
    """
    Валидация входного параметра как uint256.

    Это проверка типа входа (программная ошибка вызывающего кода),
    а не revert операции, поэтому используется ValueError.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value не int или вне [0, UINT256_MAX]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ValueError(f"{name} must be <= UINT256_MAX, got {value}")


# =============================================================================
# CHECKED АРИФМЕТИКА
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """
    Сложение с проверкой переполнения.

    Args:
        a: Первое слагаемое (uint256)
        b: Второе слагаемое (uint256)

    Returns:
        a + b

    Raises:
        ArithmeticOverflowError: Если a + b > UINT256_MAX

    Examples:
        >>> checked_add(1, 2)
        3
        >>> checked_add(UINT256_MAX, 1)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ArithmeticOverflowError: arithmetic overflow
    """
    result = a + b
    if result > UINT256_MAX:
        raise ArithmeticOverflowError(detail=f"{a} + {b} exceeds uint256")
    return result


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание с проверкой underflow.

    Недостаточный баланс или allowance сводится именно к этой ошибке:
    отдельного "insufficient balance" тега нет.

    Raises:
        ArithmeticOverflowError: Если b > a
    """
    if b > a:
        raise ArithmeticOverflowError(detail=f"{a} - {b} is negative")
    return a - b
