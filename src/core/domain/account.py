"""
Account identity — непрозрачный идентификатор участника операции.

AccountId сравнивается и хешируется как обычная строка. Формат не
проверяется: ядро различает только zero identity и всё остальное.
"""

from typing import Final, TypeAlias

AccountId: TypeAlias = str

# Zero identity: никогда не держит баланс/allowance и не вызывает мутаций.
# В событиях Transfer обозначает эмиссию (from) или сжигание (to) supply.
ZERO_ACCOUNT: Final[AccountId] = "0x" + "00" * 20


def is_zero_account(account: AccountId) -> bool:
    """True если account является zero identity."""
    return account == ZERO_ACCOUNT
