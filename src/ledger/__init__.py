"""Ledger — учёт fungible-токена (supply, балансы, allowance, mint/burn)."""

from .token_ledger import DECIMALS, TokenConfig, TokenLedger

__all__ = [
    "DECIMALS",
    "TokenConfig",
    "TokenLedger",
]
