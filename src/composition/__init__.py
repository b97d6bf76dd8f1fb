"""Composition — контракты, собранные из ledger и guard примитивов."""

from .pausable_token import PausableToken

__all__ = [
    "PausableToken",
]
