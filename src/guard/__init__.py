"""Guard — emergency-stop примитивы, блокирующие мутации на время паузы."""

from .pause_guard import PauseGuard, PauseState

__all__ = [
    "PauseGuard",
    "PauseState",
]
