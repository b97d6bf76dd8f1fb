"""PauseGuard — emergency-stop guard (Unpaused ⇄ Paused).

Переходы:
- pause():   Unpaused → Paused, иначе PausedError ("paused")
- unpause(): Paused → Unpaused, иначе NotPausedError ("not paused")

require_not_paused() / require_paused(): чистые assertions без изменения
состояния. Composing код вызывает require_not_paused() непосредственно перед
мутацией ledger; guard и ledger друг о друге не знают.

Терминального состояния нет: машина циклится между двумя состояниями.
"""

import logging
from enum import Enum
from typing import Optional

from src.core.contracts import validate_event_record
from src.core.domain.account import AccountId
from src.core.domain.events import PausedEvent, UnpausedEvent
from src.core.errors import NotPausedError, PausedError
from src.core.event_log import EventLog, EventSink

logger = logging.getLogger(__name__)


class PauseState(str, Enum):
    """Состояние guard."""

    UNPAUSED = "UNPAUSED"
    PAUSED = "PAUSED"


class PauseGuard:
    """Guard с одним boolean флагом и событиями Paused/Unpaused.

    Identity инициатора передаётся явно (account): источник "текущего
    caller" принадлежит composing коду. Guard не проверяет, кто вызывает
    pause/unpause: отказ zero identity и прочих неуполномоченных caller-ов
    делает composing код до вызова (см. PausableToken._require_owner,
    owner не может быть zero identity).
    """

    def __init__(self, sink: Optional[EventSink] = None):
        """
        Args:
            sink: приёмник событий (default: новый EventLog)
        """
        self.sink: EventSink = sink if sink is not None else EventLog()
        self._paused = False

    @property
    def state(self) -> PauseState:
        return PauseState.PAUSED if self._paused else PauseState.UNPAUSED

    def paused(self) -> bool:
        """Read-only запрос флага."""
        return self._paused

    def pause(self, account: AccountId) -> None:
        """Unpaused → Paused, эмитит Paused(account).

        Флаг меняется только после того, как sink принял событие.
        """
        self.require_not_paused()

        self._publish(PausedEvent(account=account))
        self._paused = True
        logger.info("guard paused by %s", account)

    def unpause(self, account: AccountId) -> None:
        """Paused → Unpaused, эмитит Unpaused(account)."""
        self.require_paused()

        self._publish(UnpausedEvent(account=account))
        self._paused = False
        logger.info("guard unpaused by %s", account)

    def require_not_paused(self) -> None:
        """
        Raises:
            PausedError: если guard в состоянии Paused
        """
        if self._paused:
            logger.debug("require_not_paused failed")
            raise PausedError()

    def require_paused(self) -> None:
        """
        Raises:
            NotPausedError: если guard в состоянии Unpaused
        """
        if not self._paused:
            logger.debug("require_paused failed")
            raise NotPausedError()

    # camelCase aliases
    requireNotPaused = require_not_paused
    requirePaused = require_paused

    def _publish(self, event: PausedEvent | UnpausedEvent) -> None:
        validate_event_record(event.to_log_record())
        self.sink.emit(event)
