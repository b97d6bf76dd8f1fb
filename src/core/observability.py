"""Structured Logging — JSON formatter и настройка root logger.

Модули ядра логируют через logging.getLogger(__name__) и сами handlers
не настраивают; setup_logging вызывается один раз приложением.
"""

import json
import logging
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Форматирование записи лога как одной JSON строки."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Настройка root logger.

    Args:
        level: имя уровня ("DEBUG", "INFO", ...), неизвестное → INFO
        fmt: "json" или любое другое значение для текстового формата

    Returns:
        Добавленный handler (чтобы вызывающий код мог его снять)
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
