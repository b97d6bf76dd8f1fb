"""
JSON Schema Event Contract Validators

Модуль для валидации log records событий согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы (src/core/contracts/schema/):
- transfer_event.json
- approval_event.json
- paused_event.json
- unpaused_event.json
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом в каталоге schema/ рядом с модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'transfer_event')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def get_errors(self, data: Dict[str, Any]) -> list[str]:
        """
        Все ошибки валидации в читаемом виде.

        Returns:
            Список сообщений ("path: message"), пустой если данные валидны
        """
        errors = []
        for error in self.validator.iter_errors(data):
            path = "/".join(str(p) for p in error.absolute_path) or "<root>"
            errors.append(f"{path}: {error.message}")
        return errors


class TransferEventValidator(ContractValidator):
    """Валидатор для transfer_event контракта."""

    def __init__(self):
        super().__init__("transfer_event")


class ApprovalEventValidator(ContractValidator):
    """Валидатор для approval_event контракта."""

    def __init__(self):
        super().__init__("approval_event")


class PausedEventValidator(ContractValidator):
    """Валидатор для paused_event контракта."""

    def __init__(self):
        super().__init__("paused_event")


class UnpausedEventValidator(ContractValidator):
    """Валидатор для unpaused_event контракта."""

    def __init__(self):
        super().__init__("unpaused_event")


# Имя события -> валидатор
_VALIDATORS_BY_EVENT: Dict[str, type[ContractValidator]] = {
    "Transfer": TransferEventValidator,
    "Approval": ApprovalEventValidator,
    "Paused": PausedEventValidator,
    "Unpaused": UnpausedEventValidator,
}

# Кэш экземпляров валидаторов (один Draft202012Validator на событие)
_VALIDATOR_CACHE: Dict[str, ContractValidator] = {}


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validator_for_event(event_name: str) -> ContractValidator:
    """
    Валидатор по имени события. Экземпляр создаётся один раз и кэшируется.

    Raises:
        KeyError: Если для события нет контракта
    """
    if event_name in _VALIDATOR_CACHE:
        return _VALIDATOR_CACHE[event_name]

    try:
        validator_cls = _VALIDATORS_BY_EVENT[event_name]
    except KeyError:
        raise KeyError(f"No contract for event: {event_name!r}") from None

    validator = validator_cls()
    _VALIDATOR_CACHE[event_name] = validator
    return validator


def validate_event_record(record: Dict[str, Any]) -> None:
    """
    Валидация log record события (диспатч по полю "event").

    Raises:
        ValidationError: Если record не соответствует своему контракту
            или поле "event" отсутствует/неизвестно
    """
    event_name = record.get("event")
    if event_name not in _VALIDATORS_BY_EVENT:
        raise ValidationError(f"Unknown event name: {event_name!r}")
    validator_for_event(event_name).validate(record)


def validate_transfer_event(data: Dict[str, Any]) -> None:
    """Валидация transfer_event record."""
    validator_for_event("Transfer").validate(data)


def validate_approval_event(data: Dict[str, Any]) -> None:
    """Валидация approval_event record."""
    validator_for_event("Approval").validate(data)


def validate_paused_event(data: Dict[str, Any]) -> None:
    """Валидация paused_event record."""
    validator_for_event("Paused").validate(data)


def validate_unpaused_event(data: Dict[str, Any]) -> None:
    """Валидация unpaused_event record."""
    validator_for_event("Unpaused").validate(data)
