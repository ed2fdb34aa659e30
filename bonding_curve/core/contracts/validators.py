"""
Curve Contracts — JSON Schema контракты снапшотов и событий

Домен проверяет собственный экспорт: CurveSnapshot валидируется при
создании, каждое событие кривой при создании. Нарушение контракта
поднимается как ValueError со списком всех нарушений (путь: сообщение),
поэтому pydantic оборачивает его в ValidationError.

Схемы (пакетные данные, каталог schema/):
- curve_snapshot.json: CurveSnapshot.to_contract()
- curve_event.json: to_contract() событий EventLog
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик и кэш пакетных JSON Schema кривой."""

    def __init__(self):
        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema кривой по имени.

        Args:
            schema_name: Имя схемы без расширения ('curve_snapshot', 'curve_event')

        Raises:
            FileNotFoundError: Если такой схемы нет в пакете
            ValueError: Если сама схема невалидна (meta-validation)
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = SCHEMA_DIR / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACTS
# =============================================================================


class CurveContract:
    """
    Контракт одной схемы кривой.

    violations() возвращает все нарушения сразу (а не первое), в виде
    "путь: сообщение"; require() поднимает их одним ValueError.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def violations(self, data: Dict[str, Any]) -> List[str]:
        found = []
        for error in self._validator.iter_errors(data):
            path = "/".join(str(part) for part in error.absolute_path) or "<root>"
            found.append(f"{path}: {error.message}")
        return found

    def require(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValueError: Если данные нарушают контракт
        """
        found = self.violations(data)
        if found:
            raise ValueError(f"{self.schema_name} contract violated: " + "; ".join(found))


CURVE_SNAPSHOT_CONTRACT = CurveContract("curve_snapshot")
CURVE_EVENT_CONTRACT = CurveContract("curve_event")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def require_curve_snapshot(data: Dict[str, Any]) -> None:
    """Проверка данных снапшота кривой (ValueError при нарушении)."""
    CURVE_SNAPSHOT_CONTRACT.require(data)


def require_curve_event(data: Dict[str, Any]) -> None:
    """Проверка данных события кривой (ValueError при нарушении)."""
    CURVE_EVENT_CONTRACT.require(data)
