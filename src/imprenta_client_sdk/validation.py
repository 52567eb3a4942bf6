from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        return self.issues[0].reason

    @property
    def message(self) -> str:
        return str(self)


def parse_entity_id(value: Any, field: str = "id", label: str = "ID") -> int:
    if isinstance(value, bool):
        raise ClientValidationError([ValidationIssue(field, f"{label} inválido")])
    if isinstance(value, int):
        parsed = value
    else:
        raw = str(value).strip() if value is not None else ""
        if not raw:
            raise ClientValidationError([ValidationIssue(field, f"Ingrese un {label}")])
        if not raw.isdigit():
            raise ClientValidationError([ValidationIssue(field, f"{label} inválido: debe ser numérico")])
        parsed = int(raw)
    if parsed <= 0:
        raise ClientValidationError([ValidationIssue(field, f"{label} inválido: debe ser mayor que 0")])
    return parsed
