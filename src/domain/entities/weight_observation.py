from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
import math

from src.domain.exceptions import InvalidArgument


def _to_utc(value: datetime | date | str) -> datetime:
    """Normaliza data/hora (ISO, date ou datetime) para datetime em UTC."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidArgument(f"Data inválida: {value!r}") from e
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise InvalidArgument(f"Data inválida: {value!r}")


@dataclass(frozen=True)
class WeightObservation:
    """
    Registro histórico de pesagem de um animal/lote.

    - Imutável (criado pelo processo externo de digitação).
    - Valida identificador e peso no __post_init__.
    - measured_at sempre normalizado para UTC.
    """
    subject_id: str
    weight: float                 # kg
    measured_at: datetime
    note: Optional[str] = None

    def __post_init__(self):
        if not str(self.subject_id).strip():
            raise InvalidArgument("Identificador do animal não pode estar vazio.")
        if isinstance(self.weight, bool) or not isinstance(self.weight, (int, float)):
            raise InvalidArgument(f"Peso inválido: {self.weight!r}")
        if not math.isfinite(self.weight) or self.weight < 0:
            raise InvalidArgument(f"Peso deve ser >= 0: {self.weight}")
        object.__setattr__(self, "subject_id", str(self.subject_id).strip())
        object.__setattr__(self, "weight", float(self.weight))
        object.__setattr__(self, "measured_at", _to_utc(self.measured_at))

    def to_dict(self) -> Dict[str, Any]:
        """Formato da API (`GET /weight/data`)."""
        d: Dict[str, Any] = {
            "subjectId": self.subject_id,
            "weight": self.weight,
            "measuredAt": self.measured_at.isoformat(),
        }
        if self.note:
            d["note"] = self.note
        return d
