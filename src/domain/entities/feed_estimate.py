"""
Pedido e resultado de estimativa de ração.

Este módulo define os objetos transitórios trocados com qualquer preditor
(fórmula linear, API remota ou modelo local):

- `FeedEstimateRequest`: montado a cada chamada a partir do payload
  `POST /weight/predict` (camelCase) e validado no construtor.
- `FeedEstimateResult`: devolvido ao chamador, nunca persistido.
- `FeedPeriod`: item do detalhamento por período (semanas, por padrão).

Princípios:
- **Imutabilidade**: dataclasses `frozen=True`.
- **Validação na borda**: pesos >= 0 e horizonte > 0 são checados antes de
  qualquer cálculo; violações levantam `InvalidArgument`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple
import math

from src.domain.enums import WeightUnit
from src.domain.exceptions import InvalidArgument

# tamanho padrão de cada período do detalhamento (dias)
DEFAULT_PERIOD_DAYS = 7


def require_weight(value: Any, name: str) -> float:
    """Valida um peso (número finito >= 0) e devolve como float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} deve ser numérico: {value!r}")
    if not math.isfinite(value):
        raise InvalidArgument(f"{name} deve ser finito: {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} não pode ser negativo: {value}")
    return float(value)


def require_horizon(value: Any) -> int:
    """Valida o horizonte (inteiro > 0). Aceita float inteiro, ex.: 30.0."""
    if isinstance(value, bool):
        raise InvalidArgument(f"horizonDays deve ser inteiro: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidArgument(f"horizonDays deve ser inteiro: {value!r}")
    if value <= 0:
        raise InvalidArgument(f"horizonDays deve ser > 0: {value}")
    return value


@dataclass(frozen=True)
class FeedEstimateRequest:
    """
    Pedido de estimativa para um animal/lote.

    Attributes:
        subject_id: Identificador do animal/lote.
        current_weight: Peso atual (kg).
        target_weight: Peso-alvo (kg); opcional, preditores podem projetar.
        horizon_days: Dias para atingir o alvo.
    """
    subject_id: str
    current_weight: float
    horizon_days: int
    target_weight: Optional[float] = None

    def __post_init__(self):
        if not str(self.subject_id).strip():
            raise InvalidArgument("subjectId não pode estar vazio.")
        object.__setattr__(self, "subject_id", str(self.subject_id).strip())
        object.__setattr__(self, "current_weight",
                           require_weight(self.current_weight, "currentWeight"))
        if self.target_weight is not None:
            object.__setattr__(self, "target_weight",
                               require_weight(self.target_weight, "targetWeight"))
        object.__setattr__(self, "horizon_days", require_horizon(self.horizon_days))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FeedEstimateRequest":
        """
        Constrói o pedido a partir do JSON da API.

        Raises:
            InvalidArgument: payload não é objeto ou falta campo obrigatório.
        """
        if not isinstance(payload, Mapping):
            raise InvalidArgument("Payload deve ser um objeto JSON.")
        missing = [k for k in ("subjectId", "currentWeight", "horizonDays") if payload.get(k) is None]
        if missing:
            raise InvalidArgument(f"Campos obrigatórios ausentes: {', '.join(missing)}")
        return cls(
            subject_id=payload["subjectId"],
            current_weight=payload["currentWeight"],
            target_weight=payload.get("targetWeight"),
            horizon_days=payload["horizonDays"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subjectId": self.subject_id,
            "currentWeight": self.current_weight,
            "targetWeight": self.target_weight,
            "horizonDays": self.horizon_days,
        }


@dataclass(frozen=True)
class FeedPeriod:
    """Ração recomendada para os dias [start_day, end_day] (1-based, inclusivo)."""
    start_day: int
    end_day: int
    feed: float

    @property
    def days(self) -> int:
        return self.end_day - self.start_day + 1

    def to_dict(self) -> Dict[str, Any]:
        return {"startDay": self.start_day, "endDay": self.end_day, "feed": round(self.feed, 3)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FeedPeriod":
        try:
            return cls(int(d["startDay"]), int(d["endDay"]), float(d["feed"]))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidArgument(f"Período inválido: {d!r}") from e


def split_by_period(total: float, horizon_days: int,
                    period_days: int = DEFAULT_PERIOD_DAYS) -> Tuple[FeedPeriod, ...]:
    """
    Divide a ração total em períodos consecutivos, proporcional aos dias.

    O último período pode ser mais curto; a soma dos períodos é o total.
    """
    horizon_days = require_horizon(horizon_days)
    daily = total / horizon_days
    periods: List[FeedPeriod] = []
    start = 1
    while start <= horizon_days:
        end = min(horizon_days, start + period_days - 1)
        periods.append(FeedPeriod(start, end, daily * (end - start + 1)))
        start = end + 1
    return tuple(periods)


@dataclass(frozen=True)
class FeedEstimateResult:
    """
    Resultado de uma estimativa de ração.

    Attributes:
        recommended_feed: Massa total de ração para o horizonte.
        unit: Unidade de `recommended_feed` e dos períodos.
        confidence: Escore [0..1] quando o preditor fornece.
        breakdown: Detalhamento por período (pode ser vazio).
    """
    recommended_feed: float
    unit: WeightUnit = WeightUnit.KG
    confidence: Optional[float] = None
    breakdown: Tuple[FeedPeriod, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not math.isfinite(self.recommended_feed):
            raise InvalidArgument(f"recommendedFeed inválido: {self.recommended_feed!r}")
        if self.confidence is not None and not (0.0 <= self.confidence <= 1.0):
            raise InvalidArgument(f"confidence fora de [0, 1]: {self.confidence}")
        object.__setattr__(self, "breakdown", tuple(self.breakdown))

    def to_kg(self) -> "FeedEstimateResult":
        """Converte total e períodos para quilogramas."""
        if self.unit is WeightUnit.KG:
            return self
        f = self.unit.to_kg
        return replace(
            self,
            recommended_feed=self.recommended_feed * f,
            unit=WeightUnit.KG,
            breakdown=tuple(replace(p, feed=p.feed * f) for p in self.breakdown),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Formato da resposta de `POST /weight/predict`."""
        d: Dict[str, Any] = {
            "recommendedFeed": round(self.recommended_feed, 3),
            "unit": self.unit.value,
        }
        if self.confidence is not None:
            d["confidence"] = round(self.confidence, 3)
        if self.breakdown:
            d["breakdown"] = [p.to_dict() for p in self.breakdown]
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FeedEstimateResult":
        """
        Interpreta a resposta de um preditor remoto.

        Raises:
            InvalidArgument: campos ausentes ou com tipo/valor inválido.
        """
        if not isinstance(d, Mapping) or d.get("recommendedFeed") is None:
            raise InvalidArgument("Resposta sem 'recommendedFeed'.")
        try:
            feed = float(d["recommendedFeed"])
            unit = WeightUnit(str(d.get("unit") or WeightUnit.KG.value).lower())
            conf = d.get("confidence")
            conf = None if conf is None else float(conf)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"Resposta inválida: {e}") from e
        breakdown = d.get("breakdown") or []
        if not isinstance(breakdown, list):
            raise InvalidArgument("'breakdown' deve ser uma lista.")
        return cls(
            recommended_feed=feed,
            unit=unit,
            confidence=conf,
            breakdown=tuple(FeedPeriod.from_dict(p) for p in breakdown),
        )
