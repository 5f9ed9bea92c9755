"""
Estimativa linear de ração a partir do ganho de peso desejado.

`FeedEstimator` é o preditor padrão: sem modelo, sem rede, apenas a
conversão alimentar (FCR) aplicada ao ganho de peso:

    ganho_diario = (alvo - atual) / dias
    racao_total  = ganho_diario * FCR * dias   ( == (alvo - atual) * FCR )

Qualquer outro preditor (API remota, modelo local) implementa o mesmo
contrato `IFeedPredictor` e pode ser trocado sem mudar os casos de uso.
"""

from __future__ import annotations

from typing import Protocol, Sequence
import math

from config.settings import FEED_CONVERSION_RATIO
from src.domain.entities.feed_estimate import (
    FeedEstimateRequest,
    FeedEstimateResult,
    require_horizon,
    require_weight,
    split_by_period,
)
from src.domain.entities.weight_observation import WeightObservation
from src.domain.enums import WeightUnit
from src.domain.exceptions import InvalidArgument


class IFeedPredictor(Protocol):
    """Contrato de qualquer preditor de ração."""

    def predict(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> FeedEstimateResult:
        """
        Estima a ração total para o pedido.

        Args:
            request: Pedido validado.
            history: Pesagens recentes do animal (mais antiga → mais nova).

        Raises:
            InvalidArgument: pedido insuficiente para o preditor.
            PredictionUnavailable: preditor externo/local indisponível.
        """
        ...


def daily_gain_from_history(history: Sequence[WeightObservation]) -> float:
    """
    Ganho médio diário (kg/dia) entre a primeira e a última pesagem.

    Raises:
        InvalidArgument: menos de duas pesagens ou todas no mesmo instante.
    """
    obs = sorted(history, key=lambda o: o.measured_at)
    if len(obs) < 2:
        raise InvalidArgument("Histórico insuficiente: são necessárias 2 pesagens.")
    days = (obs[-1].measured_at - obs[0].measured_at).total_seconds() / 86400.0
    if days <= 0:
        raise InvalidArgument("Histórico insuficiente: pesagens na mesma data.")
    return (obs[-1].weight - obs[0].weight) / days


class FeedEstimator:
    """
    Preditor linear com FCR configurável.

    - Sem estado e sem efeitos colaterais.
    - `estimate` é a função pura; `predict` adapta ao contrato IFeedPredictor.
    """

    name = "linear"

    def __init__(self, feed_conversion_ratio: float = FEED_CONVERSION_RATIO) -> None:
        if (isinstance(feed_conversion_ratio, bool)
                or not isinstance(feed_conversion_ratio, (int, float))
                or not math.isfinite(feed_conversion_ratio)
                or feed_conversion_ratio <= 0):
            raise InvalidArgument(f"FCR deve ser finito e > 0: {feed_conversion_ratio!r}")
        self.feed_conversion_ratio = float(feed_conversion_ratio)

    def estimate(self, current_weight: float, target_weight: float, horizon_days: int) -> float:
        """
        Ração total (kg) para levar o peso de `current_weight` a `target_weight`.

        Args:
            current_weight: Peso atual (>= 0).
            target_weight: Peso-alvo (>= 0). Abaixo do atual dá valor negativo.
            horizon_days: Dias para atingir o alvo (> 0).

        Raises:
            InvalidArgument: se alguma pré-condição for violada.
        """
        current = require_weight(current_weight, "currentWeight")
        target = require_weight(target_weight, "targetWeight")
        days = require_horizon(horizon_days)

        daily_gain = (target - current) / days
        return daily_gain * self.feed_conversion_ratio * days

    def predict(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> FeedEstimateResult:
        """
        Sem alvo no pedido, projeta o alvo pela tendência do histórico
        (ganhos negativos contam como zero).
        """
        target = request.target_weight
        if target is None:
            gain = max(0.0, daily_gain_from_history(history))
            target = request.current_weight + gain * request.horizon_days

        total = self.estimate(request.current_weight, target, request.horizon_days)
        return FeedEstimateResult(
            recommended_feed=total,
            unit=WeightUnit.KG,
            confidence=None,
            breakdown=split_by_period(total, request.horizon_days),
        )
