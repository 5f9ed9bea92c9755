# escolhe o preditor a partir da configuração (sem estado global)
from __future__ import annotations
import logging

from config.settings import PredictorSettings
from src.domain.enums import PredictorStrategy
from src.domain.exceptions import InvalidArgument
from src.domain.feed_estimator import FeedEstimator, IFeedPredictor
from src.infrastructure.ai.random_forest_feed_model import RandomForestFeedPredictor
from src.infrastructure.ai.remote_feed_predictor import RemoteFeedPredictor

log = logging.getLogger("pesagem.ai.factory")


def resolve_strategy(settings: PredictorSettings) -> PredictorStrategy:
    """
    Estratégia efetiva:
    - preditor desligado -> LINEAR
    - ligado sem estratégia explícita -> REMOTE se houver URL, senão MODEL
    """
    if not settings.enabled:
        return PredictorStrategy.LINEAR
    if settings.strategy is None:
        return PredictorStrategy.REMOTE if settings.base_url else PredictorStrategy.MODEL
    try:
        return PredictorStrategy(settings.strategy)
    except ValueError as e:
        raise InvalidArgument(f"PREDICTOR_STRATEGY desconhecida: {settings.strategy!r}") from e


def build_predictor(settings: PredictorSettings) -> IFeedPredictor:
    """Instancia o preditor configurado."""
    strategy = resolve_strategy(settings)

    if strategy is PredictorStrategy.REMOTE:
        if not settings.base_url:
            raise InvalidArgument("PREDICTOR_URL é obrigatório para a estratégia 'remote'.")
        predictor = RemoteFeedPredictor(settings.base_url, timeout=settings.timeout)
    elif strategy is PredictorStrategy.MODEL:
        if settings.model_path is None:
            raise InvalidArgument("PREDICTOR_MODEL_PATH é obrigatório para a estratégia 'model'.")
        predictor = RandomForestFeedPredictor(settings.model_path)
    else:
        predictor = FeedEstimator(settings.feed_conversion_ratio)

    log.info("predictor_selected strategy=%s", strategy.value)
    return predictor
