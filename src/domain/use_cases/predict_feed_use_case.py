# src/domain/use_cases/predict_feed_use_case.py
from __future__ import annotations
import logging

from config.settings import HISTORY_LIMIT
from src.domain.entities.feed_estimate import FeedEstimateRequest, FeedEstimateResult
from src.domain.feed_estimator import IFeedPredictor
from src.domain.repositories.weight_repository import IWeightRepository

log = logging.getLogger("pesagem.usecases.feed")

class PredictFeedUseCase:
    """
    Calcula a recomendação de ração de um animal:
    - busca as pesagens recentes no repositório
    - delega ao preditor injetado (linear, remoto ou modelo local)
    - normaliza o resultado para kg
    """

    def __init__(
        self,
        weight_repo: IWeightRepository,
        predictor: IFeedPredictor,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        """
        Args:
            weight_repo: Fonte do histórico de pesagens.
            predictor: Qualquer implementação de IFeedPredictor.
            history_limit: Quantas pesagens recentes enviar ao preditor.
        """
        self.weight_repo = weight_repo
        self.predictor = predictor
        self.history_limit = history_limit

    def execute(self, request: FeedEstimateRequest) -> FeedEstimateResult:
        """
        Executa a previsão para um pedido já validado.

        Raises:
            InvalidArgument / PredictionUnavailable: propagados do preditor.
        """
        history = list(self.weight_repo.list_for_subject(request.subject_id, self.history_limit))
        try:
            result = self.predictor.predict(request, history).to_kg()
        except Exception:
            log.warning("feed_failed subject=%s predictor=%s",
                        request.subject_id, getattr(self.predictor, "name", type(self.predictor).__name__))
            raise

        log.info("feed_predicted subject=%s feed=%.2f%s history=%d conf=%s",
                 request.subject_id, result.recommended_feed, result.unit.value,
                 len(history), result.confidence)
        return result
