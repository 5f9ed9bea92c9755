# src/infrastructure/ai/remote_feed_predictor.py
# cliente da API externa de previsão (POST /weight/predict)
from __future__ import annotations
from typing import Any, Dict, Optional, Sequence
import logging
import math

import requests

from config.settings import PREDICTOR_TIMEOUT
from src.domain.entities.feed_estimate import FeedEstimateRequest, FeedEstimateResult
from src.domain.entities.weight_observation import WeightObservation
from src.domain.exceptions import InvalidArgument, PredictionUnavailable

log = logging.getLogger("pesagem.ai.remote")

PREDICT_PATH = "/weight/predict"


class RemoteFeedPredictor:
    """
    Delega a estimativa a um serviço HTTP externo.

    - Uma única requisição por chamada, com timeout e sem retry.
    - Qualquer falha (rede, status != 2xx, corpo inválido) vira
      PredictionUnavailable com a mensagem original.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        timeout: float = PREDICTOR_TIMEOUT,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            base_url: URL base do preditor (sem o caminho /weight/predict).
            timeout: Timeout da requisição em segundos.
            api_key: Chave opcional enviada em X-API-Key.
            session: Sessão requests já configurada (útil em testes).
        """
        if not base_url or not base_url.strip():
            raise InvalidArgument("URL do preditor remoto não configurada.")
        self.base_url = base_url.strip().rstrip("/")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) \
                or not math.isfinite(timeout) or timeout <= 0:
            raise InvalidArgument(f"Timeout deve ser finito e > 0: {timeout!r}")
        self.timeout = float(timeout)
        self.session = session or requests.Session()
        if api_key:
            self.session.headers.update({"X-API-Key": api_key})

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{PREDICT_PATH}"

    def build_payload(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> Dict[str, Any]:
        """Corpo JSON enviado ao serviço (pedido + histórico recente)."""
        payload = request.to_dict()
        payload["recentHistory"] = [o.to_dict() for o in history]
        return payload

    def predict(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> FeedEstimateResult:
        try:
            response = self.session.post(
                self.endpoint,
                json=self.build_payload(request, history),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            log.error("remote_unreachable url=%s err=%s", self.endpoint, e)
            raise PredictionUnavailable(f"Preditor inacessível: {e}") from e

        if not response.ok:
            detail = (response.text or response.reason or "").strip()[:500]
            log.error("remote_error url=%s status=%s", self.endpoint, response.status_code)
            raise PredictionUnavailable(
                f"Preditor respondeu {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PredictionUnavailable("Resposta do preditor não é JSON.",
                                        status_code=response.status_code) from e

        try:
            result = FeedEstimateResult.from_dict(body)
        except InvalidArgument as e:
            raise PredictionUnavailable(f"Resposta do preditor inválida: {e}",
                                        status_code=response.status_code) from e

        log.debug("remote_ok subject=%s feed=%s", request.subject_id, result.recommended_feed)
        return result
