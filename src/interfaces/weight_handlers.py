"""
Handlers HTTP independentes de framework.

A aplicação hospedeira monta as rotas; aqui só convertemos entrada/saída e
mapeamos erros de domínio para status:

- `GET /weight/data`     -> handle_weight_data
- `POST /weight/predict` -> handle_predict

Cada handler devolve `(status, corpo_json)`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple
import logging

from src.domain.entities.feed_estimate import FeedEstimateRequest
from src.domain.exceptions import InvalidArgument, PredictionUnavailable
from src.domain.use_cases.list_weight_data_use_case import ListWeightDataUseCase
from src.domain.use_cases.predict_feed_use_case import PredictFeedUseCase

log = logging.getLogger("pesagem.interfaces.http")

Response = Tuple[int, Dict[str, Any]]


def _error(status: int, code: str, exc: Exception) -> Response:
    return status, {"error": code, "message": str(exc)}


def _int_param(params: Mapping[str, Any], name: str, default: int) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{name} deve ser inteiro: {raw!r}") from e


def handle_weight_data(use_case: ListWeightDataUseCase,
                       params: Optional[Mapping[str, Any]] = None) -> Response:
    """Parâmetros aceitos: subjectId, limit (100), offset (0)."""
    params = params or {}
    try:
        result = use_case.execute(
            subject_id=params.get("subjectId") or None,
            limit=_int_param(params, "limit", 100),
            offset=_int_param(params, "offset", 0),
        )
    except InvalidArgument as e:
        return _error(400, "invalid_argument", e)
    return 200, result.to_dict()


def handle_predict(use_case: PredictFeedUseCase, payload: Any) -> Response:
    """Recebe o JSON do pedido e devolve a recomendação de ração."""
    try:
        request = FeedEstimateRequest.from_dict(payload)
        result = use_case.execute(request)
    except InvalidArgument as e:
        log.info("predict_rejected err=%s", e)
        return _error(400, "invalid_argument", e)
    except PredictionUnavailable as e:
        log.error("predict_unavailable err=%s", e)
        return _error(500, "prediction_unavailable", e)
    return 200, result.to_dict()
