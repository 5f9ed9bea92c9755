# src/domain/use_cases/list_weight_data_use_case.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from src.domain.entities.weight_observation import WeightObservation
from src.domain.exceptions import InvalidArgument
from src.domain.repositories.weight_repository import IWeightRepository

log = logging.getLogger("pesagem.usecases.weight_data")

@dataclass(frozen=True)
class WeightDataResult:
    """
    DTO imutável com uma página de pesagens.

    Atributos:
        data: pesagens da página.
        total_records: total de registros do filtro (sem paginação).
    """
    data: List[WeightObservation]
    total_records: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [o.to_dict() for o in self.data],
            "totalRecords": self.total_records,
        }

class ListWeightDataUseCase:
    """Lista pesagens para `GET /weight/data`."""

    def __init__(self, weight_repo: IWeightRepository) -> None:
        self.weight_repo = weight_repo

    def execute(
        self,
        subject_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> WeightDataResult:
        """
        Args:
            subject_id: Filtra por animal (None = todos).
            limit: Tamanho da página (> 0).
            offset: Registros a pular (>= 0).
        """
        if limit <= 0:
            raise InvalidArgument(f"limit deve ser > 0: {limit}")
        if offset < 0:
            raise InvalidArgument(f"offset não pode ser negativo: {offset}")

        rows, total = self.weight_repo.list_all(subject_id, limit, offset)
        log.info("weight_data_listed subject=%s rows=%d total=%d", subject_id, len(rows), total)
        return WeightDataResult(data=list(rows), total_records=total)
