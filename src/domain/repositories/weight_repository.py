# define como buscar as pesagens, mas nao onde ficam guardadas
# src/domain/repositories/weight_repository.py
from __future__ import annotations
from typing import Protocol, Iterable, List, Optional, Tuple
from src.domain.entities.weight_observation import WeightObservation

class IWeightRepository(Protocol):
    """Fonte do histórico de pesagens.

    O núcleo só lê o histórico; quem grava é a aplicação hospedeira
    (banco, planilha, API). Implementações concretas ficam na infra.
    """

    def add(self, observation: WeightObservation) -> None:
        """Registra uma pesagem (usado por importadores e testes)."""
        ...

    def list_for_subject(self, subject_id: str, limit: int = 10) -> Iterable[WeightObservation]:
        """Últimas pesagens de um animal.

        Args:
            subject_id: Identificador do animal/lote.
            limit: Quantidade máxima de registros.

        Returns:
            As `limit` pesagens mais recentes, ordenadas da mais antiga
            para a mais nova.
        """
        ...

    def list_all(
        self,
        subject_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[WeightObservation], int]:
        """Página de pesagens + total de registros do filtro.

        Returns:
            (linhas da página ordenadas por data, total sem paginação)
        """
        ...
