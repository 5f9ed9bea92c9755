# implementação em memória do histórico de pesagens
# a aplicação hospedeira pode trocar por banco/API implementando IWeightRepository
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from src.domain.entities.weight_observation import WeightObservation


class InMemoryWeightRepository:
    def __init__(self, observations: Iterable[WeightObservation] = ()) -> None:
        self._items: List[WeightObservation] = []
        for o in observations:
            self.add(o)

    def add(self, observation: WeightObservation) -> None:
        self._items.append(observation)

    def _sorted(self, subject_id: Optional[str] = None) -> List[WeightObservation]:
        items = [o for o in self._items if subject_id is None or o.subject_id == subject_id]
        # sorted é estável: mesma data mantém a ordem de inserção
        return sorted(items, key=lambda o: o.measured_at)

    def list_for_subject(self, subject_id: str, limit: int = 10) -> List[WeightObservation]:
        if limit <= 0:
            return []
        return self._sorted(subject_id)[-limit:]

    def list_all(
        self,
        subject_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[WeightObservation], int]:
        items = self._sorted(subject_id)
        return items[offset:offset + limit], len(items)

    def __len__(self) -> int:
        return len(self._items)
