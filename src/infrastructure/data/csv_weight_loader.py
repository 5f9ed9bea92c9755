# importa pesagens exportadas pela aplicação (planilha/CSV) para o repositório
from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import logging

import numpy as np
import pandas as pd

from src.domain.entities.weight_observation import WeightObservation
from src.domain.exceptions import InvalidArgument
from src.infrastructure.data.memory_weight_repository import InMemoryWeightRepository

log = logging.getLogger("pesagem.data.csv")

REQUIRED_COLUMNS = ("subject_id", "weight", "measured_at")


def normalize_datetime_cols(df: pd.DataFrame, cols: list[str] | None = None) -> pd.DataFrame:
    """Converte colunas de data para datetime UTC; valores inválidos viram NaT."""
    cols = cols or ["measured_at"]
    for c in cols:
        if c in df.columns:
            df[c] = pd.to_datetime(df[c], errors="coerce", utc=True, format="ISO8601")
    return df


def load_weight_csv(path: str | Path) -> List[WeightObservation]:
    """
    Lê um CSV de pesagens.

    Colunas obrigatórias: subject_id, weight, measured_at. `note` é opcional.
    Linhas com peso ilegível, infinito ou negativo, data ilegível ou animal
    em branco são descartadas (com aviso no log).

    Raises:
        InvalidArgument: arquivo sem as colunas obrigatórias.
    """
    df = pd.read_csv(path, dtype={"subject_id": str})
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidArgument(f"CSV sem colunas obrigatórias: {', '.join(missing)}")

    df["weight"] = pd.to_numeric(df["weight"], errors="coerce")
    df = normalize_datetime_cols(df)
    valid = df.dropna(subset=list(REQUIRED_COLUMNS))
    valid = valid[
        np.isfinite(valid["weight"])
        & (valid["weight"] >= 0)
        & (valid["subject_id"].str.strip() != "")
    ]
    dropped = len(df) - len(valid)
    if dropped:
        log.warning("csv_rows_dropped path=%s dropped=%d", path, dropped)

    has_note = "note" in valid.columns
    out: List[WeightObservation] = []
    for row in valid.itertuples(index=False):
        note: Optional[str] = None
        if has_note and not pd.isna(row.note):
            note = str(row.note)
        out.append(WeightObservation(
            subject_id=str(row.subject_id),
            weight=float(row.weight),
            measured_at=row.measured_at.to_pydatetime(),
            note=note,
        ))
    log.info("csv_loaded path=%s rows=%d", path, len(out))
    return out


def load_repository(path: str | Path) -> InMemoryWeightRepository:
    """Atalho: CSV -> InMemoryWeightRepository."""
    return InMemoryWeightRepository(load_weight_csv(path))
