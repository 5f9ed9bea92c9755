# src/infrastructure/ai/random_forest_feed_model.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Sequence, Tuple
import logging
import numpy as np
from numpy.random import default_rng
from sklearn.ensemble import RandomForestRegressor
from sklearn.model_selection import train_test_split
from sklearn.metrics import r2_score
import joblib

from config.settings import FEED_CONVERSION_RATIO, MODEL_PATH
from src.domain.entities.feed_estimate import FeedEstimateRequest, FeedEstimateResult, split_by_period
from src.domain.entities.weight_observation import WeightObservation
from src.domain.enums import WeightUnit
from src.domain.exceptions import InvalidArgument, PredictionUnavailable
from src.domain.feed_estimator import daily_gain_from_history

log = logging.getLogger("pesagem.ai.model")

# Ordem fixa das features esperadas pelo modelo
FEATURES: List[str] = [
    "current_weight", "target_weight", "horizon_days", "recent_daily_gain"
]

# Ganho diário assumido quando não há histórico (kg/dia)
DEFAULT_DAILY_GAIN = 1.0

# ---------------- CACHE DE MODELO EM MEMÓRIA ----------------
_MODEL_CACHE: Dict[str, Dict[str, Any]] = {}

def model_exists(path: Path = MODEL_PATH) -> bool:
    """Indica se o arquivo do modelo já foi gerado/salvo."""
    return Path(path).exists()

def _ensure_model(model_path: Path = MODEL_PATH) -> Dict[str, Any]:
    """Carrega o artefato 1x por caminho e retém em cache."""
    key = str(Path(model_path).resolve())
    if key not in _MODEL_CACHE:
        if not model_exists(model_path):
            raise PredictionUnavailable(f"Modelo não encontrado: {model_path}")
        try:
            artifact = joblib.load(model_path)
        except Exception as e:
            raise PredictionUnavailable(f"Falha ao carregar modelo {model_path}: {e}") from e
        if not isinstance(artifact, dict) or "model" not in artifact:
            raise PredictionUnavailable(f"Artefato inválido: {model_path}")
        _MODEL_CACHE[key] = artifact
    return _MODEL_CACHE[key]
# ------------------------------------------------------------

def synth_feed_kg(current: float, target: float, dias: float, recent_gain: float,
                  fcr: float, rng: np.random.Generator) -> float:
    """
    Gera ração sintética (kg) para um ganho de peso desejado.

    A conversão piora quando o ganho diário exigido passa do ganho recente
    do animal (até +40% no FCR); ruído gaussiano de 3%.
    """
    gain = target - current
    required = gain / dias
    push = max(0.0, required / max(recent_gain, 1e-3) - 1.0)
    fcr_eff = fcr * (1.0 + min(0.4, 0.25 * push))
    noise = rng.normal(1.0, 0.03)
    return float(max(0.0, gain * fcr_eff * noise))

def make_synth_dataset(n: int = 6000, seed: int = 42,
                       fcr: float = FEED_CONVERSION_RATIO) -> Tuple[np.ndarray, np.ndarray]:
    """
    Cria dataset sintético (X, y) com n amostras para treino/validação.
    Faixas cobrem de leitões a bovinos de terminação.
    """
    rng = default_rng(seed)
    current = rng.uniform(5, 600, size=n)
    dias = rng.integers(7, 180, size=n).astype(float)
    recent = rng.uniform(0.05, 2.0, size=n)
    # alvo em torno do que o ganho recente permite (50%–150%)
    target = current + recent * dias * rng.uniform(0.5, 1.5, size=n)
    y = np.array([synth_feed_kg(c, t, d, g, fcr, rng)
                  for c, t, d, g in zip(current, target, dias, recent)], float)
    X = np.stack([current, target, dias, recent], axis=1).astype(float)
    return X, y

@dataclass
class RFConfig:
    """Hiperparâmetros principais do Random Forest."""
    n_estimators: int = 120
    max_depth: int | None = None
    random_state: int = 2024
    min_samples_leaf: int = 2

def train_and_save(config: RFConfig = RFConfig(),
                   dataset_n: int = 8000,
                   model_path: Path = MODEL_PATH,
                   fcr: float = FEED_CONVERSION_RATIO) -> Dict[str, Any]:
    """
    Treina o RandomForest em dados sintéticos e salva o artefato .joblib.

    Retorna:
        dict com métricas e metadados do treino (R², caminho do modelo, tamanhos).
    """
    model_path = Path(model_path)
    model_path.parent.mkdir(parents=True, exist_ok=True)
    X, y = make_synth_dataset(n=dataset_n, seed=config.random_state, fcr=fcr)
    Xtr, Xte, ytr, yte = train_test_split(X, y, test_size=0.2, random_state=config.random_state)
    rf = RandomForestRegressor(
        n_estimators=config.n_estimators,
        max_depth=config.max_depth,
        random_state=config.random_state,
        min_samples_leaf=config.min_samples_leaf,
        n_jobs=-1,
    )
    rf.fit(Xtr, ytr)
    r2 = r2_score(yte, rf.predict(Xte))
    joblib.dump({"model": rf, "features": FEATURES, "fcr": fcr}, model_path)
    # Zera cache para forçar recarregamento no próximo uso
    _MODEL_CACHE.pop(str(model_path.resolve()), None)
    log.info("model_trained path=%s r2=%.3f n=%d", model_path, r2, dataset_n)
    return {"r2": float(r2), "path": str(model_path), "n_train": len(Xtr), "n_test": len(Xte)}

def _to_feature_array(payload: Dict[str, float]) -> np.ndarray:
    """Monta o array 2D (1 x n_features) na ordem definida em FEATURES."""
    return np.array([[payload[k] for k in FEATURES]], float)

def predict_feed(payload: Dict[str, float], model_path: Path = MODEL_PATH) -> Tuple[float, float]:
    """
    Retorna (ração prevista em kg, confiança 0..1) para o payload.

    A confiança vem da dispersão entre as árvores: 1 - desvio/média.
    """
    model = _ensure_model(model_path)["model"]
    X = _to_feature_array(payload)
    per_tree = np.array([t.predict(X)[0] for t in model.estimators_], float)
    mean = float(per_tree.mean())
    if mean <= 1e-9:
        return 0.0, 0.0
    conf = float(np.clip(1.0 - per_tree.std() / mean, 0.0, 1.0))
    return mean, conf


class RandomForestFeedPredictor:
    """Preditor baseado no artefato local (.joblib) treinado por train_and_save."""

    name = "model"

    def __init__(self, model_path: Path = MODEL_PATH) -> None:
        self.model_path = Path(model_path)

    def build_features(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> Dict[str, float]:
        """
        Monta as features do pedido. Sem alvo, projeta pelo ganho recente;
        sem histórico utilizável, assume DEFAULT_DAILY_GAIN.
        """
        try:
            gain = max(0.0, daily_gain_from_history(history))
        except InvalidArgument:
            if request.target_weight is None:
                raise
            gain = DEFAULT_DAILY_GAIN
        target = request.target_weight
        if target is None:
            target = request.current_weight + gain * request.horizon_days
        return {
            "current_weight": request.current_weight,
            "target_weight": target,
            "horizon_days": float(request.horizon_days),
            "recent_daily_gain": gain,
        }

    def predict(
        self,
        request: FeedEstimateRequest,
        history: Sequence[WeightObservation] = (),
    ) -> FeedEstimateResult:
        payload = self.build_features(request, history)
        feed, conf = predict_feed(payload, self.model_path)
        return FeedEstimateResult(
            recommended_feed=feed,
            unit=WeightUnit.KG,
            confidence=conf,
            breakdown=split_by_period(feed, request.horizon_days),
        )


if __name__ == "__main__":
    # Executa treino rápido em dataset sintético e salva o modelo localmente.
    info = train_and_save()
    print(f"RF treinado: R²={info['r2']:.3f} • {info['n_train']}/{info['n_test']}")
    print(f"Modelo salvo em: {info['path']}")
