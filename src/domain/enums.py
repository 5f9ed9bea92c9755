from enum import Enum


class WeightUnit(Enum):
    """Unidade de massa usada em pesos e quantidades de ração."""
    KG = "kg"
    LB = "lb"

    @property
    def to_kg(self) -> float:
        """Fator de conversão para quilogramas."""
        return 1.0 if self is WeightUnit.KG else 0.45359237


class PredictorStrategy(Enum):
    """Estratégia de previsão selecionável na configuração."""
    LINEAR = "linear"   # fórmula embutida (FCR fixo)
    REMOTE = "remote"   # API HTTP externa
    MODEL = "model"     # artefato .joblib local
