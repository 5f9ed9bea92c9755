# configurações globais
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.exceptions import InvalidArgument

# kg de ração por kg de ganho de peso (varia por espécie/ração)
FEED_CONVERSION_RATIO = 3.5
WEIGHT_UNIT = "kg"

# preditor externo
PREDICTOR_TIMEOUT = 10.0
HISTORY_LIMIT = 10
MODEL_PATH = Path("data/models/feed_rf.joblib")


class PredictorSettings(BaseSettings):
    """
    Configuração do preditor de ração, passada explicitamente para a fábrica.

    Lida do ambiente e do arquivo `.env` (ver `.env.example`):
    - PREDICTOR_ENABLED=false mantém a fórmula linear embutida.
    - PREDICTOR_STRATEGY: "remote" (API HTTP) ou "model" (artefato .joblib).
    - PREDICTOR_URL / PREDICTOR_MODEL_PATH são repassados sem interpretação.
    """
    enabled: bool = Field(False, validation_alias="PREDICTOR_ENABLED")
    strategy: Optional[str] = Field(None, validation_alias="PREDICTOR_STRATEGY")
    base_url: Optional[str] = Field(None, validation_alias="PREDICTOR_URL")
    model_path: Optional[Path] = Field(None, validation_alias="PREDICTOR_MODEL_PATH")
    timeout: float = Field(PREDICTOR_TIMEOUT, gt=0, allow_inf_nan=False,
                           validation_alias="PREDICTOR_TIMEOUT")
    feed_conversion_ratio: float = Field(FEED_CONVERSION_RATIO, gt=0, allow_inf_nan=False,
                                         validation_alias="FEED_CONVERSION_RATIO")
    history_limit: int = Field(HISTORY_LIMIT, gt=0, validation_alias="HISTORY_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("strategy", "base_url", "model_path", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("strategy")
    @classmethod
    def _normalize_strategy(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PredictorSettings":
        """
        Monta a configuração validada.

        Args:
            environ: mapeamento a ler no lugar de os.environ + `.env`
                     (útil em testes); None usa as fontes padrão.

        Raises:
            InvalidArgument: valor ausente do domínio (ex.: FCR <= 0 ou "inf").
        """
        try:
            if environ is None:
                return cls()
            return cls.model_validate(dict(environ))
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise InvalidArgument(f"Configuração inválida: {fields or e}") from e
