from __future__ import annotations
from typing import Optional


class FeedPredictionError(Exception):
    """Base dos erros do núcleo de previsão de ração."""


class InvalidArgument(FeedPredictionError, ValueError):
    """
    Entrada fora do domínio válido (peso negativo, horizonte <= 0,
    payload ou configuração malformados). Vira erro do cliente (400).
    """


class PredictionUnavailable(FeedPredictionError, RuntimeError):
    """
    Preditor externo/local falhou ou está inacessível. Vira erro do
    servidor (500) com a mensagem original anexada.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        if self.status_code is not None:
            return f"[HTTP {self.status_code}] {self.message}"
        return self.message
