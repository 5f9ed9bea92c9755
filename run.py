# run.py: CLI
# =============================================================================
# estimate : fórmula linear (atual, alvo, dias)
# predict  : mesmo fluxo de POST /weight/predict, com o preditor do .env
# data     : mesmo fluxo de GET /weight/data, a partir de um CSV
# train    : treina o modelo local (RandomForest) e salva o .joblib
# =============================================================================

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import FEED_CONVERSION_RATIO, MODEL_PATH, PredictorSettings
from src.domain.exceptions import InvalidArgument, PredictionUnavailable
from src.domain.feed_estimator import FeedEstimator
from src.domain.use_cases.list_weight_data_use_case import ListWeightDataUseCase
from src.domain.use_cases.predict_feed_use_case import PredictFeedUseCase
from src.infrastructure.ai.predictor_factory import build_predictor
from src.infrastructure.ai.random_forest_feed_model import RFConfig, train_and_save
from src.infrastructure.data.csv_weight_loader import load_repository
from src.infrastructure.data.memory_weight_repository import InMemoryWeightRepository
from src.interfaces.weight_handlers import handle_predict, handle_weight_data

log = logging.getLogger("pesagem.cli")


def _repo(csv: Optional[str]) -> InMemoryWeightRepository:
    return load_repository(csv) if csv else InMemoryWeightRepository()


def _emit(status: int, body: dict) -> int:
    print(json.dumps(body, ensure_ascii=False, indent=2))
    if status >= 500:
        return 1
    return 2 if status >= 400 else 0


def cmd_estimate(args: argparse.Namespace) -> int:
    feed = FeedEstimator(args.fcr).estimate(args.current, args.target, args.days)
    print(f"Ração recomendada: {feed:.2f} kg (FCR={args.fcr})")
    return 0


def cmd_predict(args: argparse.Namespace) -> int:
    settings = PredictorSettings.from_env()
    use_case = PredictFeedUseCase(
        weight_repo=_repo(args.csv),
        predictor=build_predictor(settings),
        history_limit=settings.history_limit,
    )
    payload = {
        "subjectId": args.subject,
        "currentWeight": args.current,
        "targetWeight": args.target,
        "horizonDays": args.days,
    }
    return _emit(*handle_predict(use_case, payload))


def cmd_data(args: argparse.Namespace) -> int:
    use_case = ListWeightDataUseCase(_repo(args.csv))
    params = {"subjectId": args.subject, "limit": args.limit, "offset": args.offset}
    return _emit(*handle_weight_data(use_case, params))


def cmd_train(args: argparse.Namespace) -> int:
    info = train_and_save(
        config=RFConfig(n_estimators=args.trees),
        dataset_n=args.samples,
        model_path=Path(args.model_path),
        fcr=args.fcr,
    )
    print(f"RF treinado: R²={info['r2']:.3f} • {info['n_train']}/{info['n_test']}")
    print(f"Modelo salvo em: {info['path']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pesagem: estimativa de ração por ganho de peso")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log em nível DEBUG")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("estimate", help="Fórmula linear: (alvo - atual) * FCR")
    p.add_argument("--current", type=float, required=True, help="Peso atual (kg)")
    p.add_argument("--target", type=float, required=True, help="Peso-alvo (kg)")
    p.add_argument("--days", type=int, required=True, help="Horizonte em dias")
    p.add_argument("--fcr", type=float, default=FEED_CONVERSION_RATIO,
                   help=f"Conversão alimentar (default: {FEED_CONVERSION_RATIO})")
    p.set_defaults(func=cmd_estimate)

    p = sub.add_parser("predict", help="Previsão com o preditor configurado no ambiente")
    p.add_argument("--subject", required=True, help="Identificador do animal/lote")
    p.add_argument("--current", type=float, required=True, help="Peso atual (kg)")
    p.add_argument("--target", type=float, default=None, help="Peso-alvo (kg), opcional")
    p.add_argument("--days", type=int, required=True, help="Horizonte em dias")
    p.add_argument("--csv", default=None, help="CSV com o histórico de pesagens")
    p.set_defaults(func=cmd_predict)

    p = sub.add_parser("data", help="Lista pesagens de um CSV")
    p.add_argument("--csv", required=True, help="CSV com o histórico de pesagens")
    p.add_argument("--subject", default=None, help="Filtra por animal/lote")
    p.add_argument("--limit", type=int, default=100)
    p.add_argument("--offset", type=int, default=0)
    p.set_defaults(func=cmd_data)

    p = sub.add_parser("train", help="Treina o modelo local (RandomForest)")
    p.add_argument("--model-path", default=str(MODEL_PATH))
    p.add_argument("--samples", type=int, default=8000, help="Tamanho do dataset sintético")
    p.add_argument("--trees", type=int, default=120, help="n_estimators")
    p.add_argument("--fcr", type=float, default=FEED_CONVERSION_RATIO)
    p.set_defaults(func=cmd_train)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        return args.func(args)
    except InvalidArgument as e:
        print(f"Erro: {e}", file=sys.stderr)
        return 2
    except PredictionUnavailable as e:
        print(f"Preditor indisponível: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
