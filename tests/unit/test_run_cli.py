import json
import pytest

import run

ENV_VARS = (
    "PREDICTOR_ENABLED", "PREDICTOR_STRATEGY", "PREDICTOR_URL", "PREDICTOR_MODEL_PATH",
    "PREDICTOR_TIMEOUT", "FEED_CONVERSION_RATIO", "HISTORY_LIMIT",
)

@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

def test_estimate_prints_recommended_feed(capsys):
    code = run.main(["estimate", "--current", "450.5", "--target", "460", "--days", "30"])
    assert code == 0
    assert "33.25 kg" in capsys.readouterr().out

def test_estimate_with_invalid_horizon_exits_2(capsys):
    code = run.main(["estimate", "--current", "450.5", "--target", "460", "--days", "0"])
    assert code == 2
    assert "Erro:" in capsys.readouterr().err

def test_predict_with_linear_default(capsys):
    code = run.main(["predict", "--subject", "boi-1", "--current", "400",
                     "--target", "410", "--days", "7"])
    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["recommendedFeed"] == pytest.approx(35.0)
    assert body["unit"] == "kg"

def test_predict_with_missing_model_exits_1(tmp_path, capsys):
    (tmp_path / ".env").write_text(
        "PREDICTOR_ENABLED=true\n"
        "PREDICTOR_STRATEGY=model\n"
        f"PREDICTOR_MODEL_PATH={tmp_path / 'nao_existe.joblib'}\n",
        encoding="utf-8",
    )
    code = run.main(["predict", "--subject", "boi-1", "--current", "400",
                     "--target", "410", "--days", "7"])
    assert code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "prediction_unavailable"

def test_predict_with_invalid_config_exits_2(monkeypatch, capsys):
    monkeypatch.setenv("FEED_CONVERSION_RATIO", "inf")
    code = run.main(["predict", "--subject", "boi-1", "--current", "400",
                     "--target", "410", "--days", "7"])
    assert code == 2
    assert "Configuração inválida" in capsys.readouterr().err

def test_data_lists_csv_rows(tmp_path, capsys):
    f = tmp_path / "p.csv"
    f.write_text("subject_id,weight,measured_at\nA,10,2026-01-01\nB,12,2026-01-02\n",
                 encoding="utf-8")
    code = run.main(["data", "--csv", str(f), "--subject", "B"])
    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["totalRecords"] == 1
    assert body["data"][0]["subjectId"] == "B"
