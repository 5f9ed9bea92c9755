from datetime import datetime, timezone
import pytest

from src.domain.exceptions import InvalidArgument
from src.infrastructure.data.csv_weight_loader import load_repository, load_weight_csv

def test_loads_rows_and_drops_invalid(tmp_path):
    f = tmp_path / "pesagens.csv"
    f.write_text(
        "subject_id,weight,measured_at,note\n"
        "007,450.5,2026-03-01,\n"
        "007,460.0,2026-03-15T10:00:00,pós vermífugo\n"
        "008,abc,2026-03-01,\n"
        "008,-3,2026-03-01,\n"
        "009,300,data ruim,\n"
        "010,inf,2026-03-01,\n"
        "\" \",11,2026-03-02,\n",
        encoding="utf-8",
    )
    obs = load_weight_csv(f)
    assert [o.subject_id for o in obs] == ["007", "007"]
    assert obs[0].note is None
    assert obs[1].note == "pós vermífugo"
    assert obs[1].measured_at == datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)

def test_missing_columns(tmp_path):
    f = tmp_path / "x.csv"
    f.write_text("animal,peso\n1,2\n", encoding="utf-8")
    with pytest.raises(InvalidArgument):
        load_weight_csv(f)

def test_repository_from_csv(tmp_path):
    f = tmp_path / "p.csv"
    f.write_text("subject_id,weight,measured_at\nA,10,2026-01-02\nA,9,2026-01-01\n", encoding="utf-8")
    repo = load_repository(f)
    assert [o.weight for o in repo.list_for_subject("A")] == [9.0, 10.0]
