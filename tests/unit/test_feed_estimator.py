from datetime import datetime, timedelta, timezone
import pytest

from src.domain.entities.feed_estimate import FeedEstimateRequest
from src.domain.entities.weight_observation import WeightObservation
from src.domain.exceptions import InvalidArgument
from src.domain.feed_estimator import FeedEstimator, daily_gain_from_history

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)

def test_example_from_scale_records():
    assert FeedEstimator(3.5).estimate(450.5, 460.0, 30) == pytest.approx(33.25)

@pytest.mark.parametrize("cur,tgt,days", [(0, 10, 1), (120.0, 180.5, 45), (300, 250, 7)])
def test_matches_gap_times_fcr(cur, tgt, days):
    est = FeedEstimator(2.8)
    assert est.estimate(cur, tgt, days) == pytest.approx((tgt - cur) * 2.8)

def test_equal_weights_give_zero():
    assert FeedEstimator().estimate(200.0, 200.0, 14) == pytest.approx(0.0)

def test_linear_in_gap():
    est = FeedEstimator()
    assert est.estimate(100, 140, 20) == pytest.approx(2 * est.estimate(100, 120, 20))

def test_horizon_does_not_change_total():
    est = FeedEstimator()
    assert est.estimate(100, 130, 10) == pytest.approx(est.estimate(100, 130, 90))

@pytest.mark.parametrize("days", [0, -1, -30])
def test_non_positive_horizon_rejected(days):
    with pytest.raises(InvalidArgument):
        FeedEstimator().estimate(100, 120, days)

@pytest.mark.parametrize("cur,tgt", [(-1, 10), (10, -0.5)])
def test_negative_weight_rejected(cur, tgt):
    with pytest.raises(InvalidArgument):
        FeedEstimator().estimate(cur, tgt, 10)

def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        FeedEstimator().estimate(1, 2, 0)

@pytest.mark.parametrize("fcr", [0, -1.0, float("inf"), float("nan"), True])
def test_fcr_must_be_finite_and_positive(fcr):
    with pytest.raises(InvalidArgument):
        FeedEstimator(fcr)

def test_predict_with_target_has_weekly_breakdown():
    req = FeedEstimateRequest("boi-1", current_weight=400, target_weight=420, horizon_days=10)
    res = FeedEstimator(3.5).predict(req)
    assert res.recommended_feed == pytest.approx(70.0)
    assert res.confidence is None
    assert [(p.start_day, p.end_day) for p in res.breakdown] == [(1, 7), (8, 10)]
    assert sum(p.feed for p in res.breakdown) == pytest.approx(70.0)

def test_predict_without_target_uses_history_trend():
    hist = [
        WeightObservation("boi-1", 380.0, T0),
        WeightObservation("boi-1", 400.0, T0 + timedelta(days=20)),
    ]
    req = FeedEstimateRequest("boi-1", current_weight=400, horizon_days=30)
    res = FeedEstimator(3.0).predict(req, hist)
    # 1 kg/dia * 30 dias * 3.0
    assert res.recommended_feed == pytest.approx(90.0)

def test_predict_without_target_and_history_rejected():
    req = FeedEstimateRequest("boi-1", current_weight=400, horizon_days=30)
    with pytest.raises(InvalidArgument):
        FeedEstimator().predict(req, [])

def test_daily_gain_ignores_input_order():
    hist = [
        WeightObservation("x", 110.0, T0 + timedelta(days=10)),
        WeightObservation("x", 100.0, T0),
    ]
    assert daily_gain_from_history(hist) == pytest.approx(1.0)
