from datetime import datetime, timezone
import pytest
import requests

from src.domain.entities.feed_estimate import FeedEstimateRequest
from src.domain.entities.weight_observation import WeightObservation
from src.domain.exceptions import InvalidArgument, PredictionUnavailable
from src.infrastructure.ai.remote_feed_predictor import RemoteFeedPredictor

# ---------- Fakes de HTTP ----------

class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.reason = "ERR"
    @property
    def ok(self):
        return 200 <= self.status_code < 300
    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body

class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []
        self.headers = {}
    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.exc:
            raise self.exc
        return self.response

REQ = FeedEstimateRequest("boi-1", current_weight=450.5, target_weight=460.0, horizon_days=30)
HIST = [WeightObservation("boi-1", 440.0, datetime(2026, 1, 1, tzinfo=timezone.utc))]

# ---------- Tests ----------

def test_posts_request_and_history():
    s = FakeSession(FakeResponse(body={"recommendedFeed": 33.25, "unit": "kg", "confidence": 0.9}))
    p = RemoteFeedPredictor("http://ml.local/", timeout=3.0, session=s)
    res = p.predict(REQ, HIST)

    call = s.calls[0]
    assert call["url"] == "http://ml.local/weight/predict"
    assert call["timeout"] == 3.0
    assert call["json"]["subjectId"] == "boi-1"
    assert call["json"]["horizonDays"] == 30
    assert call["json"]["recentHistory"][0]["weight"] == 440.0
    assert res.recommended_feed == 33.25
    assert res.confidence == 0.9

def test_non_success_status_is_unavailable():
    s = FakeSession(FakeResponse(status_code=503, text="modelo carregando"))
    with pytest.raises(PredictionUnavailable) as ei:
        RemoteFeedPredictor("http://ml.local", session=s).predict(REQ)
    assert ei.value.status_code == 503
    assert "modelo carregando" in str(ei.value)

def test_connection_error_is_unavailable():
    s = FakeSession(exc=requests.exceptions.ConnectionError("recusada"))
    with pytest.raises(PredictionUnavailable, match="recusada"):
        RemoteFeedPredictor("http://ml.local", session=s).predict(REQ)
    assert len(s.calls) == 1  # sem retry

def test_timeout_is_unavailable():
    s = FakeSession(exc=requests.exceptions.Timeout("lento"))
    with pytest.raises(PredictionUnavailable):
        RemoteFeedPredictor("http://ml.local", session=s).predict(REQ)

@pytest.mark.parametrize("resp", [
    FakeResponse(body=None, text="<html>"),
    FakeResponse(body={"unit": "kg"}),
])
def test_bad_body_is_unavailable(resp):
    with pytest.raises(PredictionUnavailable):
        RemoteFeedPredictor("http://ml.local", session=FakeSession(resp)).predict(REQ)

def test_api_key_header():
    s = FakeSession()
    RemoteFeedPredictor("http://ml.local", api_key="k", session=s)
    assert s.headers["X-API-Key"] == "k"

def test_missing_url_rejected():
    with pytest.raises(InvalidArgument):
        RemoteFeedPredictor("  ")

@pytest.mark.parametrize("timeout", [0, -2.0, float("inf"), float("nan")])
def test_timeout_must_be_finite_and_positive(timeout):
    with pytest.raises(InvalidArgument):
        RemoteFeedPredictor("http://ml.local", timeout=timeout, session=FakeSession())
