import pytest
from fastapi.testclient import TestClient

from api import main as api_main
from api.main import app
from scoring.errors import InvalidInputError, NoDataAvailableError


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_predictions_json(client):
    response = client.get("/predictions", params={"region": "Austin, TX", "limit": 10, "timeframe": 24})

    assert response.status_code == 200
    payload = response.json()
    assert payload["region"] == "austin"
    assert payload["timeframe_months"] == 24
    assert payload["data_source"] == "synthetic"
    assert len(payload["predictions"]) == 10
    assert payload["stats"]["total_count"] == 10
    assert {"housing_supply", "demand_index", "market_sentiment"} <= payload["market_conditions"].keys()


def test_invalid_query_parameters_are_defaulted(client):
    response = client.get("/predictions", params={"limit": "many", "timeframe": "soon", "sort": "??"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["city"] == "Austin"
    assert payload["timeframe_months"] == 12
    assert len(payload["predictions"]) == 100


def test_limit_is_capped(client):
    response = client.get("/predictions", params={"region": "phoenix", "limit": 10_000})

    assert len(response.json()["predictions"]) == 500


def test_unknown_region_is_not_an_error(client):
    response = client.get("/predictions", params={"region": "Timbuktu", "limit": 2})

    assert response.status_code == 200
    assert response.json()["city"] == "Timbuktu"


def test_no_data_maps_to_503(monkeypatch, client):
    async def _no_data(*args, **kwargs):
        raise NoDataAvailableError("nothing")

    monkeypatch.setattr(api_main, "predict", _no_data)

    response = client.get("/predictions")

    assert response.status_code == 503
    assert "nothing" not in response.json()["detail"]


def test_invalid_input_maps_to_400(monkeypatch, client):
    async def _invalid(*args, **kwargs):
        raise InvalidInputError("bad weights")

    monkeypatch.setattr(api_main, "score_city", _invalid)

    assert client.get("/cities/scores", params={"city": "Austin", "state": "TX"}).status_code == 400


def test_city_scores(client):
    response = client.get("/cities/scores", params={"city": "Tampa", "state": "FL"})

    assert response.status_code == 200
    payload = response.json()
    scores = payload["scores"]
    assert payload["baseline"]["city"] == "Tampa"
    for key in ("investment_score", "future_value_score", "market_momentum", "gentrification_risk"):
        assert 0 <= scores[key] <= 100
    assert scores["risk_assessment"]["level"] in {"LOW", "MEDIUM", "HIGH"}
    assert set(scores["roi_projections"]) == {"one_year", "three_year", "five_year"}
    assert payload["development"]["total_permits"] == 50


def test_markets(client):
    response = client.get("/markets", params={"limit": 3})

    payload = response.json()
    assert payload["count"] == 3
    assert payload["items"][0]["city"] == "Austin"
    assert payload["stats"]["total_count"] == 20
