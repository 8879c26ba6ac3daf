import tempfile

import duckdb
import pytest
from fastapi.testclient import TestClient

from api.main import app
from scoring import synthetic
from scoring.baselines import resolve
from storage.exports import export_records, export_to_csv, export_to_parquet


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def records():
    return synthetic.generate(resolve("Denver", "CO"), 6)


def test_predictions_csv(client):
    response = client.get("/predictions", params={"region": "denver", "limit": 4, "format": "csv"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.content.decode().strip().splitlines()
    assert lines[0].startswith("rank,id,address")
    assert len(lines) == 5
    assert "synthetic" in lines[1]


def test_predictions_parquet(client):
    response = client.get("/predictions", params={"region": "denver", "limit": 7, "format": "parquet"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/vnd.apache.parquet")

    with tempfile.NamedTemporaryFile(suffix=".parquet") as tmp:
        tmp.write(response.content)
        tmp.flush()
        con = duckdb.connect()
        try:
            count = con.execute("SELECT COUNT(*) FROM read_parquet(?)", [tmp.name]).fetchone()[0]
        finally:
            con.close()
    assert count == 7


def test_unsupported_format_is_rejected(client):
    response = client.get("/predictions", params={"format": "xml"})

    assert response.status_code == 400


def test_export_csv_keeps_rank_order(tmp_path, records):
    path = export_to_csv(records, tmp_path / "nested" / "out.csv")

    con = duckdb.connect()
    try:
        rows = con.execute("SELECT rank, id FROM read_csv_auto(?) ORDER BY rank", [str(path)]).fetchall()
    finally:
        con.close()
    assert [row[1] for row in rows] == [r.id for r in records]


def test_export_parquet_round_trips_values(tmp_path, records):
    path = export_to_parquet(records, tmp_path / "out.parquet")

    con = duckdb.connect()
    try:
        price, source, factors = con.execute(
            "SELECT price, source, factors FROM read_parquet(?) WHERE rank = 1", [str(path)]
        ).fetchone()
    finally:
        con.close()
    assert price == pytest.approx(records[0].price)
    assert source == "synthetic"
    assert factors == "; ".join(records[0].factors)


def test_export_records_picks_format_from_suffix(tmp_path, records):
    assert export_records(records, tmp_path / "a.csv").exists()
    with pytest.raises(ValueError):
        export_records(records, tmp_path / "a.xlsx")
