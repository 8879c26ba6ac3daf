"""Export scored property records to CSV or Parquet through an in-memory DuckDB."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import duckdb

from pipelines.model import PropertyRecord

PREDICTIONS_TABLE = "predictions"

_COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "VARCHAR"),
    ("address", "VARCHAR"),
    ("city", "VARCHAR"),
    ("state", "VARCHAR"),
    ("lat", "DOUBLE"),
    ("lng", "DOUBLE"),
    ("price", "DOUBLE"),
    ("square_footage", "DOUBLE"),
    ("bedrooms", "INTEGER"),
    ("bathrooms", "DOUBLE"),
    ("year_built", "INTEGER"),
    ("property_type", "VARCHAR"),
    ("source", "VARCHAR"),
    ("provider", "VARCHAR"),
    ("mls_number", "VARCHAR"),
    ("timeframe_months", "INTEGER"),
    ("appreciation", "DOUBLE"),
    ("confidence", "DOUBLE"),
    ("risk_score", "DOUBLE"),
    ("price_per_sqft", "DOUBLE"),
    ("factors", "VARCHAR"),
)


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _row(record: PropertyRecord) -> list[object]:
    data = record.model_dump()
    data["factors"] = "; ".join(record.factors)
    return [data[name] for name, _ in _COLUMNS]


def load_records(records: Sequence[PropertyRecord]) -> duckdb.DuckDBPyConnection:
    """Return an in-memory connection holding ``records`` in rank order."""

    conn = duckdb.connect(":memory:")
    columns = ", ".join(f"{name} {sql_type}" for name, sql_type in _COLUMNS)
    conn.execute(f"CREATE TABLE {PREDICTIONS_TABLE} (rank INTEGER, {columns})")
    placeholders = ", ".join("?" for _ in range(len(_COLUMNS) + 1))
    rows = [[rank, *_row(record)] for rank, record in enumerate(records, start=1)]
    if rows:
        conn.executemany(f"INSERT INTO {PREDICTIONS_TABLE} VALUES ({placeholders})", rows)
    return conn


def _copy(records: Sequence[PropertyRecord], destination: str | Path, options: str) -> Path:
    dest_path = Path(destination)
    _ensure_parent(dest_path)
    sanitized_path = str(dest_path).replace("'", "''")
    conn = load_records(records)
    try:
        conn.execute(
            f"COPY (SELECT * FROM {PREDICTIONS_TABLE} ORDER BY rank) TO '{sanitized_path}' ({options})"
        )
    finally:
        conn.close()
    return dest_path


def export_to_csv(
    records: Sequence[PropertyRecord],
    destination: str | Path,
    *,
    include_header: bool = True,
) -> Path:
    """Write records to a CSV file using DuckDB's COPY command."""

    return _copy(records, destination, f"FORMAT CSV, HEADER {'TRUE' if include_header else 'FALSE'}")


def export_to_parquet(records: Sequence[PropertyRecord], destination: str | Path) -> Path:
    return _copy(records, destination, "FORMAT PARQUET")


EXPORTERS = {"csv": export_to_csv, "parquet": export_to_parquet}


def export_records(
    records: Sequence[PropertyRecord],
    destination: str | Path,
    fmt: str | None = None,
) -> Path:
    """Export by explicit ``fmt`` or by the destination's suffix."""

    fmt = (fmt or Path(destination).suffix.lstrip(".")).lower()
    try:
        exporter = EXPORTERS[fmt]
    except KeyError as exc:
        raise ValueError(f"Unsupported export format '{fmt}'; use csv or parquet.") from exc
    return exporter(records, destination)


__all__ = ["export_records", "export_to_csv", "export_to_parquet", "load_records"]
