"""FastAPI service exposing ranked property predictions and city scores."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from jobs.predict import predict, score_city, top_markets
from pipelines.sources.listings import PRIMARY_FEED, SECONDARY_FEED
from scoring.errors import InvalidInputError, NoDataAvailableError
from storage.exports import export_records

ALLOWED_FORMATS = {"json", "csv", "parquet"}
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configured = [
        feed.name for feed in (PRIMARY_FEED, SECONDARY_FEED) if os.getenv(f"{feed.env_prefix}_URL")
    ]
    logger.info("Live listing feeds configured: %s", ", ".join(configured) or "none")
    yield


app = FastAPI(title="Market Scoring API", version="0.1.0", lifespan=lifespan)


def _configure_cors() -> None:
    raw_origins = os.getenv("API_CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )


_configure_cors()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/markets")
def get_markets(
    limit: str | None = Query(None, description="Maximum markets returned (default 10)"),
    sort: str | None = Query(None, description="future_score, appreciation or rental_yield"),
):
    selection = top_markets(limit or 10, sort)
    return {
        "count": len(selection.items),
        "stats": selection.stats.model_dump(mode="json"),
        "items": [market.model_dump(mode="json") for market in selection.items],
    }


@app.get("/predictions")
async def get_predictions(
    background_tasks: BackgroundTasks,
    region: str | None = Query(None, description="Free-text market name, e.g. 'austin, tx'"),
    limit: str | None = Query(None, description="Maximum records returned (1-500, default 100)"),
    timeframe: str | None = Query(None, description="Horizon in months (default 12)"),
    sort: str | None = Query(None, description="appreciation, confidence or relevance"),
    format: str = Query("json", description="Response format: json, csv, or parquet"),
):
    fmt = format.lower()
    if fmt not in ALLOWED_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unsupported format '{format}'.")

    try:
        envelope = await predict(region, limit, timeframe, sort)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NoDataAvailableError as exc:
        logger.error("Prediction failed for region %r: %s", region, exc)
        raise HTTPException(
            status_code=503, detail="Prediction data is temporarily unavailable."
        ) from exc

    if fmt == "json":
        return JSONResponse(content=envelope.model_dump(mode="json"))

    suffix = f".{fmt}"
    media_type = "text/csv" if fmt == "csv" else "application/vnd.apache.parquet"
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        dest = Path(tmp.name)
    export_records(envelope.predictions, dest, fmt)

    def _cleanup(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    background_tasks.add_task(_cleanup, dest)
    return FileResponse(
        dest,
        media_type=media_type,
        filename=f"predictions-{envelope.region.replace(' ', '_')}{suffix}",
        background=background_tasks,
    )


@app.get("/cities/scores")
async def get_city_scores(
    city: str | None = Query(None, description="City name"),
    state: str | None = Query(None, description="Two-letter state code"),
):
    try:
        report = await score_city(city, state)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NoDataAvailableError as exc:
        raise HTTPException(status_code=503, detail="City scores are temporarily unavailable.") from exc
    return JSONResponse(content=report.model_dump(mode="json"))
