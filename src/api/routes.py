"""
src/api/routes.py
==================
HTTP API — TripTone

Responsibility:
    - Expose POST /analyze (and its alias POST /analyze-json)
    - Accept a single audio file (.webm, .mp3, .wav, .m4a, .ogg, max 50 MB)
      plus name / email / phone via multipart/form-data
    - Expose GET /analysis/{analysis_id}, GET /analyses?email=..., GET /health
    - Wrap every response in the {success, data | message} envelope
    - Build the shared AnalysisContext once at startup

Error envelopes:
    4xx → {"success": false, "message": ...}
    500 → {"success": false, "message": ..., "error": ...}
          ("error" carries the exception text only when APP_ENV=development)
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, Form, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from src.analysis.gemini_client import create_client
from src.audio.upload_validator import (
    UploadValidationError,
    validate_declared_size,
    validate_extension,
    validate_file_count,
    validate_size,
)
from src.config import load_settings
from src.pipeline import (
    AnalysisContext,
    AnalysisNotFoundError,
    check_health,
    get_analysis,
    list_analyses,
    run_analysis,
)
from src.storage.repository import AnalysisRepository, connect

logger = logging.getLogger("triptone.api")


# ---------------------------------------------------------------------------
# Application lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    mongo_client, collection = connect(
        settings.mongodb_uri, settings.mongodb_db, settings.mongodb_collection,
    )
    repository = AnalysisRepository(collection)
    try:
        repository.ensure_indexes()
    except Exception as exc:
        # The health endpoint reports the database state; startup continues.
        logger.warning("Could not create analysis indexes: %s", exc)

    app.state.ctx = AnalysisContext(
        settings=settings,
        gemini=create_client(settings.gemini_api_key),
        repository=repository,
    )
    logger.info("TripTone started (model=%s, env=%s).", settings.gemini_model, settings.environment)
    try:
        yield
    finally:
        mongo_client.close()


app = FastAPI(
    title="TripTone",
    description="Audio travel-personality analysis backed by Gemini.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_context(request: Request) -> AnalysisContext:
    return request.app.state.ctx


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


def _success(data: Any) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=jsonable_encoder({"success": True, "data": data}),
    )


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _internal_error(ctx: AnalysisContext, message: str, exc: Exception) -> JSONResponse:
    detail = str(exc) if ctx.settings.is_development else "Something went wrong"
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": message, "error": detail},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/analyze")
@app.post("/analyze-json")
async def analyze(
    request: Request,
    name: str | None = Form(None),
    email: str | None = Form(None),
    phone: str | None = Form(None),
    ctx: AnalysisContext = Depends(get_context),
):
    """
    Accept an audio interview and return the normalized Gemini analysis.

    Returns:
        {"success": true, "data": {analysisId, userData, analysis,
        questions, processingTime, timestamp}}
    """
    started_at = time.monotonic()

    audio_bytes: bytes | None = None
    filename: str | None = None
    try:
        # Raw form access; a plain-text "audio" value counts as no file.
        form = await request.form()
        uploads = form.getlist("audio")
        validate_file_count(len(uploads))

        audio = uploads[0] if uploads else None
        if isinstance(audio, UploadFile):
            filename = audio.filename
            validate_extension(filename)
            validate_declared_size(audio.size, ctx.settings.max_upload_bytes)
            audio_bytes = await audio.read()
            validate_size(audio_bytes, ctx.settings.max_upload_bytes)
            logger.info("Audio file received: %s (%.2f KB)", filename, len(audio_bytes) / 1024)

        user_data = {"name": name, "email": email, "phone": phone}
        result = await asyncio.to_thread(
            run_analysis, ctx, audio_bytes, filename, user_data, started_at,
        )
    except UploadValidationError as exc:
        return _failure(exc.status_code, exc.message)
    except Exception as exc:
        logger.error("Audio analysis request failed: %s", exc)
        return _internal_error(ctx, "Internal server error during audio analysis", exc)

    return _success(result)


@app.get("/analysis/{analysis_id}")
async def get_analysis_by_id(
    analysis_id: str,
    ctx: AnalysisContext = Depends(get_context),
):
    try:
        record = await asyncio.to_thread(get_analysis, ctx, analysis_id)
    except AnalysisNotFoundError:
        return _failure(404, "Analysis not found")
    except Exception as exc:
        logger.error("Get analysis error: %s", exc, exc_info=True)
        return _internal_error(ctx, "Internal server error", exc)

    return _success(record)


@app.get("/analyses")
async def get_user_analyses(
    email: str | None = Query(None),
    ctx: AnalysisContext = Depends(get_context),
):
    if not email:
        return _failure(400, "Email parameter is required")

    try:
        records = await asyncio.to_thread(list_analyses, ctx, email)
    except Exception as exc:
        logger.error("Get user analyses error: %s", exc, exc_info=True)
        return _internal_error(ctx, "Internal server error", exc)

    return _success(records)


@app.get("/health")
async def health(ctx: AnalysisContext = Depends(get_context)):
    """Report Gemini and MongoDB availability; 503 unless both are up."""
    checks = await asyncio.to_thread(check_health, ctx)
    healthy = all(checks.values())

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "success": healthy,
            "message": (
                "Audio analysis service is healthy"
                if healthy
                else "Some services are unavailable"
            ),
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
