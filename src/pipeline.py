"""
src/pipeline.py
================
Analysis Orchestrator — TripTone

Responsibility:
    1. Create a processing record before calling Gemini
    2. Send the audio + prompt to Gemini exactly once
    3. Parse the reply (fallback payload on unparseable JSON)
    4. Normalize the analysis so every field is present
    5. Mark the record completed with its processing time
    6. On any failure, best-effort mark the newest processing record for
       the submitting email as failed, then re-raise

Also serves the read side: lookup by id, listing by email, and the
dependency health probe.

Every function here is blocking (google-genai + pymongo); the API layer
runs them through asyncio.to_thread.

This layer does NOT:
    - Validate file types or sizes (handled by upload_validator.py)
    - Retry the Gemini call
    - Deduplicate concurrent uploads for the same email
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from google import genai

from src.analysis.gemini_client import analyze_audio, check_health as gemini_health
from src.analysis.normalizer import normalize_analysis, parse_model_reply
from src.analysis.prompt import QUESTIONS
from src.audio.upload_validator import validate_present
from src.config import Settings
from src.storage.repository import AnalysisRepository

logger = logging.getLogger("triptone.pipeline")


# =====================================================================
# Exceptions
# =====================================================================


class AnalysisNotFoundError(Exception):
    """Raised when no record exists for the requested id."""

    def __init__(self, analysis_id: str):
        self.analysis_id = analysis_id
        super().__init__(f"Analysis not found: {analysis_id}")


# =====================================================================
# Shared immutable dependencies, built once at startup
# =====================================================================


@dataclass(frozen=True)
class AnalysisContext:
    settings: Settings
    gemini: genai.Client
    repository: AnalysisRepository


# =====================================================================
# Upload → analysis
# =====================================================================


def run_analysis(
    ctx: AnalysisContext,
    audio_bytes: bytes | None,
    filename: str | None,
    user_data: dict[str, Any],
    started_at: float | None = None,
) -> dict[str, Any]:
    """
    Execute one upload from record creation to completed record.

    Args:
        ctx:         Shared dependencies.
        audio_bytes: Raw uploaded audio; None means no file was sent.
        filename:    Original filename (extension decides the MIME type).
        user_data:   Dict with name, email, phone.
        started_at:  time.monotonic() value captured at request entry.

    Returns:
        Response payload with analysisId, userData, analysis, questions,
        processingTime and an ISO-8601 timestamp.

    Raises:
        UploadValidationError: No audio buffer.
        AnalysisUpstreamError: The Gemini call failed.
        Exception:             Any storage failure, re-raised after the
                               failure-marking attempt.
    """
    if started_at is None:
        started_at = time.monotonic()

    validate_present(audio_bytes)

    logger.info("Processing audio analysis for: %s", user_data.get("email"))

    try:
        record_id = ctx.repository.create(user_data, list(QUESTIONS))

        reply = analyze_audio(
            ctx.gemini,
            ctx.settings.gemini_model,
            audio_bytes,
            filename,
            user_data,
        )
        analysis = normalize_analysis(parse_model_reply(reply))

        processing_time = int((time.monotonic() - started_at) * 1000)
        ctx.repository.mark_completed(record_id, analysis, processing_time)
    except Exception:
        logger.error("Audio analysis error for %s", user_data.get("email"), exc_info=True)
        _mark_failed(ctx, user_data.get("email"))
        raise

    logger.info(
        "Analysis %s completed in %d ms.", record_id, processing_time,
    )

    return {
        "analysisId": record_id,
        "userData": user_data,
        "analysis": analysis,
        "questions": list(QUESTIONS),
        "processingTime": processing_time,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _mark_failed(ctx: AnalysisContext, email: str | None) -> None:
    """Advisory cleanup; never raises."""
    try:
        ctx.repository.mark_latest_failed(email)
    except Exception as exc:
        logger.error("Error updating failed analysis record: %s", exc)


# =====================================================================
# Read side
# =====================================================================


def get_analysis(ctx: AnalysisContext, analysis_id: str) -> dict[str, Any]:
    """
    Fetch one record by id.

    Raises:
        AnalysisNotFoundError: Unknown or malformed id.
    """
    doc = ctx.repository.get_by_id(analysis_id)
    if doc is None:
        raise AnalysisNotFoundError(analysis_id)

    return {
        "analysisId": str(doc["_id"]),
        "userData": doc.get("userData"),
        "analysis": doc.get("analysis"),
        "questions": doc.get("questions"),
        "status": doc.get("status"),
        "processingTime": doc.get("processingTime"),
        "createdAt": doc.get("createdAt"),
        "updatedAt": doc.get("updatedAt"),
    }


def list_analyses(ctx: AnalysisContext, email: str) -> list[dict[str, Any]]:
    """Newest-first summaries for one email; never includes the analysis."""
    return [
        {
            "analysisId": str(doc["_id"]),
            "userData": doc.get("userData"),
            "status": doc.get("status"),
            "processingTime": doc.get("processingTime"),
            "createdAt": doc.get("createdAt"),
            "updatedAt": doc.get("updatedAt"),
        }
        for doc in ctx.repository.list_by_email(email)
    ]


def check_health(ctx: AnalysisContext) -> dict[str, bool]:
    """Probe Gemini and MongoDB independently."""
    return {
        "gemini": gemini_health(ctx.gemini, ctx.settings.gemini_model),
        "database": ctx.repository.check_health(),
    }
