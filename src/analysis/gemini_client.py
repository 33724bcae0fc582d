"""
src/analysis/gemini_client.py
==============================
Gemini Multimodal Client — TripTone

Responsibility:
    - Send one audio interview (inline bytes + MIME type) together with
      the analysis prompt to Gemini
    - Return the raw reply text
    - Probe Gemini availability for the health endpoint

The google-genai SDK base64-encodes inline bytes when serializing the
request, so audio is passed through as raw bytes.

This module does NOT:
    - Retry failed calls
    - Parse or normalize the reply (handled by normalizer.py)
    - Store data
"""

import logging
from typing import Any

from google import genai
from google.genai import types

from src.analysis.prompt import build_analysis_prompt
from src.audio.upload_validator import resolve_mime_type

logger = logging.getLogger("triptone.analysis.gemini")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AnalysisUpstreamError(Exception):
    """Raised when the Gemini call itself fails (transport, auth, quota)."""
    pass


# ---------------------------------------------------------------------------
# Client construction
# ---------------------------------------------------------------------------


def create_client(api_key: str) -> genai.Client:
    """Build the process-wide Gemini client."""
    return genai.Client(api_key=api_key)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_audio(
    client: genai.Client,
    model: str,
    audio_bytes: bytes,
    filename: str | None,
    user_data: dict[str, Any],
) -> str:
    """
    Run a single multimodal analysis request.

    Args:
        client:      Shared google-genai client.
        model:       Gemini model id, e.g. "gemini-2.5-flash".
        audio_bytes: Raw uploaded audio.
        filename:    Original filename (used only for the MIME type).
        user_data:   Dict with name, email, phone embedded in the prompt.

    Returns:
        The reply text (expected, but not guaranteed, to be JSON).

    Raises:
        AnalysisUpstreamError: If the Gemini call fails.
    """
    mime_type = resolve_mime_type(filename)
    prompt = build_analysis_prompt(user_data)

    logger.info(
        "Sending %.2f KB of %s audio to %s.",
        len(audio_bytes) / 1024,
        mime_type,
        model,
    )

    try:
        response = client.models.generate_content(
            model=model,
            contents=[
                prompt,
                types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
            ],
        )
    except Exception as exc:
        logger.error("Gemini audio analysis error: %s", exc)
        raise AnalysisUpstreamError("Failed to analyze audio with AI") from exc

    text = response.text or ""
    logger.debug("Gemini raw analysis response: %s", text)
    return text


def check_health(client: genai.Client, model: str) -> bool:
    """Issue a minimal text generation; True if Gemini answered."""
    try:
        client.models.generate_content(model=model, contents="test")
    except Exception as exc:
        logger.error("Gemini API check failed: %s", exc)
        return False
    return True
