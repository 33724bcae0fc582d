# src/analysis/__init__.py
# =========================
# Analysis Layer — TripTone
#
#   - prompt.py:        fixed interview questions + Gemini instruction
#   - gemini_client.py: single multimodal call (audio + prompt) to Gemini
#   - normalizer.py:    fence stripping, JSON fallback, default-filling
#
# Public API:
#   analyze_audio(client, model, audio_bytes, filename, user_data) → str
#   parse_model_reply(raw) → Any
#   normalize_analysis(raw) → dict

from src.analysis.gemini_client import AnalysisUpstreamError, analyze_audio  # noqa: F401
from src.analysis.normalizer import (                                         # noqa: F401
    FALLBACK_ANALYSIS,
    normalize_analysis,
    parse_model_reply,
)
from src.analysis.prompt import QUESTIONS, build_analysis_prompt              # noqa: F401

__all__ = [
    "AnalysisUpstreamError",
    "analyze_audio",
    "FALLBACK_ANALYSIS",
    "normalize_analysis",
    "parse_model_reply",
    "QUESTIONS",
    "build_analysis_prompt",
]
