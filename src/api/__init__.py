# src/api/__init__.py
# =====================
# API Layer — TripTone
#
#   POST /analyze, POST /analyze-json  → upload + Gemini analysis
#   GET  /analysis/{analysis_id}       → one record
#   GET  /analyses?email=...           → newest-first summaries
#   GET  /health                       → Gemini + MongoDB probes
