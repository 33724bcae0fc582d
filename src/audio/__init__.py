# src/audio/__init__.py
# ======================
# Audio Upload Layer — TripTone
#
# Responsibility:
#   - Format validation (webm / mp3 / wav / m4a / ogg)
#   - Upload size ceiling (50 MB)
#   - Extension → MIME type resolution for the Gemini inline payload
#
# Audio content is never decoded; Gemini receives the original bytes.
