"""
src/audio/upload_validator.py
==============================
Upload Validator — TripTone

Responsibility:
    - Validate the uploaded audio file (.webm, .mp3, .wav, .m4a, .ogg)
    - Enforce the upload size ceiling and the one-file limit
    - Resolve the transport MIME type from the filename extension

This module does NOT:
    - Decode, resample, or inspect audio content
    - Call the AI model or touch storage
"""

import os


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Extension → MIME type sent alongside the inline audio payload
MIME_TYPES: dict[str, str] = {
    ".webm": "audio/webm",
    ".mp3": "audio/mp3",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
}

ALLOWED_EXTENSIONS: set[str] = set(MIME_TYPES)
DEFAULT_MIME_TYPE: str = "audio/webm"

INVALID_TYPE_MESSAGE: str = (
    "Invalid file type. Only audio files (WebM, MP3, WAV, M4A, OGG) are allowed."
)
NO_FILE_MESSAGE: str = "No audio file provided"
TOO_MANY_FILES_MESSAGE: str = "Too many files. Only one audio file is allowed."


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UploadValidationError(Exception):
    """Raised when a request fails input validation (4xx)."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_extension(filename: str | None) -> None:
    """
    Check that the file extension is one of the accepted audio types.

    Raises:
        UploadValidationError: If the extension is not allowed.
    """
    if _extract_extension(filename or "") not in ALLOWED_EXTENSIONS:
        raise UploadValidationError(INVALID_TYPE_MESSAGE)


def validate_size(audio_bytes: bytes, max_bytes: int) -> None:
    """
    Check that the upload does not exceed ``max_bytes``.

    Raises:
        UploadValidationError: With status 413 when the file is too large.
    """
    if len(audio_bytes) > max_bytes:
        raise _too_large(max_bytes)


def validate_declared_size(size: int | None, max_bytes: int) -> None:
    """
    Check the size reported by the multipart parser before the body is read.

    An unknown size passes; ``validate_size`` still guards the buffer.

    Raises:
        UploadValidationError: With status 413 when the file is too large.
    """
    if size is not None and size > max_bytes:
        raise _too_large(max_bytes)


def validate_file_count(count: int) -> None:
    """
    Check that at most one audio part was submitted.

    Raises:
        UploadValidationError: If more than one file was sent.
    """
    if count > 1:
        raise UploadValidationError(TOO_MANY_FILES_MESSAGE)


def validate_present(audio_bytes: bytes | None) -> None:
    """
    Check that an audio buffer was supplied at all.

    Raises:
        UploadValidationError: If no buffer is present.
    """
    if audio_bytes is None:
        raise UploadValidationError(NO_FILE_MESSAGE)


# ---------------------------------------------------------------------------
# MIME resolution
# ---------------------------------------------------------------------------


def resolve_mime_type(filename: str | None) -> str:
    """Map a filename's extension to its MIME type, defaulting to audio/webm."""
    return MIME_TYPES.get(_extract_extension(filename or ""), DEFAULT_MIME_TYPE)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _too_large(max_bytes: int) -> UploadValidationError:
    limit_mb = max_bytes // (1024 * 1024)
    return UploadValidationError(
        f"File too large. Maximum size is {limit_mb}MB.", status_code=413
    )


def _extract_extension(filename: str) -> str:
    """Return lowercase file extension including the dot, e.g. '.wav'."""
    return os.path.splitext(filename)[1].lower()
