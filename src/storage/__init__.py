# src/storage/__init__.py
# ========================
# Storage Layer — TripTone
#
# MongoDB persistence for analysis records (collection "audioanalyses").
# Timestamps and the processing → completed / failed lifecycle are
# managed here; callers never write createdAt / updatedAt themselves.

from src.storage.repository import AnalysisRepository, RecordStatus  # noqa: F401

__all__ = ["AnalysisRepository", "RecordStatus"]
