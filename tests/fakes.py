"""
tests/fakes.py
===============
In-memory stand-in for AnalysisRepository, used by the pipeline and API
tests so they run without a MongoDB server.

Behaves like the Mongo-backed repository: ObjectId identifiers,
strictly increasing createdAt, newest-first listing, list projection
without the analysis payload.
"""

import copy
from datetime import datetime, timedelta, timezone
from typing import Any

from bson import ObjectId

from src.storage.repository import LIST_PROJECTION, RecordStatus


class InMemoryRepository:
    """Dict-backed repository with the AnalysisRepository interface."""

    def __init__(self):
        self.docs: dict[ObjectId, dict[str, Any]] = {}
        self.healthy = True
        self.fail_on_create = False
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def ensure_indexes(self) -> None:
        pass

    def create(self, user_data: dict[str, Any], questions: list[str]) -> str:
        if self.fail_on_create:
            raise RuntimeError("database unavailable")
        now = self._tick()
        oid = ObjectId()
        self.docs[oid] = {
            "_id": oid,
            "userData": dict(user_data),
            "questions": list(questions),
            "status": RecordStatus.PROCESSING.value,
            "createdAt": now,
            "updatedAt": now,
        }
        return str(oid)

    def mark_completed(self, record_id, analysis, processing_time_ms) -> None:
        doc = self.docs[ObjectId(record_id)]
        doc.update({
            "analysis": copy.deepcopy(analysis),
            "status": RecordStatus.COMPLETED.value,
            "processingTime": processing_time_ms,
            "updatedAt": self._tick(),
        })

    def mark_latest_failed(self, email) -> bool:
        matches = self._newest_first(email)
        if not matches or matches[0]["status"] != RecordStatus.PROCESSING.value:
            return False
        matches[0]["status"] = RecordStatus.FAILED.value
        matches[0]["updatedAt"] = self._tick()
        return True

    def get_by_id(self, record_id: str):
        if not ObjectId.is_valid(record_id):
            return None
        doc = self.docs.get(ObjectId(record_id))
        return copy.deepcopy(doc) if doc else None

    def list_by_email(self, email: str) -> list[dict[str, Any]]:
        return [
            {key: doc[key] for key in LIST_PROJECTION if key in doc}
            for doc in self._newest_first(email)
        ]

    def check_health(self) -> bool:
        return self.healthy

    def _newest_first(self, email) -> list[dict[str, Any]]:
        matches = [d for d in self.docs.values() if d["userData"].get("email") == email]
        return sorted(matches, key=lambda d: d["createdAt"], reverse=True)
