"""
src/storage/repository.py
==========================
Analysis Record Repository — TripTone

Responsibility:
    - Persist one AnalysisRecord document per upload
    - Drive the processing → completed / failed status lifecycle
    - Look records up by id and list them by email
    - Manage createdAt / updatedAt timestamps
    - Probe database availability for the health endpoint

Documents are returned as plain dicts with the Mongo ``_id`` left in
place; presentation (analysisId, ISO timestamps) is the caller's job.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from bson import ObjectId
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection

logger = logging.getLogger("triptone.storage")


# ---------------------------------------------------------------------------
# Record status enum
# ---------------------------------------------------------------------------


class RecordStatus(str, Enum):
    """Lifecycle states of an analysis record."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Fields returned by list_by_email; never the analysis payload
LIST_PROJECTION: dict[str, int] = {
    "_id": 1,
    "userData": 1,
    "status": 1,
    "processingTime": 1,
    "createdAt": 1,
    "updatedAt": 1,
}


# createdAt ties are broken by insertion order
_NEWEST_FIRST: list[tuple[str, int]] = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Connection helpers
# ---------------------------------------------------------------------------


def connect(uri: str, db_name: str, collection_name: str) -> tuple[MongoClient, Collection]:
    """Open the process-wide Mongo client and return it with the collection."""
    client: MongoClient = MongoClient(uri, tz_aware=True)
    return client, client[db_name][collection_name]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AnalysisRepository:
    """Thin wrapper over the analysis record collection."""

    def __init__(self, collection: Collection):
        self._collection = collection

    def ensure_indexes(self) -> None:
        self._collection.create_index(
            [("userData.email", 1), ("createdAt", DESCENDING)]
        )

    def create(self, user_data: dict[str, Any], questions: list[str]) -> str:
        """Insert a new record in the processing state and return its id."""
        now = _utcnow()
        result = self._collection.insert_one({
            "userData": dict(user_data),
            "questions": list(questions),
            "status": RecordStatus.PROCESSING.value,
            "createdAt": now,
            "updatedAt": now,
        })
        logger.debug("Created analysis record %s", result.inserted_id)
        return str(result.inserted_id)

    def mark_completed(
        self,
        record_id: str,
        analysis: dict[str, Any],
        processing_time_ms: int,
    ) -> None:
        self._collection.update_one(
            {"_id": ObjectId(record_id)},
            {"$set": {
                "analysis": analysis,
                "status": RecordStatus.COMPLETED.value,
                "processingTime": processing_time_ms,
                "updatedAt": _utcnow(),
            }},
        )

    def mark_latest_failed(self, email: str | None) -> bool:
        """
        Flip the newest record for ``email`` to failed if it is still
        processing.

        Returns:
            True if a record was updated.
        """
        latest = self._collection.find_one(
            {"userData.email": email},
            sort=_NEWEST_FIRST,
        )
        if latest is None or latest.get("status") != RecordStatus.PROCESSING.value:
            return False

        self._collection.update_one(
            {"_id": latest["_id"]},
            {"$set": {"status": RecordStatus.FAILED.value, "updatedAt": _utcnow()}},
        )
        logger.info("Marked analysis record %s as failed", latest["_id"])
        return True

    def get_by_id(self, record_id: str) -> dict[str, Any] | None:
        """Return the record, or None when the id is unknown or malformed."""
        if not ObjectId.is_valid(record_id):
            return None
        return self._collection.find_one({"_id": ObjectId(record_id)})

    def list_by_email(self, email: str) -> list[dict[str, Any]]:
        """Newest-first summaries for ``email``, without the analysis payload."""
        cursor = self._collection.find(
            {"userData.email": email}, LIST_PROJECTION
        ).sort(_NEWEST_FIRST)
        return [dict(doc) for doc in cursor]

    def check_health(self) -> bool:
        """Issue a minimal read; True if the database answered."""
        try:
            self._collection.find_one()
        except Exception as exc:
            logger.error("Database check failed: %s", exc)
            return False
        return True
