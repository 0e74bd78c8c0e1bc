"""Shared utilities for schema validation."""

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

# Stored documents use camelCase field names; records expose snake_case attributes.
RECORD_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def parse_mongo_datetime(v: Any) -> Any:
    """Parse MongoDB Extended JSON datetime format or return as-is if already datetime.

    MongoDB Extended JSON format: {'$date': '2024-11-01T08:00:00Z'}
    This can occur when data is inserted via mongoimport or other tools.
    Naive datetimes are assumed to be UTC.
    """
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    if isinstance(v, dict) and "$date" in v:
        raw = v["$date"]
        if isinstance(raw, (int, float)):
            return datetime.fromtimestamp(raw / 1000, timezone.utc)
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    # Return as-is and let Pydantic handle validation
    return v


def parse_object_id(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    return v


def id_filter(doc_id: str) -> dict[str, Any]:
    """Match a document whose `_id` is either the string itself or its ObjectId form."""
    if ObjectId.is_valid(doc_id):
        return {"_id": {"$in": [doc_id, ObjectId(doc_id)]}}
    return {"_id": doc_id}


def serialize_utc_datetime(dt: datetime) -> str:
    """Serialize datetime as ISO 8601 string with UTC timezone.

    If the datetime is naive (no timezone info), it is assumed to be UTC.
    Output format: 2025-12-03T10:30:00+00:00
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def serialize_optional_utc_datetime(dt: datetime | None) -> str | None:
    """Serialize optional datetime as ISO 8601 string with UTC timezone."""
    if dt is None:
        return None
    return serialize_utc_datetime(dt)
