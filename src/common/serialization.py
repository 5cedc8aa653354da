"""Serialization utilities."""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable


def serialize_value(value: Any) -> Any:
    """Convert datetimes, enums and nested containers to JSON-friendly values."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(v) for v in value]
    return value


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings."""
    if not is_dataclass(obj):
        return serialize_value(obj)
    return serialize_value(asdict(obj))


def to_jsonl(records: Iterable[Any]) -> str:
    """One serialized record per line, newline-terminated."""
    lines = [json.dumps(serialize_dataclass(record), default=str, ensure_ascii=False) for record in records]
    return "".join(line + "\n" for line in lines)


def jsonl_filename(prefix: str, timestamp: datetime) -> str:
    return f"{prefix}_{timestamp.strftime('%Y_%m_%d_%H_%M')}.jsonl"
