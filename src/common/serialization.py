"""Serialization utilities."""

import json
from dataclasses import asdict, fields, is_dataclass
from datetime import datetime
from typing import Any


def serialize_dataclass(obj, exclude: frozenset[str] = frozenset()) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings.

    Top-level fields named in `exclude` are left out.
    """
    data = {f.name: getattr(obj, f.name) for f in fields(obj) if f.name not in exclude}
    for key, value in data.items():
        data[key] = _to_jsonable(value)
    return data


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def dumps_stable(data: Any) -> str:
    """Serialize to pretty JSON with sorted keys and a trailing newline."""
    return json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
