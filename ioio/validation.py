from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ioio.errors import ValidationError
from ioio.kinds import RecordKind


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def get_missing_fields(kind: RecordKind, payload: Mapping[str, Any]) -> List[str]:
    return [field for field in kind.required_fields if is_blank(payload.get(field))]


# Bounds of a 32-bit INTEGER column, the narrowest of the supported stores
AGE_MIN = -2 ** 31
AGE_MAX = 2 ** 31 - 1


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_age(value: Any) -> Optional[int]:
    """Parse ``value`` as an integer age, or return None when it is not one.

    Only numeric-ness and the column's integer range are enforced.
    """
    age = _parse_int(value)
    if age is None or not AGE_MIN <= age <= AGE_MAX:
        return None
    return age


def as_text(value: Any) -> Optional[str]:
    """Return ``value`` as a string if it is a JSON scalar, else None."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


def build_record(kind: RecordKind, payload: Mapping[str, Any],
                 now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate ``payload`` for ``kind`` and return the record to insert.

    Raises ValidationError listing every missing required field, or the
    fields whose values cannot be coerced. Keys that are not part of the
    kind are dropped.
    """
    missing = get_missing_fields(kind, payload)
    if missing:
        raise ValidationError("Missing required fields", missing_fields=missing)

    record: Dict[str, Any] = {}
    invalid: List[str] = []
    for field in kind.required_fields:
        value = parse_age(payload[field]) if field == "age" else as_text(payload[field])
        if value is None:
            invalid.append(field)
        record[field] = value
    for field in kind.optional_fields:
        value = payload.get(field)
        if not value:
            record[field] = None
            continue
        record[field] = as_text(value)
        if record[field] is None:
            invalid.append(field)

    if invalid:
        raise ValidationError("Invalid field values", invalid_fields=invalid)

    record["created_at"] = now or datetime.now(timezone.utc)
    return record
