from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import TypeAdapter

_TIMESTAMP = TypeAdapter(datetime)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a Postgres timestamp; naive values are taken as UTC.

    Accepts the trimmed fractional seconds PostgREST returns (``.12+00:00``).
    """
    if value is None or value == "":
        return None
    parsed = _TIMESTAMP.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
