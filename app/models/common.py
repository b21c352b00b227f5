from datetime import datetime, timezone
from typing import Optional


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps may carry an offset ('Z'); analytics compares naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
