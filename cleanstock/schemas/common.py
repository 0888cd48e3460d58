from datetime import datetime, timezone


def to_naive_utc(v: datetime | None) -> datetime | None:
    """Columns store naive UTC; convert aware client timestamps before they reach the DB."""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v
