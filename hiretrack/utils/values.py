from datetime import timezone


def enum_value(value):
    """Plain value of an Enum member; anything else is returned unchanged."""
    return value.value if hasattr(value, "value") else value


def naive_utc(value):
    """Convert an aware datetime to naive UTC, the form every timestamp is stored in."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
