from typing import Optional


def require_text(value: Optional[str], field: str = "value") -> Optional[str]:
    """Strip ``value`` and reject it when nothing is left."""
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    return value
