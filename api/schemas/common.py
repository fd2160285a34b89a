"""Common shared schemas used across multiple domains."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.fuel.route_fuel import parse_or_zero


class Position(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


def coerce_optional_number(value: Any) -> Optional[float]:
    """Blank form values stay blank; anything else goes through parse-or-zero."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_or_zero(value)
