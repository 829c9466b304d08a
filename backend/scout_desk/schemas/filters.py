from typing import Any, List

from pydantic import BaseModel, Field

from scout_desk.schemas.player import Foot, Position, Recommendation

DEFAULT_MIN_AGE = 0
DEFAULT_MAX_AGE = 50

SET_FIELDS = ("positions", "recommendations", "competitions", "scout_years", "feet")


class FilterState(BaseModel):
    """Roster filter. Empty list fields place no constraint on the roster."""

    search: str = ""
    positions: List[Position] = Field(default_factory=list)
    min_age: int = DEFAULT_MIN_AGE
    max_age: int = DEFAULT_MAX_AGE
    recommendations: List[Recommendation] = Field(default_factory=list)
    competitions: List[str] = Field(default_factory=list)
    scout_years: List[int] = Field(default_factory=list)
    feet: List[Foot] = Field(default_factory=list)

    def toggled(self, field: str, value: Any) -> "FilterState":
        """Return a copy with ``value`` added to or removed from a list field."""
        if field not in SET_FIELDS:
            raise ValueError(f"'{field}' is not a toggleable filter")
        current = list(getattr(self, field))
        if value in current:
            current = [v for v in current if v != value]
        else:
            current.append(value)
        # Re-validate so enum fields get coerced from raw strings
        return FilterState.model_validate({**self.model_dump(), field: current})

    @classmethod
    def cleared(cls) -> "FilterState":
        return cls()
