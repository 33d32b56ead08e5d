"""
Base model classes.
"""

import math
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """
    Accepts the camelCase names used by the form builder and stored reports,
    as well as the Python field names.

    Dump with by_alias=True to get the wire shape back.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",  # Forward compatibility with newer form builders
    )


class TimestampMixin(WireModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for all persistent entities.

    Subclasses define their own id field with appropriate type.
    """
    model_config = ConfigDict(validate_assignment=True)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()


def coerce_weightage(value) -> float:
    """Missing, malformed, non-finite or negative weightage counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(weight) or weight < 0:
        return 0.0
    return weight


def coerce_fatal(value) -> bool:
    """Only a literal True marks a question fatal."""
    return value is True


def coerce_flag(value) -> bool:
    """Optional boolean flag - null means off."""
    if value is None:
        return False
    return bool(value)


def coerce_value_list(value) -> list[str]:
    """Accept a list or the legacy comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


def coerce_answer(value) -> str:
    """Answers are strings; JSON booleans and numbers keep their JS spelling."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def round_half_up(value: float) -> int:
    """Round .5 up, as the web client does (Python's round() is banker's)."""
    return math.floor(value + 0.5)
