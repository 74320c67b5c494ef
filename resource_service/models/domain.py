# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from resource_service.core.errors import ValidationError


class Role(str, Enum):
    ENGINEER = "Engineer"
    MANAGER = "Manager"


class Seniority(str, Enum):
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"


class ProjectStatus(str, Enum):
    PLANNING = "Planning"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class Caller(BaseModel):
    """Identity extracted from a verified bearer credential."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER

    @property
    def is_engineer(self) -> bool:
        return self.role is Role.ENGINEER


def enum_value(enum_cls: type[Enum], value: Any, field: str) -> Optional[str]:
    """Coerce to the enum's wire value; unknown values name the offending field."""
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise ValidationError(f"{field} must be one of {allowed}")


# ── Dates ──
# Request bodies carry either a calendar date or an ISO-8601 date-time;
# storage keeps the ISO string pydantic serialises them to.

DateValue = Union[date, datetime]
_date_adapter = TypeAdapter(DateValue)


def _as_utc(value: DateValue) -> datetime:
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def dates_in_order(start: Any, end: Any) -> bool:
    """False only when both bounds are set and end precedes start."""
    if start is None or end is None:
        return True
    try:
        bounds = [_as_utc(_date_adapter.validate_python(v)) for v in (start, end)]
    except PydanticValidationError:
        raise ValidationError("startDate and endDate must be ISO-8601 dates")
    return bounds[0] <= bounds[1]


def to_iso(value: Any) -> Optional[str]:
    """Storage form of a date bound; strings are kept as given."""
    if isinstance(value, date):
        return value.isoformat()
    return value
