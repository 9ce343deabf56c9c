"""Pydantic input forms shared by the domain services and the API layer"""

import re
from datetime import date
from typing import Literal, Optional, Type, TypeVar

from pydantic import AnyHttpUrl, BaseModel, Field, ValidationError, field_validator

from hoa_portal.domain.exceptions import InvalidInputError

FormT = TypeVar("FormT", bound=BaseModel)

TIME_OF_DAY = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]\s(AM|PM)$", re.IGNORECASE)


def parse_form(form_cls: Type[FormT], values) -> FormT:
    """Accept a form instance or raw mapping; validation errors become InvalidInputError"""
    if isinstance(values, form_cls):
        return values
    try:
        return form_cls.model_validate(values)
    except ValidationError as e:
        raise InvalidInputError(str(e)) from e


class AnnouncementForm(BaseModel):
    """Admin-authored announcement or event"""

    title: str = Field(..., min_length=3, max_length=100)
    content: str = Field(..., min_length=10, max_length=2000)
    type: Literal["announcement", "event"]
    author: Optional[str] = None
    image_url: Optional[AnyHttpUrl] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, value):
        return value or None


class VehicleForm(BaseModel):
    """Resident vehicle registration"""

    make: str = Field(..., min_length=2, max_length=50)
    model: str = Field(..., min_length=1, max_length=50)
    year: str = Field(..., pattern=r"^\d{4}$")
    color: str = Field(..., min_length=2, max_length=30)
    license_plate: str = Field(..., min_length=2, max_length=15)

    @field_validator("year")
    @classmethod
    def plausible_model_year(cls, value: str) -> str:
        latest = date.today().year + 1
        if not 1900 <= int(value) <= latest:
            raise ValueError(f"Year must be between 1900 and {latest}")
        return value


class VisitorPassForm(BaseModel):
    """Guest pass request"""

    visitor_name: str = Field(..., min_length=2, max_length=100)
    visit_date: date
    visit_start_time: Optional[str] = None  # e.g. "10:00 AM"
    duration_hours: Optional[int] = Field(default=None, ge=1, le=24)
    vehicle_plate: Optional[str] = Field(default=None, max_length=15)

    @field_validator("visit_start_time")
    @classmethod
    def twelve_hour_clock(cls, value: Optional[str]) -> Optional[str]:
        if value and not TIME_OF_DAY.match(value):
            raise ValueError("Invalid time format (e.g. 10:00 AM)")
        return value or None
