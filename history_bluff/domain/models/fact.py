"""Domain model for dated historical facts."""

import calendar
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

# Plausible span for any year the game accepts
MIN_YEAR = 1
MAX_YEAR = 2100

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class CalendarDate(BaseModel):
    """A complete Gregorian date with a zero-based month."""

    year: int = Field(..., description="Calendar year")
    month: int = Field(..., ge=0, le=11, description="Month, 0 = January")
    day: int = Field(..., ge=1, le=31, description="Day of month")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @model_validator(mode="after")
    def _check_real_date(self) -> "CalendarDate":
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(
                f"Year {self.year} outside plausible range {MIN_YEAR}-{MAX_YEAR}"
            )
        days_in_month = calendar.monthrange(self.year, self.month + 1)[1]
        if self.day > days_in_month:
            raise ValueError(
                f"{MONTH_NAMES[self.month]} {self.year} has no day {self.day}"
            )
        return self

    def to_date(self) -> date:
        """Convert to a standard library date."""
        return date(self.year, self.month + 1, self.day)

    def display(self) -> str:
        """Format as "Month Day, Year"."""
        return f"{MONTH_NAMES[self.month]} {self.day}, {self.year}"


class Fact(BaseModel):
    """A validated, dated historical occurrence."""

    title: str = Field(..., min_length=1, description="Event title")
    calendar_date: CalendarDate = Field(..., description="When it happened")
    source_url: Optional[str] = Field(None, description="Canonical source page")
    summary: Optional[str] = Field(None, description="Descriptive text from the source")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "title": "Battle of Hastings",
                "calendar_date": {"year": 1066, "month": 9, "day": 14},
                "source_url": "https://en.wikipedia.org/wiki/Battle_of_Hastings",
                "summary": "The Battle of Hastings was fought on 14 October 1066...",
            }
        }

    @property
    def year(self) -> int:
        return self.calendar_date.year

    @property
    def month(self) -> int:
        return self.calendar_date.month

    @property
    def day(self) -> int:
        return self.calendar_date.day
