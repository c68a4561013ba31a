from datetime import date

from pydantic import BaseModel, Field

from perkcycle.domain.models import BenefitUsage


class ExpiryRequest(BaseModel):
    cycle_type: str
    cycle_definition: str | dict = Field(default_factory=lambda: {"type": "single"})
    reference_date: date
    card_anniversary: str | None = None


class TimelineRequest(BaseModel):
    reference_date: date | None = None
    usages: list[BenefitUsage] = Field(default_factory=list)
    threshold_days: int | None = Field(default=None, ge=0)
