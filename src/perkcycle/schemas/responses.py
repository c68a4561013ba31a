from datetime import date

from pydantic import BaseModel, Field

from perkcycle.domain.models import BenefitExpiry, ExpiryResult, ExpiryStatus


class ExpiryResponse(BaseModel):
    result: ExpiryResult
    status: ExpiryStatus
    expiring_soon: bool


class TimelineResponse(BaseModel):
    reference_date: date
    items: list[BenefitExpiry]
    skipped: list[str] = Field(default_factory=list)
