from datetime import date
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Leap year used to validate month/day pairs that carry no year of their own.
_VALIDATION_YEAR = 2000


class CycleType(str, Enum):
    MONTHLY = "MONTHLY"
    CALENDAR_YEAR = "CALENDAR_YEAR"
    CARDMEMBER_YEAR = "CARDMEMBER_YEAR"
    SEMIANNUAL_CALENDAR = "SEMIANNUAL_CALENDAR"
    ONE_TIME = "ONE_TIME"
    PER_TRIP = "PER_TRIP"


class ExpiryStatus(str, Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring-soon"
    UPCOMING = "upcoming"


class CycleWindow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_month: int = Field(alias="startMonth", ge=1, le=12)
    start_day: int = Field(alias="startDay", ge=1, le=31)
    end_month: int = Field(alias="endMonth", ge=1, le=12)
    end_day: int = Field(alias="endDay", ge=1, le=31)

    @model_validator(mode="after")
    def _check_calendar_position(self) -> "CycleWindow":
        start = date(_VALIDATION_YEAR, self.start_month, self.start_day)
        end = date(_VALIDATION_YEAR, self.end_month, self.end_day)
        if start > end:
            raise ValueError("window start must not be after window end (windows cannot wrap the year)")
        return self


class SingleCycle(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["single"] = "single"
    expiry_date: date | None = Field(default=None, alias="expiryDate")


class MultipleWindowsCycle(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["multiple_windows"] = "multiple_windows"
    windows: tuple[CycleWindow, ...] = ()


CycleDefinition = Annotated[Union[SingleCycle, MultipleWindowsCycle], Field(discriminator="type")]


class ExpiryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    next_reset_date: date
    next_expiry_date: date
    days_until_expiry: int
    current_cycle_end: date


class BenefitDefinition(BaseModel):
    id: str
    name: str
    type: str = "RECURRING_CREDIT"
    nominal_value: float | None = None
    currency: str = "USD"
    # Kept raw so one malformed benefit cannot break loading of the whole store.
    cycle_type: Any = None
    cycle_definition: Any = Field(default_factory=lambda: {"type": "single"})
    usage_limit_per_cycle: float | None = None
    priority_score: int = 0
    active: bool = True


class CardConfig(BaseModel):
    id: str
    issuer: str
    product_name: str
    annual_fee: float = 0
    renewal_month_day: Any = None
    active: bool = True
    benefits: list[BenefitDefinition] = Field(default_factory=list)


class BenefitUsage(BaseModel):
    benefit_id: str
    date_used: date
    amount_used: float


class ValueAtRisk(BaseModel):
    benefit_id: str
    benefit_name: str
    total_value: float
    used_value: float
    remaining_value: float
    expiry_date: date
    days_until_expiry: int


class BenefitExpiry(BaseModel):
    card_id: str
    card_name: str
    benefit_id: str
    benefit_name: str
    priority_score: int = 0
    expiry: ExpiryResult
    status: ExpiryStatus
    value_at_risk: ValueAtRisk | None = None
