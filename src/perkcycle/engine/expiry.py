from datetime import date, datetime

from perkcycle.domain.models import CycleType, ExpiryResult, ExpiryStatus, SingleCycle
from perkcycle.engine.cycles import (
    parse_cycle_definition,
    parse_cycle_type,
    resolve_current_cycle_end,
    resolve_next_reset_date,
)

EXPIRING_SOON_DAYS = 30


def calculate_next_expiry(
    cycle_type: CycleType | str,
    cycle_definition,
    reference_date: date | datetime,
    card_anniversary: str | None = None,
) -> ExpiryResult:
    """Compute reset, expiry and days left for a benefit as of reference_date.

    An explicit expiryDate on a single-cycle definition is a hard deadline and
    replaces the computed cycle end as the expiry date. The cycle end and the
    reset date still describe the recurring cycle.
    """
    cycle_type = parse_cycle_type(cycle_type)
    definition = parse_cycle_definition(cycle_definition)
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    current_cycle_end = resolve_current_cycle_end(cycle_type, definition, reference_date, card_anniversary)
    next_reset_date = resolve_next_reset_date(cycle_type, definition, reference_date, card_anniversary)

    expiry_date = current_cycle_end
    if isinstance(definition, SingleCycle) and definition.expiry_date is not None:
        expiry_date = definition.expiry_date

    return ExpiryResult(
        next_reset_date=next_reset_date,
        next_expiry_date=expiry_date,
        days_until_expiry=(expiry_date - reference_date).days,
        current_cycle_end=current_cycle_end,
    )


def is_expiring_soon(result: ExpiryResult, threshold_days: int = EXPIRING_SOON_DAYS) -> bool:
    # Already expired is not "expiring soon".
    return 0 <= result.days_until_expiry <= threshold_days


def classify_expiry(result: ExpiryResult) -> ExpiryStatus:
    if result.days_until_expiry < 0:
        return ExpiryStatus.EXPIRED
    if result.days_until_expiry <= EXPIRING_SOON_DAYS:
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.UPCOMING
