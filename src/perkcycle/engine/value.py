from datetime import date, datetime

from perkcycle.domain.models import BenefitDefinition, BenefitUsage, ValueAtRisk
from perkcycle.engine.cycles import parse_cycle_definition, resolve_current_cycle_start
from perkcycle.engine.expiry import calculate_next_expiry


def calculate_used_value(
    usages: list[BenefitUsage],
    cycle_start: date | None,
    cycle_end: date,
) -> float:
    """Sum usage dated within [cycle_start, cycle_end]; no start means unbounded."""
    return sum(
        usage.amount_used
        for usage in usages
        if (cycle_start is None or usage.date_used >= cycle_start) and usage.date_used <= cycle_end
    )


def calculate_realized_value(usages: list[BenefitUsage]) -> float:
    return sum(usage.amount_used for usage in usages)


def calculate_value_at_risk(
    benefit: BenefitDefinition,
    usages: list[BenefitUsage],
    reference_date: date | datetime,
    card_anniversary: str | None = None,
) -> ValueAtRisk | None:
    """Remaining value of a cash benefit that is lost if unused by expiry.

    Returns None for benefits without a USD nominal value; points benefits
    need a currency conversion that lives outside this package.
    """
    if not benefit.nominal_value or benefit.currency != "USD":
        return None

    definition = parse_cycle_definition(benefit.cycle_definition)
    expiry = calculate_next_expiry(benefit.cycle_type, definition, reference_date, card_anniversary)
    cycle_start = resolve_current_cycle_start(benefit.cycle_type, definition, reference_date, card_anniversary)

    own_usages = [usage for usage in usages if usage.benefit_id == benefit.id]
    used_value = calculate_used_value(own_usages, cycle_start, expiry.current_cycle_end)
    total_value = benefit.usage_limit_per_cycle or benefit.nominal_value

    return ValueAtRisk(
        benefit_id=benefit.id,
        benefit_name=benefit.name,
        total_value=total_value,
        used_value=used_value,
        remaining_value=max(0.0, total_value - used_value),
        expiry_date=expiry.next_expiry_date,
        days_until_expiry=expiry.days_until_expiry,
    )
