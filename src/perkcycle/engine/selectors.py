from perkcycle.domain.models import BenefitExpiry


def _remaining(item: BenefitExpiry) -> float:
    if item.value_at_risk is None:
        return 0.0
    return item.value_at_risk.remaining_value


def rank_by_urgency(items: list[BenefitExpiry]) -> list[BenefitExpiry]:
    return sorted(
        items,
        key=lambda item: (item.expiry.days_until_expiry, -item.priority_score, -_remaining(item)),
    )
