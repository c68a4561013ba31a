import logging
from datetime import date

from perkcycle.domain.errors import BenefitCycleError
from perkcycle.domain.models import BenefitDefinition, BenefitExpiry, BenefitUsage, CardConfig
from perkcycle.engine.expiry import calculate_next_expiry, classify_expiry, is_expiring_soon
from perkcycle.engine.selectors import rank_by_urgency
from perkcycle.engine.value import calculate_value_at_risk
from perkcycle.repository.benefit_store import BenefitStore
from perkcycle.schemas.requests import TimelineRequest
from perkcycle.schemas.responses import TimelineResponse

logger = logging.getLogger(__name__)


class ExpiryOrchestrator:
    def __init__(self, benefit_store: BenefitStore, threshold_days: int = 60):
        self.benefit_store = benefit_store
        self.threshold_days = threshold_days

    def _evaluate(
        self,
        card: CardConfig,
        benefit: BenefitDefinition,
        reference_date: date,
        usages: list[BenefitUsage],
    ) -> BenefitExpiry:
        expiry = calculate_next_expiry(
            benefit.cycle_type,
            benefit.cycle_definition,
            reference_date,
            card.renewal_month_day,
        )
        return BenefitExpiry(
            card_id=card.id,
            card_name=card.product_name,
            benefit_id=benefit.id,
            benefit_name=benefit.name,
            priority_score=benefit.priority_score,
            expiry=expiry,
            status=classify_expiry(expiry),
            value_at_risk=calculate_value_at_risk(benefit, usages, reference_date, card.renewal_month_day),
        )

    def _collect(self, reference_date: date, usages: list[BenefitUsage]) -> tuple[list[BenefitExpiry], list[str]]:
        items: list[BenefitExpiry] = []
        skipped: list[str] = []

        for card in self.benefit_store.load_cards():
            if not card.active:
                continue
            for benefit in card.benefits:
                if not benefit.active:
                    continue
                # A broken benefit is skipped; the rest of the listing still renders.
                try:
                    items.append(self._evaluate(card, benefit, reference_date, usages))
                except BenefitCycleError as exc:
                    logger.warning("Skipping benefit %s on card %s: %s", benefit.id, card.id, exc)
                    skipped.append(benefit.id)

        return rank_by_urgency(items), skipped

    def timeline(self, request: TimelineRequest) -> TimelineResponse:
        reference_date = request.reference_date or date.today()
        items, skipped = self._collect(reference_date, request.usages)
        return TimelineResponse(reference_date=reference_date, items=items, skipped=skipped)

    def action_items(self, request: TimelineRequest) -> TimelineResponse:
        reference_date = request.reference_date or date.today()
        threshold_days = self.threshold_days if request.threshold_days is None else request.threshold_days

        items, skipped = self._collect(reference_date, request.usages)
        actionable = [
            item
            for item in items
            if is_expiring_soon(item.expiry, threshold_days)
            and (item.value_at_risk is None or item.value_at_risk.remaining_value > 0)
        ]
        logger.debug("%d of %d benefits need action as of %s", len(actionable), len(items), reference_date)
        return TimelineResponse(reference_date=reference_date, items=actionable, skipped=skipped)
