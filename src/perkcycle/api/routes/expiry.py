from fastapi import APIRouter, HTTPException

from perkcycle.config import settings
from perkcycle.domain.errors import BenefitCycleError
from perkcycle.engine.expiry import calculate_next_expiry, classify_expiry, is_expiring_soon
from perkcycle.schemas.requests import ExpiryRequest
from perkcycle.schemas.responses import ExpiryResponse

router = APIRouter(tags=["expiry"])


@router.post("/expiry", response_model=ExpiryResponse)
def expiry(request: ExpiryRequest) -> ExpiryResponse:
    try:
        result = calculate_next_expiry(
            request.cycle_type,
            request.cycle_definition,
            request.reference_date,
            request.card_anniversary,
        )
    except BenefitCycleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ExpiryResponse(
        result=result,
        status=classify_expiry(result),
        expiring_soon=is_expiring_soon(result, settings.expiring_soon_threshold_days),
    )
