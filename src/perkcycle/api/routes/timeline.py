from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from perkcycle.agents.orchestrator import ExpiryOrchestrator
from perkcycle.config import settings
from perkcycle.repository.benefit_store import BenefitStore
from perkcycle.schemas.requests import TimelineRequest
from perkcycle.schemas.responses import TimelineResponse

router = APIRouter(tags=["timeline"])


@lru_cache
def get_orchestrator() -> ExpiryOrchestrator:
    return ExpiryOrchestrator(BenefitStore(settings.benefit_store_file), settings.action_window_days)


@router.post("/timeline", response_model=TimelineResponse)
def timeline(
    request: TimelineRequest,
    orchestrator: ExpiryOrchestrator = Depends(get_orchestrator),
) -> TimelineResponse:
    try:
        return orchestrator.timeline(request)
    except (FileNotFoundError, ValidationError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.post("/action-items", response_model=TimelineResponse)
def action_items(
    request: TimelineRequest,
    orchestrator: ExpiryOrchestrator = Depends(get_orchestrator),
) -> TimelineResponse:
    try:
        return orchestrator.action_items(request)
    except (FileNotFoundError, ValidationError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
