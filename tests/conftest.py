from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from perkcycle.agents.orchestrator import ExpiryOrchestrator
from perkcycle.api.app import app
from perkcycle.api.routes.timeline import get_orchestrator
from perkcycle.repository.benefit_store import BenefitStore

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SAMPLE_STORE = PROJECT_ROOT / "data" / "cards" / "sample_cards.json"


@pytest.fixture
def sample_store() -> BenefitStore:
    return BenefitStore(SAMPLE_STORE)


@pytest.fixture
def orchestrator(sample_store) -> ExpiryOrchestrator:
    return ExpiryOrchestrator(sample_store, threshold_days=60)


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()
