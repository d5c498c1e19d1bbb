import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.services.catalog import load_catalog
from design_studio.services.events import EventBus
from design_studio.services.mission_orchestrator import MissionOrchestrator


@pytest.fixture()
def catalog():
    return load_catalog()


@pytest.fixture()
def business_info() -> BusinessInfo:
    return BusinessInfo(
        name="Chez Marcel",
        sector="restaurant",
        city="Lyon",
        description="Bistrot familial avec cuisine maison et produits locaux",
    )


@pytest.fixture()
def requirements() -> BusinessRequirements:
    return BusinessRequirements(
        sector="restaurant",
        business_type="bistrot",
        target_audience="familles",
        business_goals=["generer-leads"],
        preferred_style="modern",
        budget="premium",
        timeframe="standard",
    )


@pytest.fixture()
def make_orchestrator(catalog):
    """Orchestrator factory with a short batch delay and private event buses."""

    def _factory(**overrides) -> MissionOrchestrator:
        options = {
            "batch_delay": 0.01,
            "mission_timeout": 5.0,
            "event_bus": EventBus(queue_size=100, history_limit=50),
            "broadcast": EventBus(queue_size=100, history_limit=50),
        }
        options.update(overrides)
        return MissionOrchestrator(catalog, **options)

    return _factory
