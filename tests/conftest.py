import os
import sys
from dataclasses import replace

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from freelance_rates.engine import PricingInput, compute_rates
from freelance_rates.history import CalculationHistory, MemoryStorage, CounterIdFactory


@pytest.fixture
def base_input():
    """The calculator's default form values, without project pricing."""
    return PricingInput(
        experience_level="mid",
        fixed_costs=1000,
        weekly_hours=40,
        profit_margin=30,
        vacation_weeks=4,
        tax_rate=20,
        currency="USD",
        name="Website",
    )


@pytest.fixture
def project_input(base_input):
    """Default form values with the project section filled in."""
    return replace(base_input, project_duration=10, project_complexity="medium", risk_factor=15)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def history(storage):
    """History with deterministic ids and timestamps."""
    return CalculationHistory(
        storage,
        id_factory=CounterIdFactory(),
        clock=lambda: "2026-01-01T00:00:00.000Z",
    )


@pytest.fixture
def result(base_input):
    return compute_rates(base_input)
