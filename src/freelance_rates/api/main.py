"""
HTTP API for the rate calculator.

The history store and exchange-rate provider are built once per app
(create_app) and reached through request.app.state.
"""
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config.settings import Settings, get_settings
from ..engine import compute_rates, compute_rates_with_trace, validate_input, build_input
from ..history import CalculationHistory, JsonFileStorage
from ..logging_utils import get_logger
from ..services.exchange_rates import ExchangeRateProvider
from .history_api import router as history_router, get_history

logger = get_logger(__name__)


class CalcRequest(BaseModel):
    """Calculator form input."""
    name: str = ""
    experience_level: Literal["junior", "mid", "senior"] = "mid"
    fixed_costs: float = Field(ge=0)
    weekly_hours: float = Field(ge=1, le=168)
    profit_margin: float = Field(ge=0, le=100)
    vacation_weeks: float = Field(ge=0, le=51)
    tax_rate: float = Field(ge=0, lt=100)
    currency: str = Field(default="USD", min_length=1)
    project_duration: Optional[float] = Field(default=None, ge=1)
    project_complexity: Literal["low", "medium", "high"] = "medium"
    risk_factor: Optional[float] = Field(default=None, ge=0, le=100)


def get_rates(request: Request) -> ExchangeRateProvider:
    return request.app.state.rates


def _prepare(req: CalcRequest):
    """Validate and build the engine input; 400 with the field errors on failure."""
    data = req.model_dump()
    validation = validate_input(data)
    if not validation.valid:
        raise HTTPException(status_code=400, detail={"errors": validation.errors})
    return build_input(data), validation.warnings


def create_app(
    settings: Optional[Settings] = None,
    history: Optional[CalculationHistory] = None,
    rates: Optional[ExchangeRateProvider] = None,
) -> FastAPI:
    """Build the API with its own history store and rate provider."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Freelance Rates API",
        description="Rate calculator and calculation history",
        version="1.0.0"
    )

    # Enable CORS for frontend development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if history is None:
        history = CalculationHistory(
            JsonFileStorage(settings.data_dir),
            key=settings.storage_key,
            capacity=settings.history_capacity,
        )
    if rates is None:
        rates = ExchangeRateProvider.from_settings(settings)

    app.state.history = history
    app.state.rates = rates

    app.include_router(history_router)

    @app.get("/")
    async def root():
        return {"status": "online", "message": "Freelance Rates API Active"}

    @app.post("/calculate")
    async def calculate(req: CalcRequest, history: CalculationHistory = Depends(get_history)):
        """Compute rates and record them as the newest calculation."""
        pricing_input, warnings = _prepare(req)
        calculation = history.add(compute_rates(pricing_input))
        logger.info("Calculation recorded", extra={"context": {
            "id": calculation.id,
            "currency": calculation.currency,
            "hourly_rate": calculation.hourly_rate,
        }})
        return {"calculation": calculation.to_dict(), "warnings": warnings}

    @app.post("/preview")
    async def preview(req: CalcRequest):
        """Compute rates with the derivation trace, without touching the history."""
        pricing_input, warnings = _prepare(req)
        result, trace = compute_rates_with_trace(pricing_input)
        return {
            "result": result.to_dict(),
            "trace": [asdict(step) for step in trace],
            "warnings": warnings,
        }

    @app.get("/currencies")
    async def currencies(rates: ExchangeRateProvider = Depends(get_rates)):
        return {"base": rates.base_currency, "currencies": rates.currencies, "live": bool(rates.rates)}

    @app.get("/convert")
    async def convert(amount: float, from_currency: str, to_currency: str,
                      rates: ExchangeRateProvider = Depends(get_rates)):
        return {
            "amount": amount,
            "from_currency": from_currency,
            "to_currency": to_currency,
            "converted": rates.convert(amount, from_currency.upper(), to_currency.upper()),
        }

    return app
