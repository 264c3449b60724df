"""
Rate Engine - turns cost/effort/margin inputs into freelance rates.

Derivation order:
1. Working weeks = 52 - vacation weeks
2. Yearly hours = weekly hours × working weeks
3. Base hourly rate = (monthly fixed costs × 12) / yearly hours
4. Apply profit margin and experience multiplier
5. Gross up for tax so the net after tax equals the target
6. Day / week / month rates from fixed 8h, 5-day, 4-week conventions
7. Optional project rate from daily rate × duration × complexity × risk

The engine is pure: no I/O, no rounding, no validation.
Callers validate first (see validation.validate_input) and round only for display.
"""
from dataclasses import fields
from typing import Optional

from .models import PricingInput, PricingResult, TraceStep


WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12
HOURS_PER_DAY = 8
DAYS_PER_WEEK = 5
WEEKS_PER_MONTH = 4

EXPERIENCE_MULTIPLIERS = {
    'junior': 1.0,
    'mid': 1.5,
    'senior': 2.0,
}

COMPLEXITY_MULTIPLIERS = {
    'low': 1.0,
    'medium': 1.2,
    'high': 1.5,
}


def experience_multiplier(level: str) -> float:
    """Multiplier for an experience tier; anything not junior/mid prices as senior."""
    return EXPERIENCE_MULTIPLIERS.get(level, EXPERIENCE_MULTIPLIERS['senior'])


def complexity_multiplier(complexity: Optional[str]) -> float:
    """Multiplier for a project complexity; anything not low/medium prices as high."""
    return COMPLEXITY_MULTIPLIERS.get(complexity, COMPLEXITY_MULTIPLIERS['high'])


def compute_rates_with_trace(pricing_input: PricingInput) -> tuple[PricingResult, list[TraceStep]]:
    """
    Compute rates and record every derivation step.

    Returns (result, trace_steps).
    """
    trace = []

    working_weeks = WEEKS_PER_YEAR - pricing_input.vacation_weeks
    trace.append(TraceStep("Working Weeks", f"{WEEKS_PER_YEAR} - {pricing_input.vacation_weeks:g} vacation weeks",
                           f"{working_weeks:g}"))

    total_yearly_hours = pricing_input.weekly_hours * working_weeks
    trace.append(TraceStep("Yearly Hours", f"{pricing_input.weekly_hours:g} h/week × {working_weeks:g} weeks",
                           f"{total_yearly_hours:g}"))

    exp_multiplier = experience_multiplier(pricing_input.experience_level)
    trace.append(TraceStep("Experience", f"{pricing_input.experience_level} multiplier", f"×{exp_multiplier:g}"))

    yearly_expenses = pricing_input.fixed_costs * MONTHS_PER_YEAR
    trace.append(TraceStep("Yearly Expenses", f"{pricing_input.fixed_costs:g}/month × {MONTHS_PER_YEAR}",
                           f"{yearly_expenses:g}"))

    base_hourly_rate = yearly_expenses / total_yearly_hours
    trace.append(TraceStep("Base Rate", "Yearly expenses / yearly hours", f"{base_hourly_rate:g}"))

    profit_multiplier = 1 + pricing_input.profit_margin / 100
    hourly_rate = base_hourly_rate * profit_multiplier * exp_multiplier
    trace.append(TraceStep("Margin", f"{pricing_input.profit_margin:g}% margin, ×{exp_multiplier:g} experience",
                           f"{hourly_rate:g}"))

    hourly_rate = hourly_rate / (1 - pricing_input.tax_rate / 100)
    trace.append(TraceStep("Tax", f"Grossed up for {pricing_input.tax_rate:g}% tax", f"{hourly_rate:g}"))

    daily_rate = hourly_rate * HOURS_PER_DAY
    weekly_rate = daily_rate * DAYS_PER_WEEK
    monthly_rate = weekly_rate * WEEKS_PER_MONTH
    trace.append(TraceStep("Period Rates",
                           f"{HOURS_PER_DAY}h day, {DAYS_PER_WEEK}-day week, {WEEKS_PER_MONTH}-week month",
                           f"{daily_rate:g} / {weekly_rate:g} / {monthly_rate:g}"))

    project_rate = None
    if pricing_input.project_duration is not None:
        cx_multiplier = complexity_multiplier(pricing_input.project_complexity)
        risk_multiplier = 1 + (pricing_input.risk_factor or 0) / 100
        project_rate = daily_rate * pricing_input.project_duration * cx_multiplier * risk_multiplier
        trace.append(TraceStep(
            "Project",
            f"{daily_rate:g} × {pricing_input.project_duration:g} days × {cx_multiplier:g} complexity × {risk_multiplier:g} risk",
            f"{project_rate:g}",
        ))
    else:
        trace.append(TraceStep("Project", "No project duration given"))

    values = {f.name: getattr(pricing_input, f.name) for f in fields(PricingInput)}
    result = PricingResult(
        hourly_rate=hourly_rate,
        daily_rate=daily_rate,
        weekly_rate=weekly_rate,
        monthly_rate=monthly_rate,
        project_rate=project_rate,
        **values,
    )
    return result, trace


def compute_rates(pricing_input: PricingInput) -> PricingResult:
    """
    Derive hourly, daily, weekly, monthly and (optionally) project rates.

    Args:
        pricing_input: Already-validated inputs (tax rate < 100, hours and working weeks > 0)

    Returns:
        PricingResult carrying the inputs and the unrounded rates
    """
    result, _ = compute_rates_with_trace(pricing_input)
    return result
