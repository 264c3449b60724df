"""
Input validation for the rate engine.

The engine divides by (1 - tax/100) and by yearly hours, so out-of-range
inputs must be rejected here, before compute_rates is ever called.
"""
import math
from typing import Any, Optional

from .models import PricingInput, ValidationResult, EXPERIENCE_LEVELS, PROJECT_COMPLEXITIES


MAX_WEEKLY_HOURS = 168
MAX_VACATION_WEEKS = 51
LONG_WEEK_HOURS = 60


def _number(value: Any) -> Optional[float]:
    """Coerce form/API input to a finite float, or None if it isn't one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace('%', '')
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _check_range(result: ValidationResult, label: str, value: Optional[float],
                 low: float, high: Optional[float] = None, high_inclusive: bool = True) -> Optional[float]:
    if value is None:
        result.add_error(f"{label} is required and must be a number")
        return None
    if value < low:
        result.add_error(f"{label} must be at least {low:g}")
    elif high is not None and high_inclusive and value > high:
        result.add_error(f"{label} cannot exceed {high:g}")
    elif high is not None and not high_inclusive and value >= high:
        result.add_error(f"{label} must be below {high:g}")
    return value


def validate_input(data: dict) -> ValidationResult:
    """
    Validate raw calculator input (snake_case keys) before building a PricingInput.

    Errors block the calculation; warnings are informational.
    """
    result = ValidationResult(valid=True)

    if data.get('experience_level') not in EXPERIENCE_LEVELS:
        result.add_error(f"Experience level must be one of: {', '.join(EXPERIENCE_LEVELS)}")

    _check_range(result, "Fixed costs", _number(data.get('fixed_costs')), 0)
    weekly_hours = _check_range(result, "Weekly hours", _number(data.get('weekly_hours')), 1, MAX_WEEKLY_HOURS)
    profit_margin = _check_range(result, "Profit margin", _number(data.get('profit_margin')), 0, 100)
    _check_range(result, "Vacation weeks", _number(data.get('vacation_weeks')), 0, MAX_VACATION_WEEKS)
    _check_range(result, "Tax rate", _number(data.get('tax_rate')), 0, 100, high_inclusive=False)

    currency = data.get('currency')
    if not currency or not str(currency).strip():
        result.add_error("Currency is required")

    # Optional project fields
    if data.get('project_duration') not in (None, ''):
        _check_range(result, "Project duration", _number(data.get('project_duration')), 1)

    complexity = data.get('project_complexity')
    if complexity not in (None, '') and complexity not in PROJECT_COMPLEXITIES:
        result.add_error(f"Project complexity must be one of: {', '.join(PROJECT_COMPLEXITIES)}")

    if data.get('risk_factor') not in (None, ''):
        _check_range(result, "Risk factor", _number(data.get('risk_factor')), 0, 100)

    # Warnings
    if weekly_hours is not None and weekly_hours > LONG_WEEK_HOURS:
        result.add_warning(f"{weekly_hours:g} hours per week is above {LONG_WEEK_HOURS}; check the figure")
    if profit_margin == 0:
        result.add_warning("Profit margin is 0%; rates will only cover costs and tax")

    return result


def build_input(data: dict) -> PricingInput:
    """
    Build a PricingInput from raw calculator input.

    Raises:
        ValueError: if validate_input reports errors
    """
    validation = validate_input(data)
    if not validation.valid:
        raise ValueError("; ".join(validation.errors))

    def optional_number(key: str) -> Optional[float]:
        if data.get(key) in (None, ''):
            return None
        return _number(data.get(key))

    return PricingInput(
        experience_level=data['experience_level'],
        fixed_costs=_number(data['fixed_costs']),
        weekly_hours=_number(data['weekly_hours']),
        profit_margin=_number(data['profit_margin']),
        vacation_weeks=_number(data['vacation_weeks']),
        tax_rate=_number(data['tax_rate']),
        currency=str(data['currency']).strip().upper(),
        name=str(data.get('name') or '').strip(),
        project_duration=optional_number('project_duration'),
        project_complexity=data.get('project_complexity') or None,
        risk_factor=optional_number('risk_factor'),
    )
