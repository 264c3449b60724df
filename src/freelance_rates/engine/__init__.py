"""Engine subpackage - rate derivation and input validation."""
from .pricing_engine import compute_rates, compute_rates_with_trace
from .models import PricingInput, PricingResult, Calculation, TraceStep, ValidationResult
from .validation import validate_input, build_input

__all__ = [
    'compute_rates', 'compute_rates_with_trace',
    'PricingInput', 'PricingResult', 'Calculation', 'TraceStep', 'ValidationResult',
    'validate_input', 'build_input',
]
