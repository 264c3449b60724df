"""
Data models for the rate engine and calculation history.

Uses dataclasses for structured, type-safe data representation.
Serialized form keeps the camelCase keys of the persisted history snapshot.
"""
from dataclasses import dataclass, field, fields, asdict
from typing import Optional


EXPERIENCE_LEVELS = ('junior', 'mid', 'senior')
PROJECT_COMPLEXITIES = ('low', 'medium', 'high')

# python attribute → persisted key
_FIELD_KEYS = {
    'name': 'name',
    'experience_level': 'experienceLevel',
    'fixed_costs': 'fixedCosts',
    'weekly_hours': 'weeklyHours',
    'profit_margin': 'profitMargin',
    'vacation_weeks': 'vacationWeeks',
    'tax_rate': 'taxRate',
    'currency': 'currency',
    'project_duration': 'projectDuration',
    'project_complexity': 'projectComplexity',
    'risk_factor': 'riskFactor',
    'hourly_rate': 'hourlyRate',
    'daily_rate': 'dailyRate',
    'weekly_rate': 'weeklyRate',
    'monthly_rate': 'monthlyRate',
    'project_rate': 'projectRate',
    'id': 'id',
    'date': 'date',
}

_NUMERIC_FIELDS = {
    'fixed_costs', 'weekly_hours', 'profit_margin', 'vacation_weeks', 'tax_rate',
    'project_duration', 'risk_factor',
    'hourly_rate', 'daily_rate', 'weekly_rate', 'monthly_rate', 'project_rate',
}


def _to_record(obj) -> dict:
    """Serialize a model to its persisted dict, omitting unset optionals."""
    record = {}
    for key, value in asdict(obj).items():
        if value is None:
            continue
        record[_FIELD_KEYS[key]] = value
    return record


def _from_record(cls, record: dict) -> dict:
    """Pick the constructor kwargs for `cls` out of a persisted dict."""
    if not isinstance(record, dict):
        raise ValueError(f"Expected a mapping, got {type(record).__name__}")

    kwargs = {}
    for f in fields(cls):
        key = _FIELD_KEYS[f.name]
        if key not in record or record[key] is None:
            continue
        value = record[key]
        if f.name in _NUMERIC_FIELDS:
            if isinstance(value, bool):
                raise ValueError(f"Field '{key}' must be a number")
            value = float(value)
        else:
            value = str(value)
        kwargs[f.name] = value
    return kwargs


@dataclass
class TraceStep:
    """A single step in the rate derivation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class PricingInput:
    """Cost, effort and margin inputs for one rate calculation."""
    experience_level: str
    fixed_costs: float  # monthly
    weekly_hours: float
    profit_margin: float  # percent
    vacation_weeks: float
    tax_rate: float  # percent, strictly below 100
    currency: str = "USD"
    name: str = ""

    # Optional project pricing
    project_duration: Optional[float] = None  # days
    project_complexity: Optional[str] = None
    risk_factor: Optional[float] = None  # percent

    def to_dict(self) -> dict:
        return _to_record(self)

    @classmethod
    def from_dict(cls, record: dict) -> 'PricingInput':
        return cls(**_from_record(cls, record))


@dataclass(frozen=True)
class PricingResult(PricingInput):
    """A PricingInput together with the rates derived from it."""
    hourly_rate: float = 0.0
    daily_rate: float = 0.0
    weekly_rate: float = 0.0
    monthly_rate: float = 0.0
    project_rate: Optional[float] = None

    @property
    def inputs(self) -> PricingInput:
        """The input portion of this result."""
        return PricingInput(**{f.name: getattr(self, f.name) for f in fields(PricingInput)})

    @classmethod
    def from_dict(cls, record: dict) -> 'PricingResult':
        return cls(**_from_record(cls, record))


@dataclass(frozen=True)
class Calculation(PricingResult):
    """
    One entry of the calculation history.

    Created only by the history store; never mutated afterwards.
    """
    id: str = ""
    date: str = ""  # ISO-8601 creation timestamp

    @classmethod
    def from_result(cls, result: PricingResult, calculation_id: str, date: str) -> 'Calculation':
        """Wrap a result with its identifier and creation timestamp."""
        values = {f.name: getattr(result, f.name) for f in fields(PricingResult)}
        return cls(id=calculation_id, date=date, **values)

    @classmethod
    def from_dict(cls, record: dict) -> 'Calculation':
        kwargs = _from_record(cls, record)
        if not kwargs.get('id'):
            raise ValueError("Calculation record is missing 'id'")
        for required in ('experience_level', 'fixed_costs', 'weekly_hours', 'profit_margin',
                         'vacation_weeks', 'tax_rate'):
            if required not in kwargs:
                raise ValueError(f"Calculation record is missing '{_FIELD_KEYS[required]}'")
        return cls(**kwargs)


@dataclass
class ValidationResult:
    """Result of input validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str):
        self.warnings.append(warning)
