"""
Export Service - history downloads, file names and display formatting.

Image/PDF rendering of a calculation is done by the UI layer; this module
only supplies the file basename and tabular exports.
"""
import io
from typing import Iterable, Optional

import pandas as pd

from ..engine.models import Calculation


EXPORT_COLUMNS = [
    'id', 'date', 'name', 'currency', 'experienceLevel',
    'fixedCosts', 'weeklyHours', 'profitMargin', 'vacationWeeks', 'taxRate',
    'projectDuration', 'projectComplexity', 'riskFactor',
    'hourlyRate', 'dailyRate', 'weeklyRate', 'monthlyRate', 'projectRate',
]

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
}


def export_basename(calculation: Calculation) -> str:
    """File name (no extension) for exporting a single calculation."""
    return f"{calculation.name or 'budget'}-{calculation.id}"


def calculations_to_dataframe(calculations: Iterable[Calculation]) -> pd.DataFrame:
    """One row per calculation, in history order."""
    rows = [calc.to_dict() for calc in calculations]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def to_csv_bytes(calculations: Iterable[Calculation]) -> bytes:
    return calculations_to_dataframe(calculations).to_csv(index=False).encode('utf-8')


def to_excel_bytes(calculations: Iterable[Calculation], sheet_name: str = 'History') -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        calculations_to_dataframe(calculations).to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def format_currency(amount: Optional[float], currency: str) -> str:
    """
    Display form of an amount: rounded to cents, thousands separators.

    Rounding happens here and nowhere in the engine.
    """
    if amount is None:
        return "-"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{amount:,.2f}"
    return f"{currency.upper()} {amount:,.2f}"
