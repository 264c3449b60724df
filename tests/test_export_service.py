import io
from dataclasses import replace

import pandas as pd
import pytest

from freelance_rates.engine import compute_rates
from freelance_rates.services.export_service import (
    export_basename, calculations_to_dataframe, to_csv_bytes, to_excel_bytes, format_currency, EXPORT_COLUMNS,
)


def test_export_basename_uses_name(history, result):
    calc = history.add(result)
    assert export_basename(calc) == "Website-1"


def test_export_basename_falls_back_to_budget(history, base_input):
    calc = history.add(compute_rates(replace(base_input, name="")))
    assert export_basename(calc) == "budget-1"


def test_dataframe_has_one_row_per_calculation(history, base_input, project_input):
    history.add(compute_rates(base_input))
    history.add(compute_rates(project_input))

    df = calculations_to_dataframe(history.list())

    assert list(df.columns) == EXPORT_COLUMNS
    assert len(df) == 2
    assert df.iloc[0]['projectRate'] == pytest.approx(1681.875)
    assert pd.isna(df.iloc[1]['projectRate'])


def test_empty_history_exports_header_only():
    df = calculations_to_dataframe([])
    assert df.empty
    assert to_csv_bytes([]).decode('utf-8').strip() == ",".join(EXPORT_COLUMNS)


def test_csv_keeps_unrounded_rates(history, result):
    history.add(result)
    df = pd.read_csv(io.BytesIO(to_csv_bytes(history.list())))

    assert df.iloc[0]['hourlyRate'] == pytest.approx(15.234375)
    assert df.iloc[0]['id'] == 1


def test_excel_export_is_readable(history, result):
    history.add(result)
    df = pd.read_excel(io.BytesIO(to_excel_bytes(history.list())), sheet_name='History')

    assert len(df) == 1
    assert df.iloc[0]['monthlyRate'] == pytest.approx(2437.5)


@pytest.mark.parametrize("amount, currency, expected", [
    (15.234375, "USD", "$15.23"),
    (2437.5, "usd", "$2,437.50"),
    (1681.875, "EUR", "€1,681.88"),
    (1234567.891, "MXN", "MXN 1,234,567.89"),
    (None, "USD", "-"),
])
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected
