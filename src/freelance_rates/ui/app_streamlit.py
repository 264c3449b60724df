"""
Streamlit UI for the Freelance Rate Calculator.

Features:
- Calculator form in the sidebar (costs, hours, margin, tax, project)
- Latest result with derivation details
- History tab with per-entry detail, delete, clear and CSV/Excel export
- Display-currency conversion from live exchange rates
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from freelance_rates.engine import compute_rates_with_trace, validate_input, build_input
from freelance_rates.config.settings import get_settings
from freelance_rates.history import CalculationHistory, JsonFileStorage
from freelance_rates.services.exchange_rates import ExchangeRateProvider
from freelance_rates.services.export_service import (
    export_basename, format_currency, to_csv_bytes, to_excel_bytes,
)


st.set_page_config(
    page_title="Freelance Rate Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)

EXPERIENCE_LABELS = {"junior": "Junior", "mid": "Mid-level", "senior": "Senior"}
COMPLEXITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}


@st.cache_resource
def get_history():
    """One history instance shared by every session of this server."""
    settings = get_settings()
    return CalculationHistory(
        JsonFileStorage(settings.data_dir),
        key=settings.storage_key,
        capacity=settings.history_capacity,
    )


@st.cache_resource
def get_rates():
    """Exchange rates, fetched once per server process."""
    provider = ExchangeRateProvider.from_settings()
    provider.fetch()
    return provider


try:
    history = get_history()
    rates = get_rates()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def render_rates(calc, display_currency: str):
    """Metric grid for one calculation, converted to the display currency."""
    def shown(amount):
        return format_currency(rates.convert(amount, calc.currency, display_currency), display_currency)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Per Hour", shown(calc.hourly_rate))
    m2.metric("Per Day (8h)", shown(calc.daily_rate))
    m3.metric("Per Week (5d)", shown(calc.weekly_rate))
    m4.metric("Per Month (4w)", shown(calc.monthly_rate))

    if calc.project_rate is not None:
        st.metric(
            f"Project ({calc.project_duration:g} days, {COMPLEXITY_LABELS.get(calc.project_complexity, 'High')} complexity)",
            shown(calc.project_rate),
        )


# ============================================================================
# SIDEBAR: Calculator Form
# ============================================================================
with st.sidebar:
    st.header("🧮 Your Numbers")

    currencies = rates.currencies
    with st.form("calculator"):
        name = st.text_input("Budget Name", placeholder="e.g. Website redesign")
        fixed_costs = st.number_input("Monthly Fixed Costs", min_value=0.0, value=1000.0, step=50.0)
        weekly_hours = st.number_input("Weekly Hours", min_value=1.0, max_value=168.0, value=40.0, step=1.0)
        experience_level = st.selectbox(
            "Experience", options=list(EXPERIENCE_LABELS), index=1,
            format_func=lambda level: EXPERIENCE_LABELS[level],
        )
        currency = st.selectbox(
            "Currency", options=currencies,
            index=currencies.index("USD") if "USD" in currencies else 0,
        )
        profit_margin = st.slider("Profit Margin (%)", min_value=0, max_value=100, value=30)
        vacation_weeks = st.number_input("Vacation Weeks / Year", min_value=0, max_value=51, value=4, step=1)
        tax_rate = st.number_input("Tax Rate (%)", min_value=0.0, max_value=99.0, value=20.0, step=1.0)

        with st.expander("📁 Project Pricing", expanded=True):
            include_project = st.checkbox("Price a project", value=True)
            project_duration = st.number_input("Duration (days)", min_value=1, value=10, step=1)
            project_complexity = st.selectbox(
                "Complexity", options=list(COMPLEXITY_LABELS), index=1,
                format_func=lambda c: COMPLEXITY_LABELS[c],
            )
            risk_factor = st.slider("Risk Buffer (%)", min_value=0, max_value=100, value=15)

        submitted = st.form_submit_button("Calculate", type="primary", use_container_width=True)

    if submitted:
        form_data = {
            "name": name,
            "fixed_costs": fixed_costs,
            "weekly_hours": weekly_hours,
            "experience_level": experience_level,
            "profit_margin": profit_margin,
            "vacation_weeks": vacation_weeks,
            "tax_rate": tax_rate,
            "currency": currency,
            "project_duration": project_duration if include_project else None,
            "project_complexity": project_complexity if include_project else None,
            "risk_factor": risk_factor if include_project else None,
        }
        validation = validate_input(form_data)
        if not validation.valid:
            for error in validation.errors:
                st.error(error)
        else:
            result, _ = compute_rates_with_trace(build_input(form_data))
            history.add(result)
            for warning in validation.warnings:
                st.warning(warning)

    st.divider()
    if rates.rates:
        st.success(f"💱 **{len(rates.rates)} exchange rates loaded**")
    else:
        st.warning("⚠️ Exchange rates unavailable, showing amounts unconverted")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Freelance Rate Calculator")
st.caption(f"v1.0 | {len(history)}/{history.capacity} saved calculations | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["💰 Your Rates", "🕘 History"])


# ============================================================================
# TAB 1: LATEST RESULT
# ============================================================================
with tab1:
    latest = history.latest()
    if latest is None:
        st.info("Fill in the form to see your recommended rates.")
    else:
        col1, col2 = st.columns([3, 1])
        with col1:
            st.subheader(latest.name or "Your Rates")
            st.caption(f"{EXPERIENCE_LABELS.get(latest.experience_level, latest.experience_level)} | "
                       f"Created {latest.date[:19].replace('T', ' ')}")
        with col2:
            display_currency = st.selectbox(
                "Show in", options=currencies,
                index=currencies.index(latest.currency) if latest.currency in currencies else 0,
                key="latest_currency",
            )

        with st.container(border=True):
            render_rates(latest, display_currency)

        with st.expander("🔍 Calculation Details"):
            _, trace = compute_rates_with_trace(latest.inputs)
            for step in trace:
                if step.value:
                    st.caption(f"**{step.step}**: {step.description} = `{step.value}`")
                else:
                    st.caption(f"**{step.step}**: {step.description}")
            st.caption(f"Monthly fixed costs: {format_currency(latest.fixed_costs, latest.currency)} | "
                       f"Margin {latest.profit_margin:g}% | Tax {latest.tax_rate:g}% | "
                       f"{latest.vacation_weeks:g} vacation weeks")


# ============================================================================
# TAB 2: HISTORY
# ============================================================================
with tab2:
    calculations = history.list()
    if not calculations:
        st.info("No calculations yet.")
    else:
        st.dataframe(pd.DataFrame([{
            'Name': calc.name or "(unnamed)",
            'Date': calc.date[:19].replace('T', ' '),
            'Experience': EXPERIENCE_LABELS.get(calc.experience_level, calc.experience_level),
            'Per Hour': format_currency(calc.hourly_rate, calc.currency),
            'Per Day': format_currency(calc.daily_rate, calc.currency),
            'Project': format_currency(calc.project_rate, calc.currency),
        } for calc in calculations]), use_container_width=True, hide_index=True)

        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            st.download_button(
                "📥 CSV",
                data=to_csv_bytes(calculations),
                file_name="history.csv",
                mime="text/csv",
                use_container_width=True
            )
        with btn_col2:
            st.download_button(
                "📥 Excel",
                data=to_excel_bytes(calculations),
                file_name="history.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True
            )
        with btn_col3:
            if st.button("🗑️ Clear History", use_container_width=True):
                history.clear()
                st.rerun()

        st.divider()

        for calc in calculations:
            with st.expander(f"{calc.name or '(unnamed)'} | {calc.date[:10]} | "
                             f"{format_currency(calc.hourly_rate, calc.currency)}/h"):
                render_rates(calc, calc.currency)

                c1, c2 = st.columns(2)
                with c1:
                    st.download_button(
                        "📥 Download",
                        data=to_csv_bytes([calc]),
                        file_name=f"{export_basename(calc)}.csv",
                        mime="text/csv",
                        key=f"download_{calc.id}",
                        use_container_width=True
                    )
                with c2:
                    if st.button("🗑️ Delete", key=f"delete_{calc.id}", use_container_width=True):
                        history.remove(calc.id)
                        st.rerun()
