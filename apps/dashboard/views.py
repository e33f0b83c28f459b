from __future__ import annotations

import asyncio
import logging

import altair as alt
import pandas as pd
import streamlit as st

from apps.dashboard.formatting import format_currency, format_percent, format_shares
from apps.dashboard.sync import WriteSynchronizer
from core.domain.drafts import BalanceDraft, HoldingDraft
from core.domain.errors import DraftValidationError, OperationBusyError, WriteError
from core.domain.portfolio import PortfolioTotals

logger = logging.getLogger(__name__)

HOLDING_FORM_KEYS = {
    "name": "holding_draft_name",
    "symbol": "holding_draft_symbol",
    "shares": "holding_draft_shares",
    "average_cost": "holding_draft_average_cost",
    "current_price": "holding_draft_current_price",
}
BALANCE_FORM_KEY = "balance_draft_amount"


def render_summary(totals: PortfolioTotals) -> None:
    col1, col2 = st.columns(2)
    col1.metric("Total Value", format_currency(totals.total_value))
    col2.metric("Market Value", format_currency(totals.market_value))
    col3, col4 = st.columns(2)
    col3.metric("Cash", format_currency(totals.cash))
    col4.metric("Total P/L", format_currency(totals.total_pnl))
    if totals.balance_source == "computed":
        st.caption("No account balance reported; total value is the holdings' market value.")
    else:
        st.caption(f"Account balance from `{totals.balance_source}`.")


def render_allocation_chart(df: pd.DataFrame) -> None:
    st.subheader("Allocation")
    if df.empty or df["value"].abs().sum() <= 0:
        st.info("No holding value available for the allocation chart.")
        return

    chart = (
        alt.Chart(df)
        .mark_arc()
        .encode(
            theta=alt.Theta(field="weight", type="quantitative"),
            color=alt.Color(field="symbol", type="nominal"),
            tooltip=[
                alt.Tooltip(field="name", type="nominal"),
                alt.Tooltip(field="symbol", type="nominal"),
                alt.Tooltip(field="value", type="quantitative", format=",.2f"),
                alt.Tooltip(field="weight", type="quantitative", format=".2%"),
            ],
        )
    )
    st.altair_chart(chart, use_container_width=True)


def render_holdings(df: pd.DataFrame) -> None:
    st.subheader("Holdings")
    if df.empty:
        st.info("No holdings yet.")
        return

    styled = df.style.format(
        {
            "shares": format_shares,
            "avg": format_currency,
            "price": format_currency,
            "value": format_currency,
            "pnl": format_currency,
            "pnl_percent": format_percent,
            "weight": "{:.2%}",
        }
    )
    st.dataframe(styled, use_container_width=True, hide_index=True)


def _clear_keys(*keys: str) -> None:
    for key in keys:
        st.session_state.pop(key, None)


@st.dialog("Add holding")
def add_holding_dialog(synchronizer: WriteSynchronizer) -> None:
    with st.form("add_holding_form", clear_on_submit=False):
        name = st.text_input("Name", key=HOLDING_FORM_KEYS["name"])
        symbol = st.text_input("Symbol", key=HOLDING_FORM_KEYS["symbol"])
        shares = st.text_input("Shares", key=HOLDING_FORM_KEYS["shares"])
        average_cost = st.text_input("Average cost", key=HOLDING_FORM_KEYS["average_cost"])
        current_price = st.text_input("Current price (optional)", key=HOLDING_FORM_KEYS["current_price"])
        submitted = st.form_submit_button("Add")

    if st.button("Cancel"):
        _clear_keys(*HOLDING_FORM_KEYS.values())
        st.rerun()

    if not submitted:
        return

    draft = HoldingDraft(
        name=name,
        symbol=symbol,
        shares=shares,
        average_cost=average_cost,
        current_price=current_price,
    )
    with st.spinner("Saving holding..."):
        try:
            asyncio.run(synchronizer.add_holding(draft))
        except DraftValidationError as exc:
            logger.info("Holding draft rejected: %s", exc)
            st.warning(str(exc))
            return
        except OperationBusyError:
            st.info("A holding is already being saved.")
            return
        except WriteError as exc:
            st.error(f"Could not add holding: {exc}")
            return

    _clear_keys(*HOLDING_FORM_KEYS.values())
    st.rerun()


@st.dialog("Update balance")
def update_balance_dialog(synchronizer: WriteSynchronizer) -> None:
    with st.form("update_balance_form", clear_on_submit=False):
        amount = st.text_input("Account balance", key=BALANCE_FORM_KEY)
        submitted = st.form_submit_button("Save")

    if st.button("Cancel"):
        _clear_keys(BALANCE_FORM_KEY)
        st.rerun()

    if not submitted:
        return

    with st.spinner("Saving balance..."):
        try:
            asyncio.run(synchronizer.update_balance(BalanceDraft(amount=amount)))
        except DraftValidationError as exc:
            logger.info("Balance draft rejected: %s", exc)
            st.warning(str(exc))
            return
        except OperationBusyError:
            st.info("The balance is already being saved.")
            return
        except WriteError as exc:
            st.error(f"Could not update balance: {exc}")
            return

    _clear_keys(BALANCE_FORM_KEY)
    st.rerun()


def render_write_controls(synchronizer: WriteSynchronizer) -> None:
    # Submits block the script until write and reload finish; WriteSynchronizer refuses duplicates.
    st.sidebar.header("Edit Portfolio")
    if st.sidebar.button("Add holding"):
        add_holding_dialog(synchronizer)
    if st.sidebar.button("Update balance"):
        update_balance_dialog(synchronizer)
