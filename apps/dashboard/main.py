from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import streamlit as st
from pydantic import ValidationError

from apps.dashboard.access import AccessGate
from apps.dashboard.aggregator import PortfolioAggregator
from apps.dashboard.api_client import PortfolioApiClient
from apps.dashboard.layout import LayoutAdvisor, Viewport, estimate_content_height
from apps.dashboard.settings import DashboardSettings, get_settings
from apps.dashboard.sync import LoadState, SnapshotStore, WriteSynchronizer
from apps.dashboard.transformers import holdings_to_frame
from apps.dashboard.views import (
    render_allocation_chart,
    render_holdings,
    render_summary,
    render_write_controls,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "dashboard_session"


@dataclass
class DashboardSession:
    """Per-browser-session collaborators, built on first render."""

    store: SnapshotStore
    synchronizer: WriteSynchronizer
    aggregator: PortfolioAggregator
    advisor: LayoutAdvisor
    gate: AccessGate
    content_height: float = 0.0
    last_refresh: datetime | None = None


def _configure_logging() -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _load_settings() -> DashboardSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        logger.exception("Failed to load dashboard settings")
        st.error("Invalid dashboard settings. Check .env or environment variables.")
        st.code(str(exc))
        st.stop()


def _request_host() -> str | None:
    return st.context.headers.get("host")


def _build_session(settings: DashboardSettings) -> DashboardSession:
    api = PortfolioApiClient.from_settings(settings)
    store = SnapshotStore(api)
    gate = AccessGate.evaluate(_request_host(), settings.local_dev_hosts)
    logger.info("Write controls %s for host %r", "enabled" if gate.writes_enabled else "hidden", gate.host)

    session: DashboardSession
    advisor = LayoutAdvisor(lambda: session.content_height, breakpoint=settings.mobile_breakpoint_px)
    session = DashboardSession(
        store=store,
        synchronizer=WriteSynchronizer(api, store),
        aggregator=PortfolioAggregator(),
        advisor=advisor,
        gate=gate,
    )
    return session


def _refresh(session: DashboardSession) -> LoadState:
    logger.info("Fetching portfolio snapshot")
    state = asyncio.run(session.store.refresh())
    session.last_refresh = datetime.now(UTC)
    return state


async def _settle_layout(advisor: LayoutAdvisor, viewport: Viewport) -> int:
    advisor.recompute(viewport)
    return await advisor.settled()


def _viewport(settings: DashboardSettings) -> Viewport:
    st.sidebar.header("Display")
    width = st.sidebar.number_input("Viewport width (px)", min_value=1, value=settings.viewport_width, step=10)
    height = st.sidebar.number_input("Viewport height (px)", min_value=1, value=settings.viewport_height, step=10)
    return Viewport(width=float(width), height=float(height))


def main() -> None:
    _configure_logging()
    st.set_page_config(page_title="Portfolio Dashboard", layout="wide")
    st.title("Portfolio Dashboard")

    settings = _load_settings()

    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = _build_session(settings)
        _refresh(st.session_state[SESSION_KEY])
    session: DashboardSession = st.session_state[SESSION_KEY]

    st.sidebar.text(f"API: {settings.api_base_url}")
    viewport = _viewport(settings)

    if session.gate.writes_enabled:
        render_write_controls(session.synchronizer)

    if st.button("Refresh portfolio"):
        _refresh(session)

    if session.last_refresh:
        st.caption(f"Last refresh: {session.last_refresh.isoformat()}")

    state = session.store.state
    if state.error:
        st.error(f"Could not load portfolio: {state.error}")
        st.caption("Reload the page to try again.")
        return
    if state.snapshot is None:
        st.info("Loading portfolio...")
        return

    view = session.aggregator(state.snapshot, settings.fallback_prices)
    session.content_height = estimate_content_height(len(view.holdings), loading=state.loading)
    columns = asyncio.run(_settle_layout(session.advisor, viewport))

    df = holdings_to_frame(view.holdings)
    if columns == 2:
        left, right = st.columns(2)
    else:
        left = right = st.container()

    with left:
        render_summary(view.totals)
        render_allocation_chart(df)
    with right:
        render_holdings(df)


if __name__ == "__main__":
    main()
