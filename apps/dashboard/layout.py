from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

MOBILE_BREAKPOINT_PX = 768

# Rough single-column heights of the rendered sections, in CSS pixels.
HEADER_HEIGHT_PX = 160
SUMMARY_HEIGHT_PX = 120
CHART_HEIGHT_PX = 320
TABLE_ROW_HEIGHT_PX = 35


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


def decide_columns(viewport: Viewport, content_height: float, breakpoint: float = MOBILE_BREAKPOINT_PX) -> int:
    if viewport.width < breakpoint:
        return 1
    return 2 if content_height > viewport.height else 1


def estimate_content_height(
    row_count: int,
    *,
    loading: bool = False,
    header_height: float = HEADER_HEIGHT_PX,
    summary_height: float = SUMMARY_HEIGHT_PX,
    chart_height: float = CHART_HEIGHT_PX,
    row_height: float = TABLE_ROW_HEIGHT_PX,
) -> float:
    """Heuristic single-column page height for a holdings table of ``row_count`` rows.

    Streamlit gives the script no access to the rendered page, so this stands
    in for a post-paint measurement. The section heights are rough defaults
    and can be overridden per call.
    """
    if loading:
        return header_height
    table_height = (row_count + 1) * row_height if row_count else row_height
    chart = chart_height if row_count else 0
    return header_height + summary_height + chart + table_height


class DeferredSlot:
    """Holds at most one pending callback on the running event loop.

    Scheduling a new callback cancels the pending one, so only the latest
    request ever runs.
    """

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self.delay_seconds = delay_seconds
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_seconds, self._run, callback, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        callback(*args)


class LayoutAdvisor:
    """Chooses between one and two display columns.

    Wide viewports start at one column and switch to two once a deferred
    measurement shows the content overflowing the viewport height. Narrow
    viewports are pinned to one column without measuring.
    """

    def __init__(
        self,
        measure_content: Callable[[], float],
        *,
        breakpoint: float = MOBILE_BREAKPOINT_PX,
        delay_seconds: float = 0.0,
    ) -> None:
        self._measure_content = measure_content
        self.breakpoint = breakpoint
        self._slot = DeferredSlot(delay_seconds)
        self.columns = 1
        self.measurements = 0

    @property
    def measurement_pending(self) -> bool:
        return self._slot.pending

    def recompute(self, viewport: Viewport) -> None:
        """Call on viewport resize and whenever the holdings or loading state change."""
        if viewport.width < self.breakpoint:
            self._slot.cancel()
            self._set_columns(1)
            return

        self._set_columns(1)
        self._slot.schedule(self._measure, viewport)

    async def settled(self) -> int:
        while self._slot.pending:
            await asyncio.sleep(self._slot.delay_seconds)
        return self.columns

    def cancel(self) -> None:
        self._slot.cancel()

    def _measure(self, viewport: Viewport) -> None:
        self.measurements += 1
        content_height = self._measure_content()
        self._set_columns(decide_columns(viewport, content_height, self.breakpoint))
        logger.debug(
            "Measured content height %.0f against viewport %.0fx%.0f -> %s column(s)",
            content_height,
            viewport.width,
            viewport.height,
            self.columns,
        )

    def _set_columns(self, columns: int) -> None:
        if columns != self.columns:
            logger.debug("Layout switched to %s column(s)", columns)
        self.columns = columns
