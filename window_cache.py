from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from config import get_settings
from metrics import CategoryAggregate, aggregate
from periods import DateRange, YearSpan, current_year, default_span, filter_by_range
from schemas import DateRangeOut

logger = logging.getLogger(__name__)

Fetcher = Callable[[int, int], Awaitable[DateRangeOut]]


@dataclass(frozen=True)
class FetchPlan:
    should_fetch: bool
    span: YearSpan


class WindowCache:
    """Year-granular cache of fetched days, widened on demand.

    The cached span only ever grows. Any growth refetches the whole span
    through ``fetch(from_year, to_year)``; sub-ranges inside the span are
    served from the cached payload and trimmed to the exact days requested.
    Bounds and payload are replaced together once a fetch returns, so a
    failed or cancelled fetch leaves the last good state in place.

    One cache instance allows one fetch at a time. A second caller waits for
    the first and then plans against whatever the first committed.
    """

    def __init__(
        self,
        fetch: Fetcher,
        *,
        this_year: Optional[int] = None,
        preview_days: int = 30,
    ) -> None:
        self._fetch = fetch
        self._this_year = this_year
        self.preview_days = preview_days
        self.fetched_from_year: Optional[int] = None
        self.fetched_to_year: Optional[int] = None
        self.cached_payload: Optional[DateRangeOut] = None
        self._lock = asyncio.Lock()

    @property
    def span(self) -> Optional[YearSpan]:
        if self.fetched_from_year is None or self.fetched_to_year is None:
            return None
        return YearSpan(self.fetched_from_year, self.fetched_to_year)

    def this_year(self) -> int:
        if self._this_year is not None:
            return self._this_year
        return current_year(get_settings().timezone)

    def plan(self, requested: Optional[YearSpan]) -> FetchPlan:
        span = self.span
        if span is None or self.cached_payload is None:
            return FetchPlan(True, requested or default_span(self.this_year()))
        if requested is None:
            return FetchPlan(False, span)
        widened = YearSpan(
            min(requested.from_year, span.from_year),
            max(requested.to_year, span.to_year),
        )
        return FetchPlan(widened != span, widened)

    async def ensure_window(self, requested: Optional[YearSpan] = None) -> FetchPlan:
        async with self._lock:
            plan = self.plan(requested)
            if not plan.should_fetch:
                return plan

            logger.info(
                f"window_fetch: from_year={plan.span.from_year} "
                f"to_year={plan.span.to_year}"
            )
            payload = await self._fetch(plan.span.from_year, plan.span.to_year)
            self.cached_payload = payload
            self.fetched_from_year = plan.span.from_year
            self.fetched_to_year = plan.span.to_year
            return plan

    async def load(self, date_range: Optional[DateRange] = None) -> DateRangeOut:
        await self.ensure_window(date_range.years if date_range else None)
        payload = self.cached_payload
        if payload is None:
            raise RuntimeError("Window cache has no payload after fetch")
        if date_range is None:
            days = payload.days[: self.preview_days]
        else:
            days = filter_by_range(payload.days, date_range.start, date_range.end)
        return DateRangeOut(days=days, categories=payload.categories)

    async def breakdown(
        self,
        date_range: Optional[DateRange] = None,
        selected_category_ids: Optional[Iterable[str]] = None,
    ) -> CategoryAggregate:
        data = await self.load(date_range)
        if selected_category_ids is None:
            selected_category_ids = [c.id for c in data.categories]
        return aggregate(data.days, data.categories, selected_category_ids)
