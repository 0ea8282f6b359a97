"""Dashboard aggregates computed from raw customer rows."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from mdm_console.core.utils import clean_text, parse_timestamp

UNSPECIFIED_COMPANY = "Unspecified"
GROWTH_MONTHS = 6


@dataclass(frozen=True)
class MonthlyPoint:
    """New and cumulative record counts for one calendar month."""

    label: str
    new: int
    total: int


@dataclass(frozen=True)
class DashboardStats:
    total: int
    new_last_month: int
    per_company: Dict[str, int] = field(default_factory=dict)
    monthly_growth: Tuple[MonthlyPoint, ...] = ()
    growth_rate: float = 0.0


def shift_months(day: date, months: int) -> date:
    """Move a date by whole calendar months, clamping the day to the month length."""

    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def growth_rate(new: int, total: int) -> float:
    """Percentage growth of the period against the records that existed before it.

    With no prior records the rate is reported as 100% when anything new
    arrived and 0% otherwise.
    """

    prior = total - new
    if prior <= 0:
        return 100.0 if new > 0 else 0.0
    return new / prior * 100


def _created_on(row: Mapping[str, Any]) -> Optional[date]:
    raw = row.get("created_at")
    stamp = raw if isinstance(raw, datetime) else parse_timestamp(raw)
    return stamp.date() if stamp else None


def compute_stats(rows: Iterable[Mapping[str, Any]], today: Optional[date] = None) -> DashboardStats:
    """Aggregate company and creation-date columns into dashboard figures."""

    today = today or date.today()
    window_start = shift_months(today, -1)
    first_month = shift_months(today.replace(day=1), -(GROWTH_MONTHS - 1))

    total = 0
    new_last_month = 0
    before_series = 0
    per_company: Dict[str, int] = {}
    per_month: Dict[Tuple[int, int], int] = {}

    for row in rows:
        total += 1
        company = clean_text(row.get("company")) or UNSPECIFIED_COMPANY
        per_company[company] = per_company.get(company, 0) + 1

        created = _created_on(row)
        if created is None:
            # Undated rows still count towards the totals.
            before_series += 1
            continue
        if created >= window_start:
            new_last_month += 1
        if created < first_month:
            before_series += 1
        else:
            key = (created.year, created.month)
            per_month[key] = per_month.get(key, 0) + 1

    series: List[MonthlyPoint] = []
    running = before_series
    for offset in range(GROWTH_MONTHS):
        month = shift_months(first_month, offset)
        new = per_month.get((month.year, month.month), 0)
        running += new
        series.append(MonthlyPoint(label=month.strftime("%b %Y"), new=new, total=running))

    ordered_companies = dict(sorted(per_company.items(), key=lambda item: (-item[1], item[0])))
    return DashboardStats(
        total=total,
        new_last_month=new_last_month,
        per_company=ordered_companies,
        monthly_growth=tuple(series),
        growth_rate=growth_rate(new_last_month, total),
    )
