# finance_tracker/aggregation.py
"""
Time-window filtering and summaries over already-fetched records.

Everything here is a pure function of (records, window, now). The backend's
/summary endpoint and the Streamlit dashboard both call `summarize`, so the
numbers on screen and in the API always agree.

Records are plain mappings as returned by the API: they need a `date`
(ISO string, date or datetime) and an `amount`.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

EPOCH = datetime(1970, 1, 1)

DateLike = Union[str, date, datetime]


class Window(Enum):
    ALL_TIME = "all_time"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_SIX_MONTHS = "last_six_months"
    THIS_YEAR = "this_year"


@dataclass(frozen=True)
class CustomRange:
    """Inclusive range; a missing start is the epoch, a missing end is now."""
    start: Optional[DateLike] = None
    end: Optional[DateLike] = None


TimeWindow = Union[Window, CustomRange]

WINDOW_LABELS = {
    Window.ALL_TIME: "All time",
    Window.THIS_WEEK: "This week",
    Window.THIS_MONTH: "This month",
    Window.LAST_SIX_MONTHS: "Last 6 months",
    Window.THIS_YEAR: "This year",
}


# ---------------- Dates ----------------
def to_datetime(value: DateLike) -> datetime:
    """Naive local datetime from an ISO string, date or datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _is_date_only(value: DateLike) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return len(str(value).strip()) == 10


def _midnight(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def months_back(dt: datetime, months: int) -> datetime:
    """Midnight on the first day of the month `months` calendar months before dt."""
    index = dt.year * 12 + (dt.month - 1) - months
    return datetime(index // 12, index % 12 + 1, 1)


def window_bounds(window: TimeWindow, now: datetime) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    (start, end) for a window; None means unbounded. All time has no
    bounds, the other named windows only have a start, so records
    dated after `now` still count. CustomRange is inclusive on both ends
    and a date-only end covers the whole day.
    """
    now = to_datetime(now)
    if isinstance(window, CustomRange):
        start = to_datetime(window.start) if window.start not in (None, "") else EPOCH
        if window.end in (None, ""):
            end = now
        elif _is_date_only(window.end):
            end = datetime.combine(to_datetime(window.end).date(), time.max)
        else:
            end = to_datetime(window.end)
        return start, end

    if window is Window.ALL_TIME:
        return None, None
    if window is Window.THIS_WEEK:
        # weekday(): Monday=0 .. Sunday=6
        days_since_sunday = (now.weekday() + 1) % 7
        return _midnight(now) - timedelta(days=days_since_sunday), None
    if window is Window.THIS_MONTH:
        return datetime(now.year, now.month, 1), None
    if window is Window.LAST_SIX_MONTHS:
        return months_back(now, 6), None
    if window is Window.THIS_YEAR:
        return datetime(now.year, 1, 1), None
    raise ValueError(f"Unknown window: {window!r}")


def parse_window(name: Optional[str], start: Optional[str] = None, end: Optional[str] = None) -> TimeWindow:
    """Window from its wire name; `custom` uses start/end."""
    name = (name or Window.ALL_TIME.value).strip().lower()
    if name == "custom":
        for bound in (start, end):
            if bound not in (None, ""):
                to_datetime(bound)  # raises ValueError when malformed
        return CustomRange(start or None, end or None)
    try:
        return Window(name)
    except ValueError:
        raise ValueError(f"Unknown window: {name}")


def filter_records(records: Iterable[Mapping], window: TimeWindow, now: datetime) -> List[Mapping]:
    start, end = window_bounds(window, now)
    kept = []
    for r in records:
        when = to_datetime(r["date"])
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        kept.append(r)
    return kept


# ---------------- Totals ----------------
def total(records: Iterable[Mapping]) -> float:
    return round(sum(float(r["amount"]) for r in records), 2)


def totals_by(records: Iterable[Mapping], key: str) -> Dict[str, float]:
    """Sum of amounts per value of `key`, largest first."""
    sums: Dict[str, float] = {}
    for r in records:
        label = r.get(key) or "Other"
        sums[label] = sums.get(label, 0.0) + float(r["amount"])
    return {k: round(v, 2) for k, v in sorted(sums.items(), key=lambda kv: (-kv[1], kv[0]))}


def net_worth(total_income: float, total_expenses: float, total_investments: float) -> float:
    return round(total_income - total_expenses - total_investments, 2)


# ---------------- Chart ----------------
@dataclass
class ChartSeries:
    labels: List[date] = field(default_factory=list)
    expenses: List[Tuple[date, float]] = field(default_factory=list)
    income: List[Tuple[date, float]] = field(default_factory=list)
    investments: List[Tuple[date, float]] = field(default_factory=list)

    def to_dict(self):
        def points(series):
            return [{"x": d.isoformat(), "y": y} for d, y in series]

        return {
            "labels": [d.isoformat() for d in self.labels],
            "expenses": points(self.expenses),
            "income": points(self.income),
            "investments": points(self.investments),
        }


def _points(records: Sequence[Mapping], sign: int) -> List[Tuple[date, float]]:
    pts = [(to_datetime(r["date"]), sign * float(r["amount"])) for r in records]
    pts.sort(key=lambda p: p[0])
    return [(when.date(), amount) for when, amount in pts]


def chart_series(expenses: Sequence[Mapping], incomes: Sequence[Mapping], investments: Sequence[Mapping]) -> ChartSeries:
    """One point per record; outflows negative, income positive."""
    exp_pts = _points(expenses, -1)
    inc_pts = _points(incomes, 1)
    inv_pts = _points(investments, -1)
    labels = sorted({d for d, _ in exp_pts} | {d for d, _ in inc_pts} | {d for d, _ in inv_pts})
    return ChartSeries(labels=labels, expenses=exp_pts, income=inc_pts, investments=inv_pts)


# ---------------- Summary ----------------
@dataclass
class FinancialSummary:
    window: str
    total_expenses: float
    total_income: float
    total_investments: float
    net_worth: float
    expenses_by_category: Dict[str, float]
    income_by_source: Dict[str, float]
    investments_by_type: Dict[str, float]
    chart: ChartSeries
    counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self):
        return {
            "window": self.window,
            "total_expenses": self.total_expenses,
            "total_income": self.total_income,
            "total_investments": self.total_investments,
            "net_worth": self.net_worth,
            "expenses_by_category": self.expenses_by_category,
            "income_by_source": self.income_by_source,
            "investments_by_type": self.investments_by_type,
            "chart": self.chart.to_dict(),
            "counts": self.counts,
        }


def window_name(window: TimeWindow) -> str:
    return "custom" if isinstance(window, CustomRange) else window.value


def summarize(expenses: Sequence[Mapping], incomes: Sequence[Mapping], investments: Sequence[Mapping],
              window: TimeWindow = Window.ALL_TIME, now: Optional[datetime] = None) -> FinancialSummary:
    now = now or datetime.now()
    exp = filter_records(expenses, window, now)
    inc = filter_records(incomes, window, now)
    inv = filter_records(investments, window, now)

    total_expenses = total(exp)
    total_income = total(inc)
    total_investments = total(inv)

    return FinancialSummary(
        window=window_name(window),
        total_expenses=total_expenses,
        total_income=total_income,
        total_investments=total_investments,
        net_worth=net_worth(total_income, total_expenses, total_investments),
        expenses_by_category=totals_by(exp, "category"),
        income_by_source=totals_by(inc, "source"),
        investments_by_type=totals_by(inv, "type"),
        chart=chart_series(exp, inc, inv),
        counts={"expenses": len(exp), "incomes": len(inc), "investments": len(inv)},
    )
