from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple
import enum
import logging
import math

from sqlalchemy import func
from sqlalchemy.orm import Session

from celltech.models.sale import Sale
from celltech.utils.references import parse_reference

logger = logging.getLogger(__name__)

# Ten years of daily buckets
MAX_WINDOW_DAYS = 3660


class WindowSelector(str, enum.Enum):
    """Which request parameter decided the window size."""
    DAYS = "days"
    CURRENT_YEAR = "current_year"
    CURRENT_MONTH = "current_month"
    CURRENT_WEEK = "current_week"
    DEFAULT = "default"


@dataclass
class WindowParams:
    """
    Raw window parameters as received on the query string.

    A calendar flag is set when its value is a positive number.
    """
    days: Optional[float] = None
    current_year: Optional[float] = None
    current_month: Optional[float] = None
    current_week: Optional[float] = None
    user_id: Optional[str] = None


@dataclass
class StatisticsWindow:
    """
    A trailing window of calendar days ending today.

    Sales match when ``date_sold >= start`` and, if ``seller_id`` is set,
    when they were made by that seller.
    """
    selector: WindowSelector
    size_in_days: int
    today: date
    start: datetime
    seller_id: Optional[int] = None

    def sale_filters(self) -> list:
        filters = [Sale.date_sold >= self.start]
        if self.seller_id is not None:
            filters.append(Sale.seller_id == self.seller_id)
        return filters

    def days(self) -> List[date]:
        """Every day of the window, today first."""
        return [self.today - timedelta(days=offset) for offset in range(self.size_in_days)]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _select_size(params: WindowParams, today: date) -> Tuple[WindowSelector, int]:
    # First matching clause wins
    if _is_positive(params.days):
        # A partial day still covers today
        return WindowSelector.DAYS, math.ceil(min(params.days, MAX_WINDOW_DAYS))
    if _is_positive(params.current_year):
        return WindowSelector.CURRENT_YEAR, today.timetuple().tm_yday
    if _is_positive(params.current_month):
        return WindowSelector.CURRENT_MONTH, today.day
    if _is_positive(params.current_week):
        # 0 = Sunday ... 6 = Saturday
        return WindowSelector.CURRENT_WEEK, (today.weekday() + 1) % 7
    return WindowSelector.DEFAULT, 1


def compute_window(params: WindowParams, today: Optional[date] = None) -> StatisticsWindow:
    """
    Derive the sales window from request parameters.

    Priority: ``days`` > ``currentYear`` > ``currentMonth`` > ``currentWeek``
    > one day. The start boundary is midnight (UTC) ``size_in_days`` days ago.

    Raises:
        InvalidReferenceError: If ``user_id`` is not a valid identifier
    """
    today = today or utc_today()
    selector, size = _select_size(params, today)

    seller_id = None
    if params.user_id:
        seller_id = parse_reference(params.user_id)

    start = datetime.combine(today - timedelta(days=size), time.min)
    return StatisticsWindow(
        selector=selector,
        size_in_days=size,
        today=today,
        start=start,
        seller_id=seller_id
    )


def merge_daily_totals(window: StatisticsWindow, totals: Dict[str, float]) -> List[dict]:
    """
    Left-join sparse per-day totals onto every day of the window.

    Days without sales get 0, so the series always has ``size_in_days``
    entries, today first.
    """
    return [
        {
            "date": day,
            "day": day.strftime("%A"),
            "total_amount_sold": totals.get(day.isoformat(), 0),
        }
        for day in window.days()
    ]


class StatisticsService:
    """Time-windowed sales statistics."""

    def __init__(self, db: Session):
        self.db = db

    def aggregate(self, window: StatisticsWindow) -> Dict[str, float]:
        """
        Sum ``total_amount`` per calendar day for sales inside the window.

        Returns:
            Sparse mapping of ``YYYY-MM-DD`` to the day's total; days
            without sales are absent
        """
        day = func.date(Sale.date_sold)
        rows = (
            self.db.query(day.label("day"), func.sum(Sale.total_amount).label("total"))
            .filter(*window.sale_filters())
            .group_by(day)
            .all()
        )
        # SQLite returns the day as text, PostgreSQL as a date
        return {str(row.day)[:10]: float(row.total) for row in rows}

    def daily_sales(
        self,
        params: WindowParams,
        today: Optional[date] = None
    ) -> Tuple[StatisticsWindow, List[dict]]:
        """
        Build the zero-filled daily sales series for the requested window.

        Returns:
            Tuple of (window, series)
        """
        window = compute_window(params, today)
        totals = self.aggregate(window)
        logger.debug(
            f"Sales statistics: {window.selector.value} window of {window.size_in_days} day(s), "
            f"{len(totals)} day(s) with sales"
        )
        return window, merge_daily_totals(window, totals)
