"""Tests for window derivation, per-day aggregation and the zero-filled merge."""
from datetime import date, datetime

import pytest

from celltech.models.sale import Sale
from celltech.services.errors import InvalidReferenceError
from celltech.services.statistics_service import (
    MAX_WINDOW_DAYS,
    StatisticsService,
    WindowParams,
    WindowSelector,
    compute_window,
    merge_daily_totals
)

WEDNESDAY = date(2024, 3, 13)
SUNDAY = date(2024, 3, 10)


def test_days_take_priority_over_flags():
    window = compute_window(
        WindowParams(days=5, current_year=1, current_month=1, current_week=1),
        today=WEDNESDAY
    )
    
    assert window.selector == WindowSelector.DAYS
    assert window.size_in_days == 5


@pytest.mark.parametrize("params, selector, size", [
    (WindowParams(current_year=1, current_month=1), WindowSelector.CURRENT_YEAR, 73),
    (WindowParams(current_month=1, current_week=1), WindowSelector.CURRENT_MONTH, 13),
    (WindowParams(current_week=1), WindowSelector.CURRENT_WEEK, 3),
    (WindowParams(), WindowSelector.DEFAULT, 1),
    (WindowParams(days=0, current_month=1), WindowSelector.CURRENT_MONTH, 13),
    (WindowParams(days=-2), WindowSelector.DEFAULT, 1),
    (WindowParams(days=0.5), WindowSelector.DAYS, 1),
    (WindowParams(days=2.7), WindowSelector.DAYS, 3),
    (WindowParams(days=float("inf")), WindowSelector.DAYS, MAX_WINDOW_DAYS),
    (WindowParams(current_month=2), WindowSelector.CURRENT_MONTH, 13),
    (WindowParams(current_year=-1, current_month=0, current_week=0.5), WindowSelector.CURRENT_WEEK, 3),
    (WindowParams(days=float("nan"), current_week=-3), WindowSelector.DEFAULT, 1),
])
def test_window_priority_chain(params, selector, size):
    window = compute_window(params, today=WEDNESDAY)
    
    assert window.selector == selector
    assert window.size_in_days == size


def test_current_week_counts_from_sunday():
    assert compute_window(WindowParams(current_week=1), today=SUNDAY).size_in_days == 0
    assert compute_window(WindowParams(current_week=1), today=date(2024, 3, 16)).size_in_days == 6


def test_window_start_is_midnight_n_days_ago():
    window = compute_window(WindowParams(days=5), today=WEDNESDAY)
    
    assert window.start == datetime(2024, 3, 8, 0, 0)


def test_window_seller_filter():
    window = compute_window(WindowParams(user_id="7"), today=WEDNESDAY)
    
    assert window.seller_id == 7
    assert len(window.sale_filters()) == 2


def test_window_rejects_malformed_user_id():
    with pytest.raises(InvalidReferenceError):
        compute_window(WindowParams(user_id="64f0c2abc"), today=WEDNESDAY)


def test_merge_fills_every_day():
    window = compute_window(WindowParams(days=4), today=WEDNESDAY)
    
    series = merge_daily_totals(window, {"2024-03-12": 150.0, "2024-03-11": 75.0})
    
    assert [entry["date"] for entry in series] == [
        date(2024, 3, 13), date(2024, 3, 12), date(2024, 3, 11), date(2024, 3, 10)
    ]
    assert [entry["total_amount_sold"] for entry in series] == [0, 150.0, 75.0, 0]
    assert series[0]["day"] == "Wednesday"


def test_merge_empty_window():
    window = compute_window(WindowParams(current_week=1), today=SUNDAY)
    
    assert merge_daily_totals(window, {"2024-03-10": 10.0}) == []


def add_sale(db_session, seller, amount, date_sold):
    db_session.add(Sale(
        product_id=None,
        seller_id=seller.id,
        quantity_sold=1,
        total_amount=amount,
        date_sold=date_sold
    ))
    db_session.commit()


def test_aggregate_groups_by_day(db_session, seller):
    add_sale(db_session, seller, 100.0, datetime(2024, 3, 12, 9, 0))
    add_sale(db_session, seller, 50.0, datetime(2024, 3, 12, 23, 59))
    add_sale(db_session, seller, 75.0, datetime(2024, 3, 11, 0, 0))
    add_sale(db_session, seller, 999.0, datetime(2024, 3, 9, 23, 59))  # before the window
    
    window = compute_window(WindowParams(days=3), today=WEDNESDAY)
    totals = StatisticsService(db_session).aggregate(window)
    
    assert totals == {"2024-03-12": 150.0, "2024-03-11": 75.0}


def test_aggregate_includes_window_start_day(db_session, seller):
    """The filter starts at midnight size days ago; the merge keeps only size days."""
    add_sale(db_session, seller, 20.0, datetime(2024, 3, 10, 0, 0))
    
    window = compute_window(WindowParams(days=3), today=WEDNESDAY)
    totals = StatisticsService(db_session).aggregate(window)
    
    assert totals == {"2024-03-10": 20.0}
    assert all(entry["total_amount_sold"] == 0 for entry in merge_daily_totals(window, totals))


def test_daily_sales_series(db_session, seller):
    add_sale(db_session, seller, 150.0, datetime(2024, 3, 12, 10, 0))
    add_sale(db_session, seller, 75.0, datetime(2024, 3, 11, 10, 0))
    
    window, series = StatisticsService(db_session).daily_sales(WindowParams(days=3), today=WEDNESDAY)
    
    assert window.size_in_days == 3
    assert [(entry["date"].isoformat(), entry["total_amount_sold"]) for entry in series] == [
        ("2024-03-13", 0),
        ("2024-03-12", 150.0),
        ("2024-03-11", 75.0),
    ]
