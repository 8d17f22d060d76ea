"""Period boundaries, navigation, labels and season transition alerts."""

from datetime import date

import pytest

from logic.periods import (
    days_until_season_start,
    get_date_range,
    get_period_label,
    get_season_date_range,
    get_season_for_month,
    get_season_year,
    get_transition_alert,
    navigate_date,
)


def test_month_range_handles_leap_years() -> None:
    assert get_date_range("month", date(2026, 2, 10)).as_strings() == ("2026-02-01", "2026-02-28")
    assert get_date_range("month", date(2024, 2, 10)).as_strings() == ("2024-02-01", "2024-02-29")


def test_quarter_and_year_ranges() -> None:
    assert get_date_range("quarter", date(2026, 5, 17)).as_strings() == ("2026-04-01", "2026-06-30")
    assert get_date_range("quarter", date(2026, 12, 31)).as_strings() == ("2026-10-01", "2026-12-31")
    assert get_date_range("year", date(2026, 7, 4)).as_strings() == ("2026-01-01", "2026-12-31")


def test_season_ranges_wrap_winter_into_next_year() -> None:
    assert get_season_date_range("winter", 2025).as_strings() == ("2025-12-01", "2026-02-28")
    assert get_season_date_range("winter", 2023).as_strings() == ("2023-12-01", "2024-02-29")
    assert get_season_date_range("fall", 2026).as_strings() == ("2026-09-01", "2026-11-30")


def test_season_view_uses_the_winter_that_started_in_december() -> None:
    assert get_season_year(date(2026, 1, 20)) == 2025
    assert get_date_range("season", date(2026, 1, 20)).as_strings() == ("2025-12-01", "2026-02-28")


def test_unknown_view_and_month_are_rejected() -> None:
    with pytest.raises(ValueError):
        get_date_range("decade", date(2026, 1, 1))
    with pytest.raises(ValueError):
        get_season_for_month(13)


@pytest.mark.parametrize(
    "month, season",
    [(1, "winter"), (2, "winter"), (3, "spring"), (5, "spring"), (6, "summer"), (9, "fall"), (11, "fall"), (12, "winter")],
)
def test_season_for_month(month: int, season: str) -> None:
    assert get_season_for_month(month) == season


def test_navigation_moves_one_unit_and_clamps_day() -> None:
    assert navigate_date("month", date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert navigate_date("month", date(2026, 1, 15), -1) == date(2025, 12, 15)
    assert navigate_date("quarter", date(2026, 11, 5), 1) == date(2027, 2, 5)
    assert navigate_date("year", date(2024, 2, 29), 1) == date(2025, 2, 28)
    with pytest.raises(ValueError):
        navigate_date("month", date(2026, 1, 1), 2)


def test_period_labels() -> None:
    assert get_period_label("month", date(2026, 2, 1)) == "February 2026"
    assert get_period_label("quarter", date(2026, 8, 1)) == "Q3 2026"
    assert get_period_label("year", date(2026, 8, 1)) == "2026"


def test_days_until_season_start_wraps_to_next_year() -> None:
    assert days_until_season_start("spring", date(2026, 3, 1)) == 0
    assert days_until_season_start("spring", date(2026, 3, 2)) == 364


def test_transition_alert_window_boundaries() -> None:
    at_fourteen = get_transition_alert(date(2026, 2, 15))
    assert at_fourteen is not None
    assert "14 day" in at_fourteen
    assert "Spring" in at_fourteen

    assert get_transition_alert(date(2026, 2, 14)) is None

    at_one = get_transition_alert(date(2026, 2, 28))
    assert "1 day." in at_one
    assert "1 days" not in at_one


def test_transition_alert_on_start_day_names_that_season() -> None:
    alert = get_transition_alert(date(2026, 6, 1))
    assert alert is not None
    assert "Summer starts in 0 days" in alert
