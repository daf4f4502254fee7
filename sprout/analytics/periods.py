"""
Calendar period helpers.

A period is a (month, year) pair covering the inclusive date range from
the first to the last calendar day of that month. Dates are stored as
YYYY-MM-DD strings, so string comparison orders them correctly.
"""

import calendar


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValueError(f"Year out of range: {year}")


def month_bounds(month: int, year: int) -> tuple[str, str]:
    """
    First and last date of a month as YYYY-MM-DD strings.
    
    Uses the real calendar length, so February has 29 days in leap years.
    """
    validate_period(month, year)
    last_day = calendar.monthrange(year, month)[1]
    return (
        f"{year:04d}-{month:02d}-01",
        f"{year:04d}-{month:02d}-{last_day:02d}",
    )


def previous_period(month: int, year: int) -> tuple[int, int]:
    validate_period(month, year)
    if month == 1:
        return 12, year - 1
    return month - 1, year


def trailing_periods(month: int, year: int, count: int) -> list[tuple[int, int]]:
    """The `count` periods ending at (month, year), oldest first."""
    if count < 1:
        raise ValueError(f"count must be positive, got {count}")
    periods = [(month, year)]
    while len(periods) < count:
        periods.append(previous_period(*periods[-1]))
    return list(reversed(periods))
