"""Date manipulation utilities"""

from datetime import date, timedelta


def monday_on_or_before(day: date) -> date:
    """Return the Monday of the week containing `day` (weeks run Monday to Sunday)"""
    return day - timedelta(days=day.weekday())


def add_days(from_date: date, days: int) -> date:
    """Add calendar days to a date"""
    return from_date + timedelta(days=days)


def format_short_date(day: date) -> str:
    """Format as dd/mm/yy for installment labels"""
    return day.strftime("%d/%m/%y")
