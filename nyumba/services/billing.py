# nyumba/services/billing.py
"""
Calendar month arithmetic for rent billing.

Rent is billed once per calendar month. A tenant is billed for every month
from the month they moved in, and a payment is credited to the month named in
its ``month_paid_for`` key ("YYYY-MM"). Nothing here touches the database.
"""
import calendar
import re
from datetime import date

from dateutil.relativedelta import relativedelta

from ..errors import ValidationError

MONTH_KEY_RE = re.compile(r'^(\d{4})-(0[1-9]|1[0-2])$')


def month_key(d):
    return f"{d.year:04d}-{d.month:02d}"


def parse_month_key(key):
    """Return the first day of the month named by a YYYY-MM key."""
    match = MONTH_KEY_RE.match(key or '')
    if not match:
        raise ValidationError(f'Invalid month "{key}". Use YYYY-MM')
    return date(int(match.group(1)), int(match.group(2)), 1)


def month_range(start, end):
    """Month keys from the month of start to the month of end, inclusive."""
    cursor = start.replace(day=1)
    last = end.replace(day=1)
    months = []
    while cursor <= last:
        months.append(month_key(cursor))
        cursor += relativedelta(months=1)
    return months


def months_billed(move_in, as_of):
    """Number of whole billing months from the move-in month through as_of."""
    if as_of < move_in:
        return 0
    delta = relativedelta(as_of.replace(day=1), move_in.replace(day=1))
    return delta.years * 12 + delta.months + 1


def billable_months(move_in, start, end, move_out=None):
    """
    Month keys within [month(start), month(end)] the tenant is billed for.

    A month is billed when it is not before the move-in month and, for a
    tenant who has moved out, it begins before the move-out date.
    """
    first_billed = move_in.replace(day=1)
    months = []
    for key in month_range(start, end):
        month_start = parse_month_key(key)
        if month_start < first_billed:
            continue
        if move_out is not None and month_start >= move_out:
            break
        months.append(key)
    return months


def amount_for_month(rent, key, move_in, prorate=False):
    """Rent billed for one month; the move-in month may be pro-rated by days remaining."""
    if not prorate or key != month_key(move_in):
        return rent
    days_in_month = calendar.monthrange(move_in.year, move_in.month)[1]
    days_remaining = days_in_month - move_in.day + 1
    return int(round(rent * days_remaining / days_in_month))


def billed_amount(rent, months, move_in, prorate=False):
    return sum(amount_for_month(rent, key, move_in, prorate) for key in months)
