# nyumba/services/dashboard.py
import calendar
import logging

from dateutil.relativedelta import relativedelta
from flask import current_app
from sqlalchemy import func

from ..errors import NotFoundError
from ..models import Property, Tenant, Payment
from .. import db
from .accounting import cumulative_arrears, prorate_enabled
from .billing import amount_for_month, billable_months, month_key, month_range, parse_month_key

logger = logging.getLogger(__name__)


def _occupancy_rate(occupied, total):
    return round(occupied / total * 100, 2) if total > 0 else 0.0


def _property_totals(prop, as_of):
    """Unit counts, expected monthly income and arrears across one property's categories."""
    total_units = 0
    occupied_units = 0
    expected_income = 0
    arrears = 0
    for cat in prop.categories:
        total_units += len(cat.units)
        for unit in cat.units:
            tenant = unit.current_tenant
            if tenant is None:
                continue
            occupied_units += 1
            expected_income += cat.rent
            arrears += cumulative_arrears(tenant, as_of)
    return {
        'total_units': total_units,
        'occupied_units': occupied_units,
        'expected_income': expected_income,
        'arrears': arrears,
    }


def income_for_months(keys):
    """Sum of payments credited to each month key."""
    if not keys:
        return {}
    rows = db.session.query(Payment.month_paid_for, func.sum(Payment.amount)) \
                     .filter(Payment.month_paid_for.in_(keys)) \
                     .group_by(Payment.month_paid_for) \
                     .all()
    totals = {key: 0 for key in keys}
    totals.update({key: int(total or 0) for key, total in rows})
    return totals


def dashboard_stats(as_of):
    """Portfolio-wide occupancy, income for the as_of month and outstanding arrears."""
    total_units = 0
    occupied_units = 0
    expected_income = 0
    total_arrears = 0
    for prop in Property.query.all():
        totals = _property_totals(prop, as_of)
        total_units += totals['total_units']
        occupied_units += totals['occupied_units']
        expected_income += totals['expected_income']
        total_arrears += totals['arrears']

    current_month = month_key(as_of)
    actual_income = income_for_months([current_month])[current_month]

    return {
        'occupancy_rate': _occupancy_rate(occupied_units, total_units),
        'total_units': total_units,
        'occupied_units': occupied_units,
        'vacant_units': total_units - occupied_units,
        'expected_income': expected_income,
        'actual_income': actual_income,
        'total_arrears': total_arrears,
        'month': current_month,
    }


def property_stats(property_id, as_of):
    prop = db.session.get(Property, property_id)
    if not prop:
        raise NotFoundError('Property not found')
    totals = _property_totals(prop, as_of)
    return {
        'occupancy_rate': _occupancy_rate(totals['occupied_units'], totals['total_units']),
        'total_units': totals['total_units'],
        'occupied_units': totals['occupied_units'],
        'expected_income': totals['expected_income'],
        'arrears': totals['arrears'],
    }


def property_summaries(as_of):
    summaries = []
    for prop in Property.query.order_by(Property.id).all():
        totals = _property_totals(prop, as_of)
        summaries.append({
            'id': prop.id,
            'name': prop.name,
            'occupancy_rate': _occupancy_rate(totals['occupied_units'], totals['total_units']),
            'total_arrears': totals['arrears'],
        })
    return summaries


def monthly_income_trend(as_of, months=None):
    """
    Expected vs. collected rent for the last ``months`` months ending at as_of.

    Expected rent for a month is what was billed to every tenancy (current or
    ended) covering that month; collected is the payments credited to it.
    """
    if months is None:
        months = current_app.config.get('INCOME_TREND_MONTHS', 6)
    if months < 1:
        return []
    first = as_of.replace(day=1) - relativedelta(months=months - 1)
    keys = month_range(first, as_of)
    prorate = prorate_enabled()

    expected = {key: 0 for key in keys}
    for tenant in Tenant.query.all():
        rent = tenant.unit.category.rent
        for key in billable_months(tenant.move_in_date, first, as_of, tenant.move_out_date):
            expected[key] += amount_for_month(rent, key, tenant.move_in_date, prorate)

    actual = income_for_months(keys)
    trend = []
    for key in keys:
        month_start = parse_month_key(key)
        trend.append({
            'month': key,
            'label': calendar.month_abbr[month_start.month],
            'expected': expected[key],
            'actual': actual[key],
        })
    logger.debug('Income trend for %d months ending %s computed', months, keys[-1])
    return trend
