# nyumba/services/accounting.py
import logging
from collections import namedtuple

from flask import current_app

from .billing import billable_months, billed_amount, months_billed

logger = logging.getLogger(__name__)

TenantBalance = namedtuple(
    'TenantBalance',
    ['tenant', 'unit', 'category', 'property', 'months', 'billed', 'paid', 'balance'],
)


def prorate_enabled():
    return bool(current_app.config.get('PRORATE_MOVE_IN_MONTH', False))


def tenant_balance(tenant, start, end, prorate=None):
    """
    Billed vs. paid rent for one tenancy over the months of [start, end].

    Only payments credited to a billed month count towards ``paid``; a
    negative balance is a credit.
    """
    if prorate is None:
        prorate = prorate_enabled()
    unit = tenant.unit
    category = unit.category
    months = billable_months(tenant.move_in_date, start, end, tenant.move_out_date)
    billed = billed_amount(category.rent, months, tenant.move_in_date, prorate)
    month_set = set(months)
    paid = sum(p.amount for p in tenant.payments if p.month_paid_for in month_set)
    return TenantBalance(
        tenant=tenant,
        unit=unit,
        category=category,
        property=category.property,
        months=months,
        billed=billed,
        paid=paid,
        balance=billed - paid,
    )


def cumulative_arrears(tenant, as_of, prorate=None):
    """Unpaid rent from move-in through the as_of month, never negative."""
    if months_billed(tenant.move_in_date, as_of) == 0:
        return 0
    balance = tenant_balance(tenant, tenant.move_in_date, as_of, prorate).balance
    return balance if balance > 0 else 0
