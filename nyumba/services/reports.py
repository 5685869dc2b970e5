# nyumba/services/reports.py
import logging

from ..models import Property
from .. import db
from .accounting import tenant_balance

logger = logging.getLogger(__name__)


def target_properties(property_id):
    """Resolve a report's property filter: an id, or 'all' for the whole portfolio."""
    if property_id == 'all':
        return Property.query.order_by(Property.id).all()
    prop = db.session.get(Property, property_id)
    return [prop] if prop else []


def _occupied_units(properties):
    for prop in properties:
        for cat in prop.categories:
            for unit in cat.units:
                tenant = unit.current_tenant
                if tenant is not None:
                    yield prop, cat, unit, tenant


def rent_roll_report(property_id, start_date, end_date):
    """
    Expected vs. paid rent for every current tenant over a period.
    Returns a list of dicts with keys: tenant_id, tenant_name, property_name,
    unit_number, monthly_rent, expected_rent, amount_paid, balance
    """
    report = []
    for prop, cat, unit, tenant in _occupied_units(target_properties(property_id)):
        bal = tenant_balance(tenant, start_date, end_date)
        report.append({
            'tenant_id': tenant.id,
            'tenant_name': tenant.name,
            'property_name': prop.name,
            'unit_number': unit.unit_number,
            'monthly_rent': cat.rent,
            'expected_rent': bal.billed,
            'amount_paid': bal.paid,
            'balance': bal.balance,
        })
    return report


def arrears_report(property_id, start_date, end_date):
    """Current tenants who owe rent for months inside the period."""
    report = []
    for prop, cat, unit, tenant in _occupied_units(target_properties(property_id)):
        bal = tenant_balance(tenant, start_date, end_date)
        if bal.billed == 0:
            logger.debug('Skipping tenant %s: nothing billed between %s and %s',
                         tenant.id, start_date, end_date)
            continue
        if bal.balance > 0:
            report.append({
                'tenant_id': tenant.id,
                'tenant_name': tenant.name,
                'property_name': prop.name,
                'unit_number': unit.unit_number,
                'total_billed': bal.billed,
                'total_paid': bal.paid,
                'arrears': bal.balance,
            })
    return report


def vacancy_report(property_id):
    report = []
    for prop in target_properties(property_id):
        for cat in prop.categories:
            for unit in cat.units:
                if not unit.is_occupied:
                    report.append({
                        'property_name': prop.name,
                        'unit_number': unit.unit_number,
                        'category_name': cat.name,
                        'monthly_rent': cat.rent,
                    })
    return report
