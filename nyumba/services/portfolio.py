# nyumba/services/portfolio.py
"""Create, update and delete properties, categories, units, tenancies and payments."""
import logging
from datetime import date

from ..config import ValidationConfig
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Landlord, Property, UnitCategory, Unit, Tenant, Payment
from .. import db
from ..validation import tenant_fields
from .billing import parse_month_key

logger = logging.getLogger(__name__)


def _get_or_404(model, obj_id, label):
    obj = db.session.get(model, obj_id)
    if not obj:
        raise NotFoundError(f'{label} not found')
    return obj


def get_property(property_id):
    return _get_or_404(Property, property_id, 'Property')


def get_category(category_id):
    return _get_or_404(UnitCategory, category_id, 'Unit category')


def get_unit(unit_id):
    return _get_or_404(Unit, unit_id, 'Unit')


def get_tenant(tenant_id):
    return _get_or_404(Tenant, tenant_id, 'Tenant')


# --- Properties ---

def _check_property_name(name, exclude_id=None):
    if not ValidationConfig.ENFORCE_UNIQUE_PROPERTY_NAME:
        return
    q = Property.query
    if ValidationConfig.ENFORCE_UNIQUE_PROPERTY_NAME_CASE_INSENSITIVE:
        q = q.filter(db.func.lower(Property.name) == name.lower())
    else:
        q = q.filter_by(name=name)
    if exclude_id is not None:
        q = q.filter(Property.id != exclude_id)
    if q.first():
        raise ConflictError('Property name must be unique')


def create_property(name, location='', landlord_id=None):
    _check_property_name(name)
    if landlord_id is not None:
        _get_or_404(Landlord, landlord_id, 'Landlord')
    prop = Property(name=name, location=location, landlord_id=landlord_id)
    db.session.add(prop)
    db.session.commit()
    return prop


def update_property(property_id, **fields):
    prop = get_property(property_id)
    if 'name' in fields:
        _check_property_name(fields['name'], exclude_id=prop.id)
        prop.name = fields['name']
    if 'location' in fields:
        prop.location = fields['location']
    db.session.commit()
    return prop


def delete_property(property_id):
    """Delete a property with its categories, units, tenants and payments."""
    prop = get_property(property_id)
    tenant_count = sum(len(unit.tenancies) for unit in prop.units)
    db.session.delete(prop)
    db.session.commit()
    logger.info('Deleted property %s with %d tenancies', property_id, tenant_count)


# --- Unit categories ---

def create_category(property_id, name, rent):
    prop = get_property(property_id)
    cat = UnitCategory(property=prop, name=name, rent=rent)
    db.session.add(cat)
    db.session.commit()
    return cat


def update_category(category_id, **fields):
    cat = get_category(category_id)
    if 'name' in fields:
        cat.name = fields['name']
    if 'rent' in fields:
        cat.rent = fields['rent']
    db.session.commit()
    return cat


def delete_category(category_id):
    cat = get_category(category_id)
    if cat.units:
        raise ConflictError('Cannot delete a category that contains units. '
                            'Please remove all units from the category first.')
    db.session.delete(cat)
    db.session.commit()


# --- Units ---

def _existing_unit_numbers(prop, exclude_id=None):
    return {u.unit_number.lower() for u in prop.units if u.id != exclude_id}


def create_unit(category_id, unit_number):
    cat = get_category(category_id)
    if unit_number.lower() in _existing_unit_numbers(cat.property):
        raise ConflictError(f'Unit {unit_number} already exists in {cat.property.name}')
    unit = Unit(category=cat, unit_number=unit_number)
    db.session.add(unit)
    db.session.commit()
    return unit


def create_bulk_units(category_id, prefix, start, end):
    """Create units prefix+start .. prefix+end in one category."""
    cat = get_category(category_id)
    if start > end:
        raise ValidationError('The starting number cannot be greater than the ending number.')
    if end - start + 1 > ValidationConfig.MAX_BULK_UNITS:
        raise ValidationError(f'You can create a maximum of {ValidationConfig.MAX_BULK_UNITS} units at a time.')
    numbers = [f'{prefix}{i}' for i in range(start, end + 1)]
    existing = _existing_unit_numbers(cat.property)
    clashes = [n for n in numbers if n.lower() in existing]
    if clashes:
        raise ConflictError(f'Units already exist: {", ".join(clashes)}')
    units = [Unit(category=cat, unit_number=n) for n in numbers]
    db.session.add_all(units)
    db.session.commit()
    logger.info('Created %d units in category %s', len(units), cat.id)
    return units


def update_unit(unit_id, unit_number):
    unit = get_unit(unit_id)
    if unit.is_occupied:
        raise ConflictError('Cannot edit an occupied unit.')
    if unit_number.lower() in _existing_unit_numbers(unit.property, exclude_id=unit.id):
        raise ConflictError(f'Unit {unit_number} already exists in {unit.property.name}')
    unit.unit_number = unit_number
    db.session.commit()
    return unit


def delete_unit(unit_id):
    unit = get_unit(unit_id)
    if unit.is_occupied:
        raise ConflictError('Cannot delete an occupied unit.')
    db.session.delete(unit)
    db.session.commit()


# --- Tenants ---

def list_tenants(property_id=None, include_former=False):
    q = Tenant.query
    if not include_former:
        q = q.filter(Tenant.move_out_date == None)
    tenants = q.order_by(Tenant.id).all()
    if property_id is not None:
        tenants = [t for t in tenants if t.property.id == property_id]
    return tenants


def _check_vacant(unit, move_in_date):
    if unit.is_occupied:
        raise ConflictError(f'Unit {unit.unit_number} is already occupied')
    # A new tenancy cannot start before the previous one ended
    for prior in unit.tenancies:
        if prior.move_out_date and prior.move_out_date > move_in_date:
            raise ConflictError(f'Unit {unit.unit_number} is already occupied on {move_in_date.isoformat()}')


def _new_tenant(unit, fields):
    _check_vacant(unit, fields['move_in_date'])
    tenant = Tenant(unit=unit, **fields)
    db.session.add(tenant)
    return tenant


def assign_tenant(unit_id, name, phone, email, move_in_date):
    unit = get_unit(unit_id)
    tenant = _new_tenant(unit, {'name': name, 'phone': phone, 'email': email,
                                'move_in_date': move_in_date})
    db.session.commit()
    logger.info('Assigned tenant %s to unit %s', tenant.id, unit.id)
    return tenant


def assign_multiple_tenants(category_id, rows):
    """
    Assign tenants to vacant units of one category from a list of rows
    ({unit_number, name, phone, email, move_in_date}). Invalid rows are
    reported and skipped; a unit can only be used once per batch.
    """
    cat = get_category(category_id)
    vacant = {u.unit_number.lower(): u for u in cat.units if not u.is_occupied}
    errors = []
    success = 0
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            errors.append(f'Row {index}: must be an object')
            continue
        number = str(row.get('unit_number') or '').strip()
        try:
            fields = tenant_fields(row)
        except ValidationError as exc:
            errors.append(f'Row {index} ({number}): {exc}')
            continue
        unit = vacant.pop(number.lower(), None)
        if unit is None:
            errors.append(f'Row {index}: Unit "{number}" is not vacant, does not exist '
                          f'in this category, or is already in this upload.')
            continue
        try:
            _new_tenant(unit, fields)
        except ConflictError as exc:
            errors.append(f'Row {index}: {exc}')
            continue
        success += 1
    db.session.commit()
    logger.info('Bulk assignment to category %s: %d assigned, %d failed', cat.id, success, len(errors))
    return {'success': success, 'failed': len(rows) - success, 'errors': errors}


def unassign_tenant(tenant_id, move_out_date=None):
    """End a tenancy. The tenant record and its payments are kept."""
    tenant = get_tenant(tenant_id)
    if not tenant.is_current:
        raise ConflictError('Tenant has already moved out')
    move_out_date = move_out_date or date.today()
    if move_out_date < tenant.move_in_date:
        raise ValidationError('Move-out date must be on or after move-in date.')
    tenant.move_out_date = move_out_date
    db.session.commit()
    logger.info('Tenant %s moved out of unit %s on %s', tenant.id, tenant.unit_id, move_out_date)
    return tenant


# --- Payments ---

def payments_for_tenant(tenant_id):
    """Payment history, newest first."""
    tenant = get_tenant(tenant_id)
    return sorted(tenant.payments, key=lambda p: (p.payment_date, p.id), reverse=True)


def record_payment(tenant_id, amount, payment_date, month_paid_for):
    tenant = get_tenant(tenant_id)
    parse_month_key(month_paid_for)
    payment = Payment(tenant=tenant, amount=amount, payment_date=payment_date,
                      month_paid_for=month_paid_for)
    db.session.add(payment)
    db.session.commit()
    logger.info('Recorded payment of %s from tenant %s for %s', amount, tenant.id, month_paid_for)
    return payment
