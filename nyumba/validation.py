# nyumba/validation.py
"""Field checks shared by the single and bulk request handlers."""
import re
from datetime import date

from .config import ValidationConfig
from .errors import ValidationError


def parse_date(value, field='date'):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid date format for {field}. Use YYYY-MM-DD')


def positive_int(value, field):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f'{field} must be a whole number')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')
    if number <= 0:
        raise ValidationError(f'{field} must be positive')
    return number


def required_text(data, field, max_length=None, pattern=None):
    value = data.get(field) if data else None
    if value is None or not str(value).strip():
        raise ValidationError(f'{field} is required')
    value = str(value).strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{field} max length is {max_length}')
    if pattern is not None and not re.match(pattern, value):
        raise ValidationError(f'{field} must match pattern {pattern}')
    return value


def property_fields(data, partial=False):
    fields = {}
    if not partial or 'name' in data:
        fields['name'] = required_text(data, 'name', ValidationConfig.PROPERTY_NAME_MAX_LENGTH,
                                       ValidationConfig.PROPERTY_NAME_REGEX)
    if 'location' in data:
        fields['location'] = str(data.get('location') or '').strip()
    elif not partial:
        fields['location'] = ''
    return fields


def category_fields(data, partial=False):
    fields = {}
    if not partial or 'name' in data:
        fields['name'] = required_text(data, 'name', ValidationConfig.CATEGORY_NAME_MAX_LENGTH)
    if not partial or 'rent' in data:
        fields['rent'] = positive_int(data.get('rent'), 'rent')
    return fields


def unit_number(data):
    return required_text(data, 'unit_number', ValidationConfig.UNIT_NUMBER_MAX_LENGTH,
                         ValidationConfig.UNIT_NUMBER_REGEX)


def tenant_fields(data):
    """Validate a tenant assignment payload: name, phone, email, move_in_date."""
    return {
        'name': required_text(data, 'name', ValidationConfig.TENANT_NAME_MAX_LENGTH,
                              ValidationConfig.TENANT_NAME_REGEX),
        'phone': required_text(data, 'phone', pattern=ValidationConfig.PHONE_REGEX),
        'email': required_text(data, 'email', pattern=ValidationConfig.EMAIL_REGEX),
        'move_in_date': parse_date(required_text(data, 'move_in_date'), 'move_in_date'),
    }
