from flask import Blueprint, request, jsonify
from ..services import portfolio
from ..validation import category_fields, unit_number

units_bp = Blueprint('units', __name__)

# --- Unit categories ---

@units_bp.route('/categories/<int:id>', methods=['PATCH'])
def update_category(id):
    data = request.get_json(silent=True) or {}
    fields = category_fields(data, partial=True)
    if not fields:
        return jsonify({'error': 'Nothing to update: provide name or rent'}), 400
    cat = portfolio.update_category(id, **fields)
    return jsonify(cat.to_dict()), 200

@units_bp.route('/categories/<int:id>', methods=['DELETE'])
def delete_category(id):
    portfolio.delete_category(id)
    return jsonify({'message': 'Unit category deleted'}), 200

# --- Units ---

@units_bp.route('/categories/<int:id>/units', methods=['POST'])
def create_unit(id):
    data = request.get_json(silent=True) or {}
    unit = portfolio.create_unit(id, unit_number(data))
    return jsonify(unit.to_dict()), 201

@units_bp.route('/categories/<int:id>/units/bulk', methods=['POST'])
def create_bulk_units(id):
    """
    Create a run of units. Expected JSON: { "prefix": "A", "start": 1, "end": 10 }
    creates A1 .. A10.
    """
    data = request.get_json(silent=True) or {}
    if 'start' not in data or 'end' not in data:
        return jsonify({'error': 'start and end are required'}), 400
    prefix = str(data.get('prefix') or '').strip()
    try:
        start = int(data['start'])
        end = int(data['end'])
    except (TypeError, ValueError):
        return jsonify({'error': 'Start and end numbers must be valid integers.'}), 400
    if start < 0:
        return jsonify({'error': 'start must not be negative'}), 400
    # Validate the longest generated number against the unit number rules
    unit_number({'unit_number': f'{prefix}{max(start, end)}'})
    units = portfolio.create_bulk_units(id, prefix, start, end)
    return jsonify([u.to_dict() for u in units]), 201

@units_bp.route('/units/<int:id>', methods=['GET'])
def get_unit(id):
    unit = portfolio.get_unit(id)
    data = unit.to_dict()
    tenant = unit.current_tenant
    if tenant:
        data['current_tenant'] = tenant.to_dict()
    return jsonify(data), 200

@units_bp.route('/units/<int:id>', methods=['PATCH'])
def update_unit(id):
    data = request.get_json(silent=True) or {}
    unit = portfolio.update_unit(id, unit_number(data))
    return jsonify(unit.to_dict()), 200

@units_bp.route('/units/<int:id>', methods=['DELETE'])
def delete_unit(id):
    portfolio.delete_unit(id)
    return jsonify({'message': 'Unit deleted'}), 200
