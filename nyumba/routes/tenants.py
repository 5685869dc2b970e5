from datetime import date

from flask import Blueprint, request, jsonify
from ..services import portfolio
from ..validation import tenant_fields, parse_date, positive_int

tenants_bp = Blueprint('tenants', __name__)

@tenants_bp.route('/tenants', methods=['GET'])
def list_tenants():
    property_id = request.args.get('property_id')
    include_former = request.args.get('include_former') == '1'
    if property_id:
        try:
            pid = int(property_id)
        except ValueError:
            return jsonify({'error': 'property_id must be an integer'}), 400
        portfolio.get_property(pid)
        tenants = portfolio.list_tenants(pid, include_former)
    else:
        tenants = portfolio.list_tenants(include_former=include_former)
    return jsonify([t.to_dict() for t in tenants]), 200

@tenants_bp.route('/tenants/<int:id>', methods=['GET'])
def get_tenant(id):
    return jsonify(portfolio.get_tenant(id).to_dict()), 200

@tenants_bp.route('/units/<int:id>/tenant', methods=['POST'])
def assign_tenant(id):
    data = request.get_json(silent=True)
    required_fields = ['name', 'phone', 'email', 'move_in_date']
    if not data or not all(field in data for field in required_fields):
        return jsonify({'error': 'Missing fields'}), 400
    fields = tenant_fields(data)
    tenant = portfolio.assign_tenant(id, **fields)
    return jsonify(tenant.to_dict()), 201

@tenants_bp.route('/categories/<int:id>/tenants/bulk', methods=['POST'])
def assign_multiple_tenants(id):
    data = request.get_json(silent=True)
    rows = data.get('assignments') if isinstance(data, dict) else data
    if not isinstance(rows, list) or not rows:
        return jsonify({'error': 'assignments must be a non-empty list'}), 400
    result = portfolio.assign_multiple_tenants(id, rows)
    return jsonify(result), 200

@tenants_bp.route('/tenants/<int:id>/unassign', methods=['POST'])
def unassign_tenant(id):
    data = request.get_json(silent=True) or {}
    move_out = data.get('move_out_date')
    move_out_dt = parse_date(move_out, 'move_out_date') if move_out else date.today()
    tenant = portfolio.unassign_tenant(id, move_out_dt)
    return jsonify(tenant.to_dict()), 200

# --- Payments ---

@tenants_bp.route('/tenants/<int:id>/payments', methods=['GET'])
def tenant_payments(id):
    payments = portfolio.payments_for_tenant(id)
    return jsonify([p.to_dict() for p in payments]), 200

@tenants_bp.route('/tenants/<int:id>/payments', methods=['POST'])
def record_payment(id):
    """
    Record a payment against one billing month.
    Expected JSON: { "amount": <int>, "payment_date": "YYYY-MM-DD", "month_paid_for": "YYYY-MM" }
    """
    data = request.get_json(silent=True)
    required_fields = ['amount', 'payment_date', 'month_paid_for']
    if not data or not all(field in data for field in required_fields):
        return jsonify({'error': 'amount, payment_date and month_paid_for are required'}), 400
    amount = positive_int(data['amount'], 'amount')
    paid_on = parse_date(data['payment_date'], 'payment_date')
    payment = portfolio.record_payment(id, amount, paid_on, str(data['month_paid_for']))
    return jsonify(payment.to_dict()), 201
