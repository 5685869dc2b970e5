from flask import Blueprint, request, jsonify
from ..services.reports import rent_roll_report, arrears_report, vacancy_report
from ..validation import parse_date

reports_bp = Blueprint('reports', __name__)


def _property_param():
    property_id = request.args.get('property_id')
    if not property_id:
        return None
    if property_id == 'all':
        return 'all'
    return int(property_id)


def _period_report(build):
    property_id = request.args.get('property_id')
    start_date = request.args.get('start_date')
    end_date = request.args.get('end_date')
    if not all([property_id, start_date, end_date]):
        return jsonify({'error': 'property_id, start_date, and end_date are required'}), 400
    try:
        prop_id = _property_param()
    except ValueError:
        return jsonify({'error': 'property_id must be an integer or "all"'}), 400
    start_dt = parse_date(start_date, 'start_date')
    end_dt = parse_date(end_date, 'end_date')
    if end_dt < start_dt:
        return jsonify({'error': 'End date must be on or after start date.'}), 400
    return jsonify(build(prop_id, start_dt, end_dt)), 200


@reports_bp.route('/reports/rent-roll', methods=['GET'])
def get_rent_roll():
    return _period_report(rent_roll_report)


@reports_bp.route('/reports/arrears', methods=['GET'])
def get_arrears():
    return _period_report(arrears_report)


@reports_bp.route('/reports/vacancy', methods=['GET'])
def get_vacancy():
    try:
        prop_id = _property_param()
    except ValueError:
        return jsonify({'error': 'property_id must be an integer or "all"'}), 400
    if prop_id is None:
        return jsonify({'error': 'property_id is required'}), 400
    return jsonify(vacancy_report(prop_id)), 200
