from flask import Blueprint, request, jsonify
from ..services.dashboard import dashboard_stats, property_summaries, monthly_income_trend
from . import as_of_param

dashboard_bp = Blueprint('dashboard', __name__)

@dashboard_bp.route('/dashboard/stats', methods=['GET'])
def get_dashboard_stats():
    return jsonify(dashboard_stats(as_of_param())), 200

@dashboard_bp.route('/dashboard/summaries', methods=['GET'])
def get_property_summaries():
    return jsonify(property_summaries(as_of_param())), 200

@dashboard_bp.route('/dashboard/trend', methods=['GET'])
def get_income_trend():
    months = request.args.get('months')
    if months is not None:
        try:
            months = int(months)
        except ValueError:
            return jsonify({'error': 'months must be an integer'}), 400
        if not (1 <= months <= 24):
            return jsonify({'error': 'months must be between 1 and 24'}), 400
    return jsonify(monthly_income_trend(as_of_param(), months)), 200
