from flask import request, jsonify, Blueprint
from ..models import Property
from ..services import portfolio
from ..services.dashboard import property_stats
from ..validation import property_fields, category_fields
from . import as_of_param

properties_bp = Blueprint('properties', __name__)

@properties_bp.route('/properties', methods=['POST'])
def create_property():
    data = request.get_json(silent=True)
    if not data or not data.get('name') or not str(data['name']).strip():
        return jsonify({'error': 'Property name is required'}), 400
    fields = property_fields(data)
    prop = portfolio.create_property(fields['name'], fields['location'], data.get('landlord_id'))
    return jsonify(prop.to_dict()), 201

@properties_bp.route('/properties', methods=['GET'])
def get_properties():
    props = Property.query.order_by(Property.id).all()
    return jsonify([p.to_dict() for p in props]), 200

@properties_bp.route('/properties/<int:id>', methods=['GET'])
def get_property(id):
    prop = portfolio.get_property(id)
    return jsonify(prop.to_dict(nested=True)), 200

@properties_bp.route('/properties/<int:id>', methods=['PATCH'])
def update_property(id):
    data = request.get_json(silent=True) or {}
    fields = property_fields(data, partial=True)
    if not fields:
        return jsonify({'error': 'Nothing to update: provide name or location'}), 400
    prop = portfolio.update_property(id, **fields)
    return jsonify(prop.to_dict()), 200

@properties_bp.route('/properties/<int:id>', methods=['DELETE'])
def delete_property(id):
    portfolio.delete_property(id)
    return jsonify({'message': 'Property deleted'}), 200

@properties_bp.route('/properties/<int:id>/stats', methods=['GET'])
def get_property_stats(id):
    return jsonify(property_stats(id, as_of_param())), 200

@properties_bp.route('/properties/<int:id>/categories', methods=['POST'])
def create_category(id):
    data = request.get_json(silent=True) or {}
    fields = category_fields(data)
    cat = portfolio.create_category(id, fields['name'], fields['rent'])
    return jsonify(cat.to_dict()), 201
