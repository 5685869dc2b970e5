from datetime import date

from flask import request

from ..validation import parse_date


def as_of_param():
    """The optional ?as_of=YYYY-MM-DD query parameter, defaulting to today."""
    value = request.args.get('as_of')
    return parse_date(value, 'as_of') if value else date.today()


# Register all blueprints here
def register_blueprints(app):
    from .properties import properties_bp
    from .units import units_bp
    from .tenants import tenants_bp
    from .reports import reports_bp
    from .dashboard import dashboard_bp

    app.register_blueprint(properties_bp)
    app.register_blueprint(units_bp)
    app.register_blueprint(tenants_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(dashboard_bp)
