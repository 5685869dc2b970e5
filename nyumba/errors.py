"""Exceptions raised by the service layer and rendered as JSON errors."""


class NyumbaError(Exception):
    status_code = 400


class ValidationError(NyumbaError):
    status_code = 400


class NotFoundError(NyumbaError):
    status_code = 404


class ConflictError(NyumbaError):
    """A request that is well-formed but breaks a portfolio rule, e.g. deleting an occupied unit."""
    status_code = 400


def register_error_handlers(app):
    from flask import current_app, jsonify
    from sqlalchemy.exc import SQLAlchemyError
    from . import db

    @app.errorhandler(NyumbaError)
    def handle_domain_error(exc):
        return jsonify({'error': str(exc)}), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        current_app.logger.exception('Database operation failed')
        return jsonify({'error': 'Database operation failed'}), 500
