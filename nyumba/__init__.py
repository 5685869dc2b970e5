import logging

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from .config import Config, TestingConfig

# Initialize SQLAlchemy outside the create_app function
db = SQLAlchemy()

def create_app(config_class=Config, config_name=None):
    # map friendly names to classes
    if config_name:
        if config_name == 'testing':
            config_class = TestingConfig
        else:
            config_class = config_name   # allow import path string fallback

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Service modules log through the package logger
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger(__name__).setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .routes import register_blueprints
    register_blueprints(app)

    # Models must be imported before create_all so the tables are registered
    from . import models

    from .seed import register_commands
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app
