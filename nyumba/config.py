import os
# Define the base directory for the database file (the project root)
BASEDIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
DB_PATH = os.path.join(BASEDIR, 'nyumba.db')


class ValidationConfig:
    # Name format regexes and max lengths
    TENANT_NAME_REGEX = os.environ.get('TENANT_NAME_REGEX', r"^[A-Za-z\-\.' ]+$")
    TENANT_NAME_MAX_LENGTH = int(os.environ.get('TENANT_NAME_MAX_LENGTH', 100))
    PHONE_REGEX = os.environ.get('PHONE_REGEX', r'^\+?[0-9 ]{7,15}$')
    EMAIL_REGEX = os.environ.get('EMAIL_REGEX', r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    UNIT_NUMBER_REGEX = os.environ.get('UNIT_NUMBER_REGEX', r'^[A-Za-z0-9\-]+$')
    UNIT_NUMBER_MAX_LENGTH = int(os.environ.get('UNIT_NUMBER_MAX_LENGTH', 20))
    PROPERTY_NAME_REGEX = os.environ.get('PROPERTY_NAME_REGEX', r'^[A-Za-z0-9 .,&\'\-]+$')
    PROPERTY_NAME_MAX_LENGTH = int(os.environ.get('PROPERTY_NAME_MAX_LENGTH', 100))
    CATEGORY_NAME_MAX_LENGTH = int(os.environ.get('CATEGORY_NAME_MAX_LENGTH', 50))
    ENFORCE_UNIQUE_PROPERTY_NAME = os.environ.get('ENFORCE_UNIQUE_PROPERTY_NAME', '1') == '1'
    ENFORCE_UNIQUE_PROPERTY_NAME_CASE_INSENSITIVE = os.environ.get('ENFORCE_UNIQUE_PROPERTY_NAME_CASE_INSENSITIVE', '1') == '1'
    # Upper bound on units created by one bulk request
    MAX_BULK_UNITS = int(os.environ.get('MAX_BULK_UNITS', 100))


class BillingConfig:
    # Bill the move-in month by days remaining instead of a full month
    PRORATE_MOVE_IN_MONTH = os.environ.get('PRORATE_MOVE_IN_MONTH', '0') == '1'
    INCOME_TREND_MONTHS = int(os.environ.get('INCOME_TREND_MONTHS', 6))


class Config:
    """Base configuration class."""
    # Defaulting to a file-based SQLite database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + DB_PATH
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Secret Key is required by Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a-very-secret-and-hard-to-guess-string'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    PRORATE_MOVE_IN_MONTH = BillingConfig.PRORATE_MOVE_IN_MONTH
    INCOME_TREND_MONTHS = BillingConfig.INCOME_TREND_MONTHS

class TestingConfig(Config):
    """Configuration used specifically for running Pytest."""
    TESTING = True
    # Crucial: Use an in-memory SQLite database for fast, isolated testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = 'WARNING'
    PRORATE_MOVE_IN_MONTH = False
