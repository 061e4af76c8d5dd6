"""
Configuration settings for Cost Forecast Intelligence
"""

import os


def _env_float(name, default):
    return float(os.environ.get(name, default))


def _env_int(name, default):
    return int(os.environ.get(name, default))


class Config:
    """Base configuration"""
    # App
    APP_NAME = "Cost Forecast Intelligence"
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Forecasting
    FORECAST_DAYS = _env_int('FORECAST_DAYS', 30)
    CONFIDENCE_LEVEL = _env_float('CONFIDENCE_LEVEL', 0.95)
    SUMMARY_HORIZON_DAYS = _env_int('SUMMARY_HORIZON_DAYS', 30)
    SEASONAL_PERIODS = _env_int('SEASONAL_PERIODS', 12)
    MAX_FORECAST_DAYS = _env_int('MAX_FORECAST_DAYS', 365)

    # Budgets
    DEFAULT_BUDGET_MARGIN = _env_float('DEFAULT_BUDGET_MARGIN', 1.2)
    DEFAULT_PROJECTION_FACTOR = _env_float('DEFAULT_PROJECTION_FACTOR', 1.1)
    TREND_PROJECTION_FACTOR = _env_float('TREND_PROJECTION_FACTOR', 1.15)

    # Rate limiting
    RATELIMIT_DEFAULT = "100 per minute"
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')

    # Request size
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024  # 4MB of JSON


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    # Ensure secret key is set in production
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY and os.environ.get('FLASK_ENV') == 'production':
        raise ValueError("SECRET_KEY must be set in production")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    RATELIMIT_ENABLED = False


# Config mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get config based on environment"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
