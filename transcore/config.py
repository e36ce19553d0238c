"""Application configuration loaded from environment variables."""

import os


def _database_url(default):
    url = os.getenv('DATABASE_URL', default)
    # Heroku/Render style URLs are not accepted by SQLAlchemy 1.4+
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///transcore.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    ADMIN_SECRET = os.getenv('ADMIN_SECRET')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'en')

    # Objects per "translate all" call; the caller repeats until done
    TRANSLATION_BATCH_SIZE = int(os.getenv('TRANSLATION_BATCH_SIZE', 5))
    TM_DEFAULT_MIN_SIMILARITY = int(os.getenv('TM_DEFAULT_MIN_SIMILARITY', 70))
    TM_FUZZY_CANDIDATE_LIMIT = int(os.getenv('TM_FUZZY_CANDIDATE_LIMIT', 500))
    STORE_BATCH_CHUNK = int(os.getenv('STORE_BATCH_CHUNK', 500))

    TESTING = False


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    DEBUG = False


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(config_name):
    return CONFIGS.get(config_name or 'development', DevelopmentConfig)
