import logging

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)


def create_app(config_name='development', translation_provider=None):
    """Build the Flask application.

    ``translation_provider`` is the callable used by the translate endpoint.
    It receives a ``BatchRequestPayload`` and returns a mapping of item id to
    translated text (or an exception for items that failed).
    """
    from transcore.config import get_config

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    app.extensions['translation_provider'] = translation_provider

    # Create tables with error handling
    with app.app_context():
        from transcore import models  # noqa: F401  (register tables)
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    from transcore.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
