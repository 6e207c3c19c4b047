from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()

logger = logging.getLogger(__name__)


def _env_bool(name, default='false'):
    return os.getenv(name, default).lower() in ('true', '1', 'yes')


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///bookmaru.db')
    # Render/Supabase hand out postgres:// but SQLAlchemy wants postgresql://
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def create_app(config_name='development', overrides=None):
    app = Flask(__name__)

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['ADMIN_PASSWORD'] = os.getenv('ADMIN_PASSWORD')
    app.config['TRANSLATION_SERVICE'] = os.getenv('TRANSLATION_SERVICE', 'remote')
    app.config['TRANSLATION_FUNCTION_URL'] = os.getenv('TRANSLATION_FUNCTION_URL', '')
    app.config['TRANSLATION_FUNCTION_KEY'] = os.getenv('TRANSLATION_FUNCTION_KEY', '')
    app.config['TRANSLATION_TIMEOUT_SECONDS'] = float(os.getenv('TRANSLATION_TIMEOUT_SECONDS', 30))
    app.config['OPENAI_API_KEY'] = os.getenv('OPENAI_API_KEY', '')
    app.config['OPENAI_MODEL'] = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
    app.config['NTFY_BASE_URL'] = os.getenv('NTFY_BASE_URL', 'https://ntfy.sh')
    app.config['NTFY_TOPIC'] = os.getenv('NTFY_TOPIC', '')
    app.config['NTFY_TOPIC_CONTACT'] = os.getenv('NTFY_TOPIC_CONTACT', '')
    app.config['NOTIFY_EAGER'] = _env_bool('NOTIFY_EAGER')
    app.config['NOTIFY_MAX_RETRIES'] = int(os.getenv('NOTIFY_MAX_RETRIES', 2))
    app.config['NOTIFY_RETRY_DELAY_SECONDS'] = float(os.getenv('NOTIFY_RETRY_DELAY_SECONDS', 1))
    app.config['PLACE_CACHE_TTL_SECONDS'] = float(os.getenv('PLACE_CACHE_TTL_SECONDS', 300))
    app.config['PLACE_CACHE_MAX_ENTRIES'] = int(os.getenv('PLACE_CACHE_MAX_ENTRIES', 500))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    app.config['CORS_ORIGINS'] = os.getenv('CORS_ORIGINS', '*')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['NOTIFY_EAGER'] = True
        app.config['NOTIFY_RETRY_DELAY_SECONDS'] = 0

    if overrides:
        app.config.update(overrides)

    from bookmaru.utils.logger import configure_logging
    configure_logging(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    from bookmaru.services.task_queue import TaskQueue
    from bookmaru.services.place_cache import PlaceReadCache
    from bookmaru.services.places import fetch_approved_places

    app.extensions['task_queue'] = TaskQueue(
        eager=app.config['NOTIFY_EAGER'],
        max_retries=app.config['NOTIFY_MAX_RETRIES'],
        retry_delay=app.config['NOTIFY_RETRY_DELAY_SECONDS'],
    )
    app.extensions['place_cache'] = PlaceReadCache(
        fetch=fetch_approved_places,
        ttl_seconds=app.config['PLACE_CACHE_TTL_SECONDS'],
        max_entries=app.config['PLACE_CACHE_MAX_ENTRIES'],
    )

    # Create tables with error handling
    with app.app_context():
        from bookmaru import models  # noqa: F401 - registers tables
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    register_error_handlers(app)

    # Register routes
    from bookmaru.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app


def register_error_handlers(app):
    """Translate domain errors into JSON responses."""
    from bookmaru.errors import BookmaruError

    @app.errorhandler(BookmaruError)
    def handle_domain_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.error_code}: {error.message}")
        return jsonify({'error': error.message, 'code': error.error_code}), error.status_code

    @app.errorhandler(500)
    def handle_server_error(error):
        original = getattr(error, 'original_exception', None) or error
        logger.exception(f"Unhandled error: {original}")
        return jsonify({'error': 'Server error'}), 500
