"""
Newsroom - back-office for news categories and articles
"""
from flask import Flask, jsonify, request
import os
from config import get_config
from extensions import csrf, db, limiter
from routes import admin_news_bp, main_bp
from services import (
    AdminNewsActions,
    AuthorizationGate,
    NewsListService,
    NewsMutationService,
    NewsRepository,
    StorageService,
    TaggedListCache,
)
from services.auth_service import resolver_from_config
from utils.logger import setup_logger


def set_security_headers(response):
    """Apply security headers to all responses."""
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    response.headers['X-XSS-Protection'] = '1; mode=block'

    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

    response.headers['Content-Security-Policy'] = (
        "default-src 'self'; "
        "script-src 'self'; "
        "style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data: https:; "
        "connect-src 'self' https://storage.googleapis.com; "
        "frame-ancestors 'self'; "
        "base-uri 'self'; "
        "form-action 'self'"
    )

    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

    return response


def build_admin_news(app):
    """Wire the news admin services together and hang them off the app."""
    cache = TaggedListCache(
        ttl_seconds=app.config['NEWS_LIST_CACHE_TTL'],
        max_entries=app.config['NEWS_LIST_CACHE_MAX_ENTRIES'],
    )
    repository = NewsRepository(db.session)

    actions = AdminNewsActions(
        gate=AuthorizationGate(resolver_from_config(app.config.get('NEWS_IDENTITY_RESOLVER'))),
        list_service=NewsListService(repository, cache),
        mutation_service=NewsMutationService(repository, cache),
        storage_service=StorageService(
            bucket_name=app.config['NEWS_MEDIA_BUCKET'],
            public_url=app.config['NEWS_MEDIA_PUBLIC_URL'],
            expires_seconds=app.config['NEWS_UPLOAD_URL_EXPIRES'],
        ),
    )
    app.extensions['admin_news'] = actions
    return actions


def create_app(config_class=None):
    """
    Application factory.

    Args:
        config_class: Config class to load; defaults to the one selected by FLASK_ENV

    Returns:
        Configured Flask application
    """
    config_class = config_class or get_config()
    app = Flask(__name__)
    app.config.from_object(config_class)

    setup_logger(app)

    # Initialize extensions
    db.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    app.after_request(set_security_headers)

    app.register_blueprint(main_bp)
    app.register_blueprint(admin_news_bp)

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify(error="Not found"), 404

    with app.app_context():
        # Register the models on the metadata before creating tables
        import models  # noqa: F401
        db.create_all()

    build_admin_news(app)

    app.logger.info(f"Newsroom started with {config_class.__name__}")
    return app


if __name__ == "__main__":
    app = create_app()

    # Get configuration from app config (already loaded)
    debug_mode = app.config.get('DEBUG', False)
    env_name = os.environ.get('FLASK_ENV', 'development')

    # Display startup information
    print("=" * 60)
    print(f"Flask Application Starting")
    print(f"Environment: {env_name}")
    print(f"Debug Mode: {debug_mode}")
    print("=" * 60)

    if debug_mode and env_name == 'production':
        print("\n⚠️  WARNING: Debug mode enabled in production!")
        print("This is a security risk. Set FLASK_DEBUG=false\n")

    # Get host and port from environment or use defaults
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', 5000))

    app.run(host=host, port=port, debug=debug_mode)
