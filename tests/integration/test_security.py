"""
Integration Tests for Security Features

Tests security headers, CSRF enforcement, rate limiting on the admin
mutations, session configuration, and that failures never leak storage internals.
"""

import pytest

from config import TestingConfig


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    NEWS_API_RATE_LIMIT = '2 per minute'


class CsrfEnforcedConfig(TestingConfig):
    WTF_CSRF_ENABLED = True


class TestSecurityHeaders:
    """Test HTTP security headers on all responses."""

    def test_x_content_type_options(self, client):
        """Test: X-Content-Type-Options header is set."""
        response = client.get('/')
        assert response.headers.get('X-Content-Type-Options') == 'nosniff'

    def test_x_frame_options(self, client):
        """Test: X-Frame-Options header is set."""
        response = client.get('/')
        assert response.headers.get('X-Frame-Options') == 'SAMEORIGIN'

    def test_content_security_policy(self, client):
        """Test: CSP allows direct uploads to object storage and nothing else off-site."""
        csp = client.get('/').headers.get('Content-Security-Policy')

        assert csp is not None
        assert "default-src 'self'" in csp
        assert 'connect-src' in csp
        assert 'https://storage.googleapis.com' in csp

    def test_referrer_policy(self, client):
        """Test: Referrer-Policy header is set."""
        response = client.get('/')
        assert response.headers.get('Referrer-Policy') == 'strict-origin-when-cross-origin'

    def test_headers_on_all_routes(self, client):
        """Test: Security headers apply to JSON API responses and errors too."""
        routes = ['/', '/health', '/admin/news/api/categories', '/nonexistent']

        for route in routes:
            response = client.get(route)
            assert response.headers.get('X-Content-Type-Options') == 'nosniff'
            assert response.headers.get('X-Frame-Options') == 'SAMEORIGIN'


class TestCSRFProtection:
    """Test CSRF enforcement on the JSON admin API."""

    @pytest.fixture
    def csrf_client(self):
        """Admin client on an app with CSRF enforced, as in development and production."""
        from app import create_app
        from extensions import db
        from models import User

        app = create_app(CsrfEnforcedConfig)
        with app.app_context():
            admin = User(email='csrf@example.test', name='csrf', role='ADMIN')
            db.session.add(admin)
            db.session.commit()
            admin_id = admin.id

        client = app.test_client()
        with client.session_transaction() as sess:
            sess['user_id'] = admin_id
        return client

    def test_post_without_token_rejected(self, csrf_client):
        """Test: A mutation without a CSRF token is refused with a JSON error."""
        response = csrf_client.post('/admin/news/api/categories', json={'name': 'World'})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'The CSRF token is missing.'}

    def test_page_loader_issues_token(self, csrf_client):
        """Test: The token from the page loader authorizes mutations."""
        token = csrf_client.get('/admin/news').get_json()['csrfToken']
        headers = {'X-CSRFToken': token}

        created = csrf_client.post('/admin/news/api/categories', json={'name': 'World'}, headers=headers)
        category_id = created.get_json()['data']['id']
        toggled = csrf_client.post(f'/admin/news/api/categories/{category_id}/featured',
                                   json={'isFeatured': True}, headers=headers)
        deleted = csrf_client.delete(f'/admin/news/api/categories/{category_id}', headers=headers)

        assert created.status_code == 201
        assert toggled.status_code == 200
        assert deleted.status_code == 200

    def test_forged_token_rejected(self, csrf_client):
        """Test: A token that was not issued by this session is refused."""
        response = csrf_client.post('/admin/news/api/categories', json={'name': 'World'},
                                    headers={'X-CSRFToken': 'forged'})
        assert response.status_code == 400


class TestRateLimiting:
    """Test rate limiting on admin mutations."""

    def test_rate_limit_exists(self, app):
        """Test: Rate limiting is configured."""
        from extensions import limiter
        assert limiter is not None
        assert app.config['NEWS_API_RATE_LIMIT']

    def test_mutations_are_limited(self):
        """Test: Mutations beyond the configured rate return 429."""
        from app import create_app
        from extensions import db
        from models import User

        app = create_app(RateLimitedConfig)
        with app.app_context():
            admin = User(email='limit@example.test', name='limit', role='ADMIN')
            db.session.add(admin)
            db.session.commit()

            client = app.test_client()
            with client.session_transaction() as sess:
                sess['user_id'] = admin.id

            statuses = [
                client.post('/admin/news/api/categories', json={'name': f'Category {i}'}).status_code
                for i in range(3)
            ]
            db.session.remove()

        assert statuses == [201, 201, 429]


class TestErrorHygiene:
    """Errors from the admin surface stay generic."""

    def test_storage_failure_message_is_generic(self, app, admin_client, monkeypatch):
        """Test: A database failure surfaces as a fixed message, not the driver error."""
        from sqlalchemy.exc import OperationalError

        mutation_service = app.extensions['admin_news'].mutation_service

        def broken_add(record):
            raise OperationalError('INSERT INTO news_categories', {}, Exception('disk I/O error'))

        monkeypatch.setattr(mutation_service.repository, 'add', broken_add)
        response = admin_client.post('/admin/news/api/categories', json={'name': 'World'})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Error creating category'}
        assert b'disk' not in response.data

    def test_unsupported_method(self, admin_client):
        """Test: Unsupported methods are refused."""
        response = admin_client.put('/admin/news/api/categories')
        assert response.status_code == 405


class TestConfigurationSecurity:
    """Test security-related configuration."""

    def test_secret_key_configured(self, app):
        """Test: SECRET_KEY is set."""
        assert app.config.get('SECRET_KEY') is not None
        assert app.config.get('SECRET_KEY') != ''

    def test_testing_mode_active(self, app):
        """Test: Testing configuration is active."""
        assert app.config.get('TESTING') is True

    def test_session_cookie_httponly(self, app):
        """Test: Session cookies are HTTPOnly."""
        assert app.config.get('SESSION_COOKIE_HTTPONLY') is True

    def test_session_cookie_samesite(self, app):
        """Test: Session cookies use SameSite policy."""
        assert app.config.get('SESSION_COOKIE_SAMESITE') == 'Lax'

    @pytest.mark.parametrize('key', ['NEWS_MEDIA_BUCKET', 'NEWS_MEDIA_PUBLIC_URL'])
    def test_media_settings_present(self, app, key):
        """Test: Upload settings are loaded from config."""
        assert app.config.get(key)


class TestLoggingConfiguration:
    """Test logging setup."""

    def test_logger_has_handlers(self, app):
        """Test: Logger has handlers configured."""
        assert len(app.logger.handlers) > 0

    def test_service_loggers_share_handler(self, app):
        """Test: Service modules log through the same stdout handler."""
        import logging
        handlers = logging.getLogger('services').handlers
        assert len([h for h in handlers if getattr(h, '_newsroom_handler', False)]) == 1
