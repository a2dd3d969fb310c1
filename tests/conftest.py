"""
Pytest Configuration and Fixtures

Provides shared fixtures for testing the Flask application using the
application factory pattern with clean, isolated test instances.
"""

import os

# config.py refuses to import without a secret key
os.environ['FLASK_ENV'] = 'testing'
os.environ.setdefault('SECRET_KEY', 'test-secret-key-for-pytest')

import pytest
from datetime import timedelta

from extensions import db


@pytest.fixture(scope='session')
def test_config():
    """Test configuration class."""
    from config import TestingConfig
    return TestingConfig


@pytest.fixture
def app(test_config):
    """
    Create and configure a Flask application instance for testing.

    Uses the application factory pattern to create a clean instance
    (with its own in-memory database) for each test function.
    """
    from app import create_app
    app = create_app(test_config)

    # Push application context
    ctx = app.app_context()
    ctx.push()

    yield app

    # Clean up
    db.session.remove()
    ctx.pop()


@pytest.fixture
def client(app):
    """
    Flask test client for making HTTP requests.

    Not signed in.
    """
    return app.test_client()


@pytest.fixture
def runner(app):
    """
    Flask CLI test runner.

    Provides a runner for testing CLI commands.
    """
    return app.test_cli_runner()


# ========== USERS ==========

def _make_user(email, role):
    from models import User
    user = User(email=email, name=email.split('@')[0], role=role)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return _make_user('admin@example.test', 'ADMIN')


@pytest.fixture
def regular_user(app):
    return _make_user('reader@example.test', 'USER')


def _signed_in_client(app, user):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['user_id'] = user.id
    return client


@pytest.fixture
def admin_client(app, admin_user):
    """Test client signed in as an administrator."""
    return _signed_in_client(app, admin_user)


@pytest.fixture
def user_client(app, regular_user):
    """Test client signed in as a non-admin user."""
    return _signed_in_client(app, regular_user)


# ========== RECORD FACTORIES ==========

@pytest.fixture
def make_category(app):
    """Insert a category directly, bypassing the mutation pipeline."""
    from models import NewsCategory
    from services.slug_service import slugify

    def factory(name='World', **fields):
        fields.setdefault('slug', slugify(name))
        category = NewsCategory(name=name, **fields)
        db.session.add(category)
        db.session.commit()
        return category

    return factory


@pytest.fixture
def make_article(app):
    """Insert an article directly, bypassing the mutation pipeline."""
    from models import NewsArticle
    from services.slug_service import slugify

    def factory(title='Headline', category=None, **fields):
        fields.setdefault('slug', slugify(title))
        if category is not None:
            fields['category_id'] = category.id
        article = NewsArticle(title=title, **fields)
        db.session.add(article)
        db.session.commit()
        return article

    return factory


@pytest.fixture
def now():
    """Fixed reference time (naive UTC) for publish-date scenarios."""
    from models.news import utcnow
    return utcnow().replace(microsecond=0)


@pytest.fixture
def past(now):
    return now - timedelta(days=2)


@pytest.fixture
def future(now):
    return now + timedelta(days=2)


# ========== SERVICES ==========

class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def generate_signed_url(self, **kwargs):
        self.bucket.client.signed.append((self.name, kwargs))
        return f"https://storage.googleapis.com/{self.bucket.name}/{self.name}?X-Goog-Signature=fake"


class FakeBucket:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def blob(self, name):
        return FakeBlob(self, name)


class FakeStorageClient:
    """Stands in for google.cloud.storage.Client; records signing calls."""

    def __init__(self):
        self.signed = []

    def bucket(self, name):
        return FakeBucket(self, name)


@pytest.fixture
def storage_client():
    return FakeStorageClient()


@pytest.fixture
def storage_service(storage_client):
    from services import StorageService
    return StorageService(
        bucket_name='test-bucket',
        public_url='https://media.example.test',
        expires_seconds=3600,
        client_factory=lambda: storage_client,
        clock=lambda: 1700000000.5,
    )


@pytest.fixture
def repository(app):
    from services import NewsRepository
    return NewsRepository(db.session)


@pytest.fixture
def list_service(repository):
    from services import NewsListService
    return NewsListService(repository)


@pytest.fixture
def mutation_service(repository):
    from services import NewsMutationService
    return NewsMutationService(repository)


@pytest.fixture
def admin_actions(app, admin_user, list_service, mutation_service, storage_service):
    """AdminNewsActions whose gate always resolves the admin user."""
    from services import AdminNewsActions, AuthorizationGate
    return AdminNewsActions(
        gate=AuthorizationGate(identity_resolver=lambda: admin_user),
        list_service=list_service,
        mutation_service=mutation_service,
        storage_service=storage_service,
    )


@pytest.fixture
def use_fake_storage(app, storage_service):
    """Point the app's upload issuer at the fake storage client."""
    app.extensions['admin_news'].storage_service = storage_service
    return storage_service
