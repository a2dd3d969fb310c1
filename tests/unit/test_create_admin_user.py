"""
Unit Tests for the Admin Bootstrap Script
"""

from scripts.create_admin_user import ensure_admin


def test_creates_admin(app):
    user, created = ensure_admin('  Editor@Example.test ', 'Editor')

    assert created is True
    assert user.email == 'editor@example.test'
    assert user.is_admin


def test_promotes_existing_user(regular_user):
    user, created = ensure_admin(regular_user.email)

    assert created is False
    assert user.id == regular_user.id
    assert user.role == 'ADMIN'
    assert user.name == 'reader'
