#!/usr/bin/env python3
"""
Create a news admin account, or promote an existing user to admin.

Usage:
    python scripts/create_admin_user.py admin@example.com ["Display Name"]
"""

import sys
import os

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from sqlalchemy import select

from app import create_app
from extensions import db
from models import User, UserRole


def ensure_admin(email, name=None):
    """
    Return the admin user for ``email``, creating or promoting it as needed.

    Returns:
        Tuple of (user, created)
    """
    email = email.strip().lower()
    user = db.session.scalar(select(User).where(User.email == email))
    created = user is None
    if created:
        user = User(email=email, name=name)
        db.session.add(user)
    elif name:
        user.name = name
    user.role = UserRole.ADMIN.value
    db.session.commit()
    return user, created


def main():
    if len(sys.argv) < 2:
        print("Usage: python create_admin_user.py <email> [name]")
        sys.exit(1)

    email = sys.argv[1]
    name = sys.argv[2] if len(sys.argv) > 2 else None

    app = create_app()
    with app.app_context():
        user, created = ensure_admin(email, name)
        action = "Created" if created else "Promoted"
        print(f"{action} admin {user.email} (id={user.id})")


if __name__ == '__main__':
    main()
