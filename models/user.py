"""
User model.

Only the fields the authorization gate needs are stored here; sign-in
itself is handled by the external identity provider.
"""

import uuid

from extensions import db
from models.constants import UserRole
from models.news import utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(16), nullable=False, default=UserRole.USER.value)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
