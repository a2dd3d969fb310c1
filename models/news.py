"""
News category, article, and article image models.

Backed by Flask-SQLAlchemy. ``article_count`` on a category is a
correlated count rather than a stored column, so it is always consistent
with the articles table.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import column_property

from extensions import db


def _new_id():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp (SQLite stores datetimes without tzinfo)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class NewsImage(db.Model):
    """An additional image attached to an article, ordered from 0."""

    __tablename__ = "news_images"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    article_id = db.Column(
        db.String(36),
        db.ForeignKey("news_articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = db.Column(db.String(1024), nullable=False)
    alt = db.Column(db.String(255), nullable=True)
    order = db.Column("sort_order", db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "alt": self.alt,
            "order": self.order,
        }

    def __repr__(self) -> str:
        return f"<NewsImage {self.order} of {self.article_id}>"


class NewsArticle(db.Model):
    """A news article, optionally filed under a category."""

    __tablename__ = "news_articles"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    category_id = db.Column(
        db.String(36),
        db.ForeignKey("news_categories.id"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(1024), nullable=True)
    published_at = db.Column(db.DateTime, nullable=True, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category = db.relationship("NewsCategory", back_populates="articles")
    images = db.relationship(
        "NewsImage",
        order_by="NewsImage.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def is_published(self, now=None) -> bool:
        """Active and with a publish date that is not in the future."""
        now = now or utcnow()
        return bool(self.is_active and self.published_at and self.published_at <= now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "content": self.content,
            "image": self.image,
            "images": [image.to_dict() for image in self.images],
            "publishedAt": _iso(self.published_at),
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "category": (
                {"id": self.category.id, "name": self.category.name}
                if self.category is not None else None
            ),
        }

    def __repr__(self) -> str:
        return f"<NewsArticle {self.slug}>"


class NewsCategory(db.Model):
    """A category grouping news articles."""

    __tablename__ = "news_categories"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(1024), nullable=True)
    icon = db.Column(db.String(64), nullable=True)
    order = db.Column("sort_order", db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    articles = db.relationship("NewsArticle", back_populates="category", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "image": self.image,
            "icon": self.icon,
            "order": self.order,
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "articleCount": self.article_count or 0,
        }

    def __repr__(self) -> str:
        return f"<NewsCategory {self.slug}>"


NewsCategory.article_count = column_property(
    select(func.count(NewsArticle.id))
    .where(NewsArticle.category_id == NewsCategory.id)
    .correlate_except(NewsArticle)
    .scalar_subquery(),
    deferred=False,
)
