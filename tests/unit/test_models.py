"""
Unit Tests for Data Models

Tests the NewsCategory, NewsArticle, NewsImage, and User models.
"""

import pytest

from models import NewsArticle, NewsImage, User


class TestNewsCategoryModel:
    """Test NewsCategory persistence and serialization."""

    def test_defaults(self, make_category):
        """Test: New categories are active, not featured, order 0."""
        category = make_category('World')

        assert category.id
        assert category.is_active is True
        assert category.is_featured is False
        assert category.order == 0
        assert category.created_at is not None

    def test_to_dict_uses_camel_case(self, make_category):
        """Test: to_dict exposes the wire field names."""
        data = make_category('World', description='Global').to_dict()

        assert set(data) == {
            'id', 'name', 'slug', 'description', 'image', 'icon', 'order',
            'isActive', 'isFeatured', 'createdAt', 'updatedAt', 'articleCount',
        }
        assert data['slug'] == 'world'
        assert data['articleCount'] == 0

    def test_article_count(self, make_category, make_article):
        """Test: articleCount is derived from the articles table."""
        category = make_category('World')
        make_article('One', category=category)
        make_article('Two', category=category)
        make_article('Elsewhere')

        from extensions import db
        db.session.expire(category)
        assert category.article_count == 2


class TestNewsArticleModel:
    """Test NewsArticle publication state and serialization."""

    @pytest.mark.parametrize('is_active,when,expected', [
        (True, 'past', True),
        (True, 'future', False),
        (True, None, False),
        (False, 'past', False),
    ])
    def test_is_published(self, make_article, now, past, future, is_active, when, expected):
        """Test: Published means active with a publish date not in the future."""
        published_at = {'past': past, 'future': future, None: None}[when]
        article = make_article('Storm', is_active=is_active, published_at=published_at)
        assert article.is_published(now) is expected

    def test_images_ordered(self, make_article):
        """Test: Images load sorted by their order."""
        from extensions import db

        article = make_article('Gallery')
        db.session.add_all([
            NewsImage(article_id=article.id, url='https://cdn.test/b.jpg', order=1),
            NewsImage(article_id=article.id, url='https://cdn.test/a.jpg', order=0),
        ])
        db.session.commit()

        reloaded = db.session.get(NewsArticle, article.id)
        assert [image['url'] for image in reloaded.to_dict()['images']] == [
            'https://cdn.test/a.jpg', 'https://cdn.test/b.jpg',
        ]

    def test_to_dict_category(self, make_category, make_article):
        """Test: to_dict embeds only the category id and name."""
        category = make_category('World')
        data = make_article('Storm', category=category).to_dict()

        assert data['categoryId'] == category.id
        assert data['category'] == {'id': category.id, 'name': 'World'}

    def test_to_dict_without_category(self, make_article):
        """Test: Uncategorized articles serialize category as None."""
        data = make_article('Storm').to_dict()
        assert data['category'] is None
        assert data['publishedAt'] is None


class TestUserModel:
    """Test User role handling."""

    def test_default_role(self, app):
        """Test: Users default to the USER role."""
        from extensions import db

        user = User(email='new@example.test')
        db.session.add(user)
        db.session.commit()

        assert user.role == 'USER'
        assert user.is_admin is False

    def test_admin(self, admin_user):
        """Test: ADMIN role is recognized."""
        assert admin_user.is_admin is True
