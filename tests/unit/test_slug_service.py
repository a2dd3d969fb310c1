"""
Unit Tests for Slug Service

Tests name normalization and unique suffix selection.
"""

import pytest

from services.slug_service import SlugResolver, next_free_slug, slugify
from utils.errors import InvalidNameError


class TestSlugify:
    """Test slug normalization."""

    def test_lowercases_and_hyphenates(self):
        assert slugify('Breaking News Today') == 'breaking-news-today'

    def test_strips_diacritics(self):
        assert slugify('Économie & Política') == 'economie-politica'

    def test_collapses_runs_of_symbols(self):
        assert slugify('  Sports -- & -- Games!!  ') == 'sports-games'

    def test_keeps_digits(self):
        assert slugify('Top 10 of 2024') == 'top-10-of-2024'

    def test_only_symbols_gives_empty(self):
        assert slugify('!!! ---') == ''

    def test_empty_input(self):
        assert slugify('') == ''


class TestNextFreeSlug:
    """Test suffix selection."""

    def test_unused_base_is_returned(self):
        assert next_free_slug('world', []) == 'world'

    def test_first_suffix_is_one(self):
        assert next_free_slug('world', ['world']) == 'world-1'

    def test_smallest_free_suffix(self):
        assert next_free_slug('world', ['world', 'world-1', 'world-3']) == 'world-2'

    def test_unrelated_slugs_ignored(self):
        assert next_free_slug('world', ['worldwide', 'world-cup']) == 'world'


class TestSlugResolver:
    """Test resolution against stored slugs."""

    def test_identical_names_get_sequential_slugs(self):
        """Test: N creations with the same name give base, base-1, ... base-(N-1)."""
        stored = []
        resolver = SlugResolver(lambda base, exclude_id: [s for s in stored if s.startswith(base)])

        for _ in range(4):
            stored.append(resolver.resolve('Local News'))

        assert stored == ['local-news', 'local-news-1', 'local-news-2', 'local-news-3']

    def test_exclude_id_is_forwarded(self):
        calls = []

        def lookup(base, exclude_id):
            calls.append((base, exclude_id))
            return []

        SlugResolver(lookup).resolve('Sports', exclude_id='abc')
        assert calls == [('sports', 'abc')]

    def test_name_without_letters_rejected(self):
        resolver = SlugResolver(lambda base, exclude_id: [])
        with pytest.raises(InvalidNameError):
            resolver.resolve('***')
