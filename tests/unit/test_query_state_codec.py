"""
Unit Tests for the Query State Codec

Tests URL decoding/encoding of the list state and the UI transitions.
"""

import pytest

from models.constants import NewsStatus, NewsTab, SortDirection
from models.view_state import DEFAULT_VIEW_STATE, ViewState
from services import query_state_codec as codec


class TestDecode:
    """Test building a ViewState from query parameters."""

    def test_empty_params_give_default_state(self):
        assert codec.decode({}) == DEFAULT_VIEW_STATE
        assert codec.decode(None) == DEFAULT_VIEW_STATE

    def test_reads_prefixed_params(self):
        state = codec.decode({
            'news_page': '3',
            'news_pageSize': '50',
            'news_sort': 'title',
            'news_sortDir': 'asc',
            'news_search': 'election',
            'news_status': 'published',
            'news_category': 'cat-1',
            'news_tab': 'articles',
        })

        assert state == ViewState(
            page=3,
            page_size=50,
            sort_field='title',
            sort_direction=SortDirection.ASC,
            search_text='election',
            status_filter=NewsStatus.PUBLISHED,
            category_filter='cat-1',
            active_tab=NewsTab.ARTICLES,
        )

    def test_unprefixed_params_ignored(self):
        assert codec.decode({'page': '4', 'tab': 'articles'}) == DEFAULT_VIEW_STATE

    @pytest.mark.parametrize('params', [
        {'news_page': 'abc'},
        {'news_page': '0'},
        {'news_page': '-2'},
        {'news_pageSize': '7'},
        {'news_pageSize': 'lots'},
        {'news_sortDir': 'sideways'},
        {'news_status': 'archived'},
        {'news_tab': 'settings'},
        {'news_search': '   '},
    ])
    def test_malformed_values_fall_back_to_defaults(self, params):
        assert codec.decode(params) == DEFAULT_VIEW_STATE


class TestEncode:
    """Test turning a ViewState back into query parameters."""

    def test_default_state_encodes_to_nothing(self):
        assert codec.encode(DEFAULT_VIEW_STATE) == {}

    def test_only_changed_params_written(self):
        state = ViewState(page=2, search_text='flood')
        assert codec.encode(state) == {'news_page': '2', 'news_search': 'flood'}

    def test_sort_pair_written_together(self):
        state = ViewState(sort_direction=SortDirection.ASC)
        assert codec.encode(state) == {'news_sort': 'createdAt', 'news_sortDir': 'asc'}

    def test_unrelated_params_kept_and_stale_prefixed_params_dropped(self):
        previous = {'lang': 'es', 'news_page': '9', 'news_search': 'old'}
        params = codec.encode(ViewState(page=2), previous)
        assert params == {'lang': 'es', 'news_page': '2'}

    def test_round_trip(self):
        state = ViewState(
            page=4,
            page_size=20,
            sort_field='name',
            sort_direction=SortDirection.ASC,
            search_text='rain',
            status_filter=NewsStatus.FEATURED,
            category_filter='cat-9',
            active_tab=NewsTab.ARTICLES,
        )
        assert codec.decode(codec.encode(state)) == state


class TestTransitions:
    """Test the pure state transitions behind UI events."""

    def test_tab_switch_resets_list_state(self):
        """Test: articles(page=3, search='x') -> categories -> articles is back to page 1, no search."""
        state = ViewState(page=3, search_text='x', active_tab=NewsTab.ARTICLES)

        state = codec.switch_tab(state, NewsTab.CATEGORIES)
        state = codec.switch_tab(state, 'articles')

        assert state.page == 1
        assert state.search_text == ''
        assert state.active_tab == NewsTab.ARTICLES
        assert codec.encode(state) == {'news_tab': 'articles'}

    def test_set_page(self):
        assert codec.set_page(DEFAULT_VIEW_STATE, 5).page == 5
        with pytest.raises(ValueError):
            codec.set_page(DEFAULT_VIEW_STATE, 0)

    def test_set_page_size_returns_to_first_page(self):
        state = codec.set_page_size(ViewState(page=4), 50)
        assert (state.page, state.page_size) == (1, 50)

    def test_set_page_size_rejects_unknown_size(self):
        with pytest.raises(ValueError):
            codec.set_page_size(DEFAULT_VIEW_STATE, 15)

    def test_set_sort(self):
        state = codec.set_sort(ViewState(page=3), 'title', descending=False)
        assert (state.page, state.sort_field, state.sort_direction) == (1, 'title', SortDirection.ASC)

    def test_clearing_sort_restores_default(self):
        state = codec.set_sort(ViewState(sort_field='title', sort_direction=SortDirection.ASC), None)
        assert (state.sort_field, state.sort_direction) == ('createdAt', SortDirection.DESC)

    def test_set_search_trims_and_resets_page(self):
        state = codec.set_search(ViewState(page=2), '  storm ')
        assert (state.page, state.search_text) == (1, 'storm')

    def test_set_filters_keeps_unspecified(self):
        state = ViewState(page=2, status_filter=NewsStatus.ACTIVE, category_filter='c1')
        state = codec.set_filters(state, category='c2')
        assert (state.page, state.status_filter, state.category_filter) == (1, NewsStatus.ACTIVE, 'c2')

    def test_reset_filters_keeps_tab(self):
        state = ViewState(page=2, search_text='x', active_tab=NewsTab.ARTICLES)
        assert codec.reset_filters(state) == ViewState(active_tab=NewsTab.ARTICLES)


class TestRetrievalParams:

    def test_list_params(self):
        state = ViewState(page=2, page_size=20, sort_field='title', sort_direction=SortDirection.ASC,
                          search_text='x', status_filter=NewsStatus.DRAFT, category_filter='c1')
        assert codec.to_list_params(state) == {
            'page': 2,
            'limit': 20,
            'sorting': [{'id': 'title', 'desc': False}],
            'filters': {'search': 'x', 'status': 'draft', 'categoryId': 'c1'},
        }
