"""
Tests for selection/pool.py - seed draws and pool filters.
"""

import random
from datetime import date
from unittest.mock import MagicMock

from selection.models import MOVIE, SERIES, CatalogItem
from selection.pool import (
    analyze_collection_watch_status,
    filter_custom_order_items,
    filter_holiday_items,
    filter_ignored_collections,
    keep_if_nonempty,
    select_from_pool,
    select_movie_seed,
    select_seed,
)


def _movie(key, view_count=0, collections=(), labels=()):
    return CatalogItem(rating_key=key, title=f"Movie {key}", kind=MOVIE, view_count=view_count,
                       collections=tuple(collections), labels=tuple(labels))


def _series(key, leaf_count=10, viewed=0, collections=()):
    return CatalogItem(rating_key=key, title=f"Show {key}", kind=SERIES, leaf_count=leaf_count,
                       viewed_leaf_count=viewed, collections=tuple(collections))


class TestSelectFromPool:
    """Tests for select_from_pool()."""

    def test_empty_pool(self):
        """An empty pool gives None."""
        assert select_from_pool([], random.Random(1)) is None

    def test_prefers_unwatched(self):
        """The single unwatched item is always drawn."""
        pool = [_movie('1', view_count=1), _movie('2'), _movie('3', view_count=4)]
        rng = random.Random(3)
        picks = {select_from_pool(pool, rng).rating_key for _ in range(100)}
        assert picks == {'2'}

    def test_all_watched_still_returns_item(self):
        """A fully watched pool still yields an item."""
        pool = [_movie('1', view_count=1), _movie('2', view_count=1)]
        assert select_from_pool(pool, random.Random(3)).rating_key in {'1', '2'}


class TestSelectSeed:
    """Tests for select_seed() rejection sampling."""

    def test_never_returns_watched_series_when_alternative_exists(self):
        """Fully watched series are redrawn while an unwatched one exists."""
        watched = _series('show2', leaf_count=8, viewed=8)
        unwatched = _series('show3', leaf_count=8, viewed=2)
        pool = [watched, unwatched]

        for seed in range(200):
            assert select_seed(pool, random.Random(seed)).rating_key == 'show3'

    def test_many_watched_one_unwatched(self):
        """A lone unwatched movie is found among many watched ones."""
        pool = [_movie(str(i), view_count=1) for i in range(50)] + [_movie('fresh')]

        for seed in range(50):
            assert select_seed(pool, random.Random(seed)).rating_key == 'fresh'

    def test_rejections_are_bounded(self):
        """After max_attempts rejections one more draw is accepted as is."""
        pool = [_movie('1', view_count=1), _movie('2', view_count=1)]
        rng = MagicMock()
        rng.choice.side_effect = lambda items: items[0]

        result = select_seed(pool, rng, max_attempts=3)

        assert result.rating_key == '1'
        # Three rejected draws plus the fallback draw
        assert rng.choice.call_count == 4

    def test_empty_pool(self):
        """An empty pool gives None."""
        assert select_seed([], random.Random(1)) is None


class TestPoolFilters:
    """Tests for the pool filters."""

    def test_keep_if_nonempty_uses_filtered(self):
        """A non-empty filter result is kept."""
        assert keep_if_nonempty([_movie('1')], [_movie('1'), _movie('2')], 'x') == [_movie('1')]

    def test_keep_if_nonempty_falls_back_to_original(self):
        """An empty filter result gives back the original pool."""
        original = [_movie('1')]
        assert keep_if_nonempty([], original, 'x') == original

    def test_ignored_collections_case_insensitive(self):
        """TV ignore matching ignores case."""
        items = [_series('1', collections=['Anime']), _series('2', collections=['Drama'])]

        kept = filter_ignored_collections(items, ['anime'])

        assert [i.rating_key for i in kept] == ['2']

    def test_ignored_collections_case_sensitive(self):
        """Movie ignore matching is exact."""
        items = [_movie('1', collections=['Marvel']), _movie('2', collections=['marvel'])]

        kept = filter_ignored_collections(items, ['Marvel'], case_sensitive=True)

        assert [i.rating_key for i in kept] == ['2']

    def test_no_ignored_collections_keeps_all(self):
        """No ignored names keeps every item."""
        items = [_movie('1', collections=['A'])]
        assert filter_ignored_collections(items, []) == items

    def test_custom_order_items_removed(self):
        """Items queued in custom orders are removed."""
        items = [_movie('1'), _movie('2')]
        assert [i.rating_key for i in filter_custom_order_items(items, {'1'})] == ['2']

    def test_holiday_movies_removed_outside_december(self):
        """Christmas-labelled movies are removed outside December."""
        items = [_movie('1', labels=['Christmas Classics']), _movie('2')]

        kept = filter_holiday_items(items, date(2024, 7, 1))

        assert [i.rating_key for i in kept] == ['2']

    def test_holiday_movies_kept_in_december(self):
        """Christmas-labelled movies stay in December."""
        items = [_movie('1', labels=['christmas']), _movie('2')]
        assert len(filter_holiday_items(items, date(2024, 12, 10))) == 2

    def test_holiday_filter_disabled(self):
        """A disabled holiday filter keeps everything."""
        items = [_movie('1', labels=['christmas'])]
        assert len(filter_holiday_items(items, date(2024, 7, 1), enabled=False)) == 1


class TestMovieSeed:
    """Tests for partially watched collection prioritization."""

    def _pool(self):
        return [
            _movie('seen', view_count=1, collections=['Started']),
            _movie('next', collections=['Started']),
            _movie('fresh', collections=['Untouched']),
            _movie('solo'),
        ]

    def test_analyze_collection_watch_status(self):
        """Collections split into partially watched and untouched."""
        partially, fully_unwatched = analyze_collection_watch_status(self._pool())
        assert partially == {'Started'}
        assert fully_unwatched == {'Untouched'}

    def test_always_prioritize_started_collections(self):
        """At 100 percent a started collection always wins."""
        pool = self._pool()
        for seed in range(50):
            assert select_movie_seed(pool, random.Random(seed), 100).rating_key == 'next'

    def test_never_prioritize_started_collections(self):
        """At 0 percent only the remaining movies are drawn."""
        pool = self._pool()
        picks = {select_movie_seed(pool, random.Random(seed), 0).rating_key for seed in range(100)}
        assert picks == {'fresh', 'solo'}

    def test_only_started_collections_available(self):
        """Started collections are used when nothing else is unwatched."""
        pool = [_movie('seen', view_count=1, collections=['A']), _movie('next', collections=['A'])]
        assert select_movie_seed(pool, random.Random(1), 0).rating_key == 'next'

    def test_all_watched_falls_back_to_pool(self):
        """A fully watched pool falls back to a plain draw."""
        pool = [_movie('1', view_count=1)]
        assert select_movie_seed(pool, random.Random(1)).rating_key == '1'

    def test_empty_pool(self):
        """An empty pool gives None."""
        assert select_movie_seed([], random.Random(1)) is None

    def test_movies_without_series_collections_preferred(self):
        """Unwatched movies outside series-holding collections are drawn first."""
        pool = [_movie('tie-in', collections=['Trek']), _movie('plain', collections=['Heist'])]

        for seed in range(50):
            picked = select_movie_seed(pool, random.Random(seed), 0, series_collections={'Trek'})
            assert picked.rating_key == 'plain'

    def test_every_unwatched_movie_has_series_falls_back(self):
        """When every unwatched movie links to a series, they are all still eligible."""
        pool = [_movie('a', collections=['Trek']), _movie('b', collections=['Wars'])]

        picks = {select_movie_seed(pool, random.Random(seed), 0, series_collections={'Trek', 'Wars'}).rating_key
                 for seed in range(100)}

        assert picks == {'a', 'b'}
