"""Tests for utils/config.py"""

import os
import tempfile
from unittest.mock import patch

import pytest
import yaml

from utils.config import (
    COLLECTION_NAME_SUFFIXES,
    DEFAULT_MAX_COLLECTION_HOPS,
    DEFAULT_PARTIALLY_WATCHED_PERCENT,
    get_config_section,
    get_order_weights_config,
    get_selection_config,
    load_config,
)
from selection.models import OrderWeights
from selection.settings import SelectionSettings, settings_from_catalog, settings_from_config


class TestGetConfigSection:
    """Tests for get_config_section function"""

    def test_returns_lowercase_key(self):
        """The lowercase section is returned."""
        config = {'selection': {'holiday_filter': True}}
        assert get_config_section(config, 'selection') == {'holiday_filter': True}

    def test_returns_uppercase_key(self):
        """An uppercase section name is accepted."""
        config = {'PLEX': {'url': 'http://plex'}}
        assert get_config_section(config, 'plex') == {'url': 'http://plex'}

    def test_missing_returns_default(self):
        """A missing section gives the default."""
        assert get_config_section({}, 'selection') == {}
        assert get_config_section({}, 'selection', {'a': 1}) == {'a': 1}

    def test_empty_yaml_section_returns_default(self):
        """An empty YAML section gives the default."""
        assert get_config_section({'selection': None}, 'selection') == {}


class TestGetOrderWeightsConfig:
    """Tests for get_order_weights_config function"""

    def test_defaults(self):
        """Missing weights give the 50/50/0 defaults."""
        assert get_order_weights_config({}) == {'tv': 50, 'movies': 50, 'custom': 0}

    def test_reads_values(self):
        """Configured weights are read."""
        config = {'selection': {'order_weights': {'tv': 30, 'movies': 50, 'custom': 20}}}
        assert get_order_weights_config(config) == {'tv': 30, 'movies': 50, 'custom': 20}

    def test_not_renormalized(self):
        """Weights are not scaled to 100."""
        config = {'selection': {'order_weights': {'tv': 30, 'movies': 30}}}
        assert get_order_weights_config(config) == {'tv': 30, 'movies': 30, 'custom': 0}

    @patch('utils.config.log_warning')
    def test_negative_clamped(self, mock_warning):
        """Negative weights clamp to 0 with a warning."""
        config = {'selection': {'order_weights': {'tv': -10}}}
        assert get_order_weights_config(config)['tv'] == 0
        mock_warning.assert_called_once()

    @patch('utils.config.log_warning')
    def test_invalid_uses_default(self, mock_warning):
        """A non-numeric weight falls back to its default."""
        config = {'selection': {'order_weights': {'movies': 'lots'}}}
        assert get_order_weights_config(config)['movies'] == 50
        mock_warning.assert_called_once()


class TestGetSelectionConfig:
    """Tests for get_selection_config function"""

    def test_defaults(self):
        """An empty config gives every selection default."""
        selection = get_selection_config({})

        assert selection['default_collection'] is None
        assert selection['ignored_tv_collections'] == []
        assert selection['ignored_movie_collections'] == []
        assert selection['partially_watched_collection_percent'] == DEFAULT_PARTIALLY_WATCHED_PERCENT
        assert selection['holiday_filter'] is False
        assert selection['max_collection_hops'] == DEFAULT_MAX_COLLECTION_HOPS
        assert selection['collection_suffixes'] == list(COLLECTION_NAME_SUFFIXES)

    def test_comma_separated_ignored_collections(self):
        """Comma separated names are split and trimmed."""
        config = {'selection': {'ignored_tv_collections': 'Anime, Kids ,'}}
        assert get_selection_config(config)['ignored_tv_collections'] == ['Anime', 'Kids']

    def test_list_ignored_collections(self):
        """A YAML list of names is kept."""
        config = {'selection': {'ignored_movie_collections': ['Marvel', 'DC']}}
        assert get_selection_config(config)['ignored_movie_collections'] == ['Marvel', 'DC']

    def test_negative_hops_clamped(self):
        """Negative hop counts clamp to 0."""
        config = {'selection': {'max_collection_hops': -3}}
        assert get_selection_config(config)['max_collection_hops'] == 0

    @patch('utils.config.log_warning')
    def test_invalid_hops_uses_default(self, mock_warning):
        """A non-numeric hop count falls back to the default."""
        config = {'selection': {'max_collection_hops': 'many'}}
        assert get_selection_config(config)['max_collection_hops'] == DEFAULT_MAX_COLLECTION_HOPS
        mock_warning.assert_called_once()

    def test_empty_suffix_list_is_kept(self):
        """An explicit empty suffix list is not replaced."""
        config = {'selection': {'collection_suffixes': []}}
        assert get_selection_config(config)['collection_suffixes'] == []


class TestSettingsFromConfig:
    """Tests for selection.settings built from config"""

    def test_builds_settings(self):
        """Settings are built from the selection section."""
        config = {'selection': {
            'default_collection': 'Up Next',
            'order_weights': {'tv': 40, 'movies': 60, 'custom': 0},
            'ignored_tv_collections': ['Anime'],
            'holiday_filter': True,
            'max_collection_hops': 2,
        }}

        settings = settings_from_config(config)

        assert settings.default_collection == 'Up Next'
        assert settings.order_weights == OrderWeights(tv=40, movies=60, custom=0)
        assert settings.ignored_tv_collections == ('Anime',)
        assert settings.holiday_filter is True
        assert settings.max_collection_hops == 2

    def test_catalog_values_replace_stored_settings(self):
        """Catalog values replace the stored ones and the rest is kept."""
        class Catalog:
            def get_configured_default_collection(self):
                return 'Queue'

            def get_order_type_weights(self):
                return OrderWeights(tv=0, movies=100, custom=0)

        base = SelectionSettings(default_collection='Old', max_collection_hops=3)
        settings = settings_from_catalog(Catalog(), base)

        assert settings.default_collection == 'Queue'
        assert settings.order_weights.movies == 100
        assert settings.max_collection_hops == 3


class TestLoadConfig:
    """Tests for load_config function"""

    def _write(self, data):
        f = tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False)
        yaml.safe_dump(data, f)
        f.close()
        return f.name

    def test_loads_yaml(self):
        """The YAML file is parsed."""
        path = self._write({'plex': {'url': 'http://plex:32400', 'token': 'abc'}})
        try:
            with patch.dict(os.environ, {}, clear=True):
                config = load_config(path)
            assert config['plex']['url'] == 'http://plex:32400'
        finally:
            os.unlink(path)

    def test_env_overrides(self):
        """PLEX_URL and PLEX_TOKEN override the file."""
        path = self._write({'plex': {'url': 'http://plex:32400', 'token': 'abc'}})
        try:
            with patch.dict(os.environ, {'PLEX_URL': 'http://other:32400', 'PLEX_TOKEN': 'xyz'}):
                config = load_config(path)
            assert config['plex'] == {'url': 'http://other:32400', 'token': 'xyz'}
        finally:
            os.unlink(path)

    def test_env_creates_missing_section(self):
        """Env overrides create the plex section when missing."""
        path = self._write({})
        try:
            with patch.dict(os.environ, {'PLEX_TOKEN': 'xyz'}):
                config = load_config(path)
            assert config['plex']['token'] == 'xyz'
        finally:
            os.unlink(path)

    def test_missing_file_raises(self):
        """A missing file raises OSError."""
        with pytest.raises(OSError):
            load_config('/nonexistent/config.yml')
