"""
Unit tests for configuration and validation
"""

from datetime import datetime, timedelta, timezone

import pytest

from pr_engagement.config import (
    AnalysisConfig, validate_config, validate_weight, validate_depth_diminishing_factor,
    validate_token, date_n_days_ago, end_date,
)
from pr_engagement.errors import ConfigurationError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return AnalysisConfig.from_days('test-org', 'test-repo', 'test_token', days=7, end_days=2, now=NOW)


class TestValidators:
    """Test cases for individual validators."""

    @pytest.mark.parametrize('value, expected', [('3', 3.0), (0.25, 0.25), ('10.5', 10.5)])
    def test_valid_weight(self, value, expected):
        assert validate_weight(value) == expected

    @pytest.mark.parametrize('value', ['0.2', -1, 'abc', None, 'nan'])
    def test_invalid_weight(self, value):
        with pytest.raises(ConfigurationError):
            validate_weight(value)

    @pytest.mark.parametrize('value, expected', [('0.7', 0.7), (0.01, 0.01), ('0.99', 0.99)])
    def test_valid_depth_diminishing_factor(self, value, expected):
        assert validate_depth_diminishing_factor(value) == expected

    @pytest.mark.parametrize('value', ['0', '1', 1.5, -0.5, 'x', None])
    def test_invalid_depth_diminishing_factor(self, value):
        with pytest.raises(ConfigurationError):
            validate_depth_diminishing_factor(value)

    def test_token(self):
        assert validate_token(' abc ') == 'abc'
        with pytest.raises(ConfigurationError):
            validate_token(None)
        with pytest.raises(ConfigurationError):
            validate_token('   ')


class TestWindow:
    """Test cases for window computation."""

    def test_date_n_days_ago(self):
        assert date_n_days_ago(5, NOW) == NOW - timedelta(days=5)

    def test_end_date_defaults_to_now(self):
        assert end_date(0, NOW) == NOW

    def test_end_date_days_back(self):
        assert end_date(3, NOW) == NOW - timedelta(days=3)

    def test_from_days(self, config):
        assert config.start == NOW - timedelta(days=7)
        assert config.end == NOW - timedelta(days=2)
        assert config.n_days == 5
        assert config.window.start == config.start
        assert config.window.end == config.end


class TestAnalysisConfig:
    """Test cases for the full configuration."""

    def test_urls(self, config):
        assert config.api_url == 'https://api.github.com/repos/test-org/test-repo'
        assert config.web_url == 'https://github.com/test-org/test-repo'

    def test_defaults(self, config):
        assert config.breadth_weight == 3.0
        assert config.depth_diminishing_factor == 0.7
        assert config.batch_size == 5
        assert config.max_throttle_retries is None

    def test_valid_config(self, config):
        assert validate_config(config) is config

    def test_missing_token(self, config):
        config.token = ''
        with pytest.raises(ConfigurationError, match='GITHUB_TOKEN'):
            validate_config(config)

    def test_missing_repository(self, config):
        config.repo = ''
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_out_of_range_weight(self, config):
        config.breadth_weight = 0.1
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_out_of_range_factor(self, config):
        config.depth_diminishing_factor = 1.0
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_empty_window(self):
        config = AnalysisConfig.from_days('o', 'r', 't', days=2, end_days=2, now=NOW)
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_invalid_batch_size(self, config):
        config.batch_size = 0
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_negative_throttle_retries(self, config):
        config.max_throttle_retries = -1
        with pytest.raises(ConfigurationError):
            validate_config(config)
