"""
Unit tests for configuration loading and validation.

These tests ensure:
  1. Config loads from environment variables correctly
  2. Type conversions work (e.g., strings to floats/ints/bools)
  3. Out-of-range values are rejected with helpful messages
"""

import pytest
from unittest.mock import patch
from groupmatch.config import Config, validate_config
from groupmatch.models import MatchingWeights


def _mock_valid(mock_config):
    mock_config.WEIGHT_ACTIVITY = 5.0
    mock_config.WEIGHT_AGE = 1.4
    mock_config.WEIGHT_DISTANCE = 1.0
    mock_config.WEIGHT_VIBE = 0.0
    mock_config.WEIGHT_RELIGION = 0.6
    mock_config.WEIGHT_ETHNICITY = 1.0
    mock_config.DEFAULT_GROUP_SIZE = 4
    mock_config.MAX_GROUP_SIZE = 12
    mock_config.SAMPLE_POOL_SIZE = 500
    mock_config.FILL_SHORTFALL = True
    mock_config.LANGSMITH_ENABLED = False
    mock_config.LANGSMITH_API_KEY = None


class TestConfigLoading:
    """Test configuration loading from environment."""

    def test_defaults(self):
        """Defaults should match the documented matching weights."""
        config = Config(_env_file=None)
        assert config.WEIGHT_ACTIVITY == 5.0
        assert config.WEIGHT_VIBE == 0.0
        assert config.FILL_SHORTFALL is True
        assert config.DEFAULT_GROUP_SIZE == 4

    @patch.dict("os.environ", {"WEIGHT_AGE": "2.5", "MAX_GROUP_SIZE": "8"})
    def test_numeric_config_conversion(self):
        """Numeric environment variables should be converted."""
        config = Config(_env_file=None)
        assert config.WEIGHT_AGE == 2.5
        assert isinstance(config.MAX_GROUP_SIZE, int)
        assert config.MAX_GROUP_SIZE == 8

    @patch.dict("os.environ", {"FILL_SHORTFALL": "false"})
    def test_boolean_config_conversion(self):
        """Boolean environment variables should be converted correctly."""
        config = Config(_env_file=None)
        assert config.FILL_SHORTFALL is False

    @patch.dict("os.environ", {"WEIGHT_VIBE": "0.7"})
    def test_default_weights_follow_environment(self):
        """default_weights() should reflect overridden env values."""
        weights = Config(_env_file=None).default_weights()
        assert isinstance(weights, MatchingWeights)
        assert weights.vibe == 0.7
        assert weights.activity == 5.0


class TestConfigValidation:
    """Test configuration validation function."""

    @patch("groupmatch.config.config")
    def test_valid_config_returns_status(self, mock_config):
        """Successful validation should return status dict."""
        _mock_valid(mock_config)
        result = validate_config()
        assert set(result) == {"weights", "shortfall_fill", "langsmith"}
        assert result["shortfall_fill"] == "✓ Enabled"

    @patch("groupmatch.config.config")
    def test_negative_weight_rejected(self, mock_config):
        """Weights must be non-negative."""
        _mock_valid(mock_config)
        mock_config.WEIGHT_AGE = -1.0
        with pytest.raises(ValueError, match="WEIGHT_AGE"):
            validate_config()

    @patch("groupmatch.config.config")
    def test_group_size_bounds(self, mock_config):
        """MAX_GROUP_SIZE must cover DEFAULT_GROUP_SIZE."""
        _mock_valid(mock_config)
        mock_config.MAX_GROUP_SIZE = 2
        with pytest.raises(ValueError, match="MAX_GROUP_SIZE"):
            validate_config()

    @patch("groupmatch.config.config")
    def test_langsmith_enabled_requires_key(self, mock_config):
        """LangSmith enabled requires API key."""
        _mock_valid(mock_config)
        mock_config.LANGSMITH_ENABLED = True
        with pytest.raises(ValueError, match="LANGSMITH_ENABLED"):
            validate_config()

    @patch("groupmatch.config.config")
    def test_all_zero_weights_allowed(self, mock_config):
        """All-zero weights are valid; ranking falls back to random ties."""
        _mock_valid(mock_config)
        for name in ("ACTIVITY", "AGE", "DISTANCE", "VIBE", "RELIGION", "ETHNICITY"):
            setattr(mock_config, f"WEIGHT_{name}", 0.0)
        result = validate_config()
        assert result["weights"].startswith("✗")
