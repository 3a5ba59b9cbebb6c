"""
Tests for the model registry.
"""

import pytest

from weather_oracle.config import MODEL_INFO, get_model_info, list_models
from weather_oracle.core import ModelName


class TestModelRegistry:
    """Tests for model metadata lookup."""

    def test_every_model_is_registered(self):
        assert set(MODEL_INFO) == set(ModelName)

    def test_lookup_by_enum(self):
        info = get_model_info(ModelName.ECMWF)
        assert info.display_name == "ECMWF IFS"
        assert info.short_name == "ECMWF"
        assert info.resolution == "9km"

    def test_lookup_by_string_is_case_insensitive(self):
        assert get_model_info("METEOFRANCE").short_name == "ARPEGE"
        assert get_model_info("gem").update_frequency == "12 hours"

    def test_unknown_model(self):
        with pytest.raises(KeyError, match="not found"):
            get_model_info("hrrr")

    def test_list_models(self):
        assert list_models() == ["ecmwf", "gfs", "icon", "meteofrance", "ukmo", "jma", "gem"]
