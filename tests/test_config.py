# -*- coding: utf-8 -*-
"""
Tests for GenerationConfig defaults, validation and helpers.
"""

import pytest

from seo_section_writer.config import GenerationConfig
from seo_section_writer.sections import FALLBACK_COUNT, section_ids


class TestGenerationConfig:
    """Tests for GenerationConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = GenerationConfig()
        assert config.mandatory_target_density == 2.0
        assert config.optional_target_density == 1.0
        assert config.inter_call_delay == 1.5
        assert config.selected_sections == section_ids()
        assert config.section_counts["showcase"] == 6
        assert config.section_counts["feature"] == 4
        assert config.api_key is None

    def test_defaults_are_not_shared(self):
        a = GenerationConfig()
        b = GenerationConfig()
        a.selected_sections.remove("hero")
        a.section_counts["feature"] = 9
        assert "hero" in b.selected_sections
        assert b.section_counts["feature"] == 4

    def test_keyword_properties(self):
        config = GenerationConfig(mandatory_keywords="a, b，a", optional_keywords="x\ny")
        assert config.mandatory_list == ["a", "b", "a"]
        assert config.optional_pool == ["x", "y"]

    def test_count_for_precedence(self):
        config = GenerationConfig(section_counts={"feature": 7})
        assert config.count_for("feature") == 7
        assert config.count_for("showcase") == 6  # section default
        assert config.count_for("hero") == FALLBACK_COUNT

    def test_with_counts_returns_copy(self):
        config = GenerationConfig()
        updated = config.with_counts(feature=8)
        assert updated.count_for("feature") == 8
        assert config.count_for("feature") == 4

    @pytest.mark.parametrize("kwargs,message", [
        ({"mandatory_target_density": -1}, "mandatory_target_density"),
        ({"optional_target_density": -0.5}, "optional_target_density"),
        ({"inter_call_delay": -1}, "inter_call_delay"),
        ({"max_tokens": 0}, "max_tokens"),
        ({"selected_sections": ["hero", "pricing"]}, "Unknown section"),
        ({"section_counts": {"feature": 0}}, "between 1 and 20"),
        ({"section_counts": {"feature": 21}}, "between 1 and 20"),
    ])
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            GenerationConfig(**kwargs)

    def test_zero_delay_allowed(self):
        assert GenerationConfig(inter_call_delay=0).inter_call_delay == 0

    def test_from_keyword_file(self, sample_keywords_csv):
        config = GenerationConfig.from_keyword_file(sample_keywords_csv, custom_prompt="Be brief.")
        assert config.mandatory_list == ["seo tool", "ai writing", "content generator"]
        assert config.optional_pool == ["rank faster", "free trial"]
        assert config.custom_prompt == "Be brief."
