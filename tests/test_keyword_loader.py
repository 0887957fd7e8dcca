"""
Tests for keyword_loader module.
"""

import pandas as pd
import pytest

from seo_section_writer.keyword_loader import (
    KeywordLoadError,
    KeywordSets,
    load_keyword_sets,
    parse_keyword_dataframe,
)


class TestLoadKeywordSets:
    """Tests for load_keyword_sets function."""

    def test_load_csv(self, sample_keywords_csv):
        """Test loading keywords from CSV."""
        sets = load_keyword_sets(sample_keywords_csv)

        assert sets.mandatory == ["seo tool", "ai writing", "content generator"]
        assert sets.optional == ["rank faster", "free trial"]
        assert len(sets) == 5

    def test_load_excel(self, sample_keywords_excel):
        """Test loading keywords from Excel."""
        sets = load_keyword_sets(sample_keywords_excel)

        assert sets.mandatory == ["seo tool"]
        assert sets.optional == ["landing page", "copywriting"]

    def test_file_not_found(self, tmp_path):
        with pytest.raises(KeywordLoadError, match="File not found"):
            load_keyword_sets(tmp_path / "missing.csv")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "keywords.txt"
        path.write_text("seo tool\n", encoding="utf-8")

        with pytest.raises(KeywordLoadError, match="Unsupported file format"):
            load_keyword_sets(path)

    def test_csv_without_type_column_is_all_mandatory(self, tmp_path):
        path = tmp_path / "plain.csv"
        path.write_text("Keywords\nseo tool\nai writing\n", encoding="utf-8")

        sets = load_keyword_sets(path)

        assert sets.mandatory == ["seo tool", "ai writing"]
        assert sets.optional == []

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes("keyword\ncaf\xe9 menu\n".encode("latin-1"))

        sets = load_keyword_sets(path)

        assert sets.mandatory == ["caf\xe9 menu"]


class TestParseKeywordDataframe:
    """Tests for parse_keyword_dataframe."""

    def test_type_aliases(self):
        df = pd.DataFrame({
            "term": ["a", "b", "c", "d"],
            "priority": ["Required", "secondary", "POOL", "unknown"],
        })

        sets = parse_keyword_dataframe(df)

        assert sets == KeywordSets(mandatory=["a", "d"], optional=["b", "c"])

    def test_blank_rows_skipped(self):
        df = pd.DataFrame({"keyword": ["  seo  ", None, "   ", "rank"]})
        sets = parse_keyword_dataframe(df)
        assert sets.mandatory == ["seo", "rank"]

    def test_empty_frame(self):
        with pytest.raises(KeywordLoadError, match="empty"):
            parse_keyword_dataframe(pd.DataFrame())

    def test_missing_keyword_column(self):
        df = pd.DataFrame({"volume": [10, 20]})
        with pytest.raises(KeywordLoadError, match="No keyword column found"):
            parse_keyword_dataframe(df)

    def test_no_valid_keywords(self):
        df = pd.DataFrame({"keyword": [None, "  "]})
        with pytest.raises(KeywordLoadError, match="No valid keywords"):
            parse_keyword_dataframe(df)
