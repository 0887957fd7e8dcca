"""
Keyword density analysis over generated section copy.

Density is measured on the English copy of every generated section taken
together: each keyword's whole-word occurrence count divided by the total
word count of all sections, as a percentage.
"""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Iterable, Optional, Union

from .models import DensityReport, GeneratedContent, KeywordDensityEntry

if TYPE_CHECKING:
    from .orchestrator import GenerationSession

ContentSource = Union[Mapping, Iterable[GeneratedContent]]


def format_percentage(value: float) -> str:
    """Format a percentage with two decimals, e.g. 60 -> '60.00%'."""
    return f"{value:.2f}%"


def keyword_pattern(keyword: str) -> "re.Pattern[str]":
    """
    Compile a whole-word pattern for a keyword.

    The keyword is escaped so regex metacharacters match literally. Word
    boundaries are expressed as lookarounds, which also work for keywords
    that start or end with punctuation (e.g. "c++").
    """
    return re.compile(rf"(?<!\w){re.escape(keyword.lower())}(?!\w)")


def count_keyword(keyword: str, corpus: str) -> int:
    """Count whole-word occurrences of a keyword in lower-cased text."""
    if not keyword.strip():
        return 0
    return len(keyword_pattern(keyword).findall(corpus))


def build_corpus(contents: ContentSource) -> str:
    """Join the English copy of all contents into one lower-cased string."""
    if isinstance(contents, Mapping):
        contents = contents.values()
    return " ".join(content.english for content in contents).lower()


def _entries_for(
    keywords: list[str],
    corpus: str,
    total_words: int,
    is_mandatory: bool,
) -> list[KeywordDensityEntry]:
    entries = []
    for keyword in keywords:
        count = count_keyword(keyword, corpus)
        entries.append(KeywordDensityEntry(
            keyword=keyword,
            count=count,
            density=format_percentage(count / total_words * 100),
            is_mandatory=is_mandatory,
        ))
    return entries


def _sum_densities(entries: list[KeywordDensityEntry]) -> str:
    return format_percentage(sum(entry.density_value for entry in entries))


def analyze_keyword_density(
    contents: ContentSource,
    mandatory_keywords: list[str],
    optional_keywords: list[str],
    mandatory_target: Optional[float] = None,
    optional_target: Optional[float] = None,
) -> DensityReport:
    """
    Compute per-keyword density across all generated copy.

    Args:
        contents: Generated content, as a ResultStore, a mapping of section
            id to GeneratedContent, or any iterable of GeneratedContent.
        mandatory_keywords: Mandatory keywords, in display order.
        optional_keywords: Optional pool keywords, in display order.
        mandatory_target: Target density carried into the report.
        optional_target: Target density carried into the report.

    Returns:
        DensityReport with mandatory entries first, then optional ones.
        An empty corpus yields no entries and "0.00%" sums.
    """
    corpus = build_corpus(contents)
    total_words = len(corpus.split())

    report = DensityReport(
        total_words=total_words,
        mandatory_target=mandatory_target,
        optional_target=optional_target,
    )
    if total_words == 0:
        return report

    mandatory = _entries_for(mandatory_keywords, corpus, total_words, is_mandatory=True)
    optional = _entries_for(optional_keywords, corpus, total_words, is_mandatory=False)

    report.entries = mandatory + optional
    report.mandatory_sum = _sum_densities(mandatory)
    report.optional_sum = _sum_densities(optional)
    return report


def analyze_session(session: "GenerationSession") -> DensityReport:
    """Density report for a GenerationSession's results and keyword config."""
    config = session.config
    return analyze_keyword_density(
        session.results,
        config.mandatory_list,
        config.optional_pool,
        mandatory_target=config.mandatory_target_density,
        optional_target=config.optional_target_density,
    )
