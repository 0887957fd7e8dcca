# -*- coding: utf-8 -*-
"""
Session configuration for SEO Section Writer.

GenerationConfig holds everything the user controls for one copywriting
session: keyword sets, density targets, the global custom instruction,
which sections to generate and how many items each one gets. It is passed
explicitly to the prompt builder, the orchestrator and the analyzer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .keyword_parser import parse_keywords
from .sections import FALLBACK_COUNT, default_section_counts, get_section_config, section_ids


DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Pause between consecutive generation calls in a batch (rate limiting)
DEFAULT_INTER_CALL_DELAY = 1.5

# Per-section item counts accepted from users
MIN_SECTION_COUNT = 1
MAX_SECTION_COUNT = 20


@dataclass
class GenerationConfig:
    """
    User-controlled settings for one generation session.

    Attributes:
        mandatory_keywords: Delimited text of keywords that must appear in
            every section's copy.
        optional_keywords: Delimited text of the optional keyword pool. A
            random subset of two is injected into each prompt.
        mandatory_target_density: Target page-wide density (%) for the
            mandatory keywords. Reported, never enforced.
        optional_target_density: Target page-wide density (%) for the
            optional keywords.
        custom_prompt: Free-text instruction appended to every prompt.
        selected_sections: Section ids to generate, in generation order.
        section_counts: Item counts for sections that accept a count.
        api_key: Caller-supplied credential forwarded with each request.
            None means the collaborator uses its own default key.
        model: Model identifier for the LLM collaborator.
        inter_call_delay: Seconds to wait between consecutive calls.
        max_tokens: Maximum tokens per generation response.
    """

    mandatory_keywords: str = ""
    optional_keywords: str = ""

    mandatory_target_density: float = 2.0
    optional_target_density: float = 1.0

    custom_prompt: str = ""

    selected_sections: list[str] = field(default_factory=section_ids)
    section_counts: dict[str, int] = field(default_factory=default_section_counts)

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    inter_call_delay: float = DEFAULT_INTER_CALL_DELAY
    max_tokens: int = 4096

    @property
    def mandatory_list(self) -> list[str]:
        """Parsed mandatory keywords (duplicates kept)."""
        return parse_keywords(self.mandatory_keywords)

    @property
    def optional_pool(self) -> list[str]:
        """Parsed optional keyword pool (duplicates kept)."""
        return parse_keywords(self.optional_keywords)

    def count_for(self, section_id: str) -> int:
        """Item count for a section: configured, then section default, then 3."""
        count = self.section_counts.get(section_id)
        if count:
            return count
        section = get_section_config(section_id)
        if section is not None and section.default_count:
            return section.default_count
        return FALLBACK_COUNT

    def __post_init__(self):
        """Validate configuration values."""
        if self.mandatory_target_density < 0:
            raise ValueError(
                f"mandatory_target_density must be >= 0, got {self.mandatory_target_density}"
            )
        if self.optional_target_density < 0:
            raise ValueError(
                f"optional_target_density must be >= 0, got {self.optional_target_density}"
            )
        if self.inter_call_delay < 0:
            raise ValueError(f"inter_call_delay must be >= 0, got {self.inter_call_delay}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")

        unknown = [s for s in self.selected_sections if get_section_config(s) is None]
        if unknown:
            raise ValueError(
                f"Unknown section id(s): {', '.join(unknown)}. "
                f"Expected any of: {', '.join(section_ids())}"
            )

        for section_id, count in self.section_counts.items():
            if not MIN_SECTION_COUNT <= count <= MAX_SECTION_COUNT:
                raise ValueError(
                    f"Count for '{section_id}' must be between {MIN_SECTION_COUNT} "
                    f"and {MAX_SECTION_COUNT}, got {count}"
                )

    def with_counts(self, **counts: int) -> "GenerationConfig":
        """Return a copy with some section counts overridden."""
        merged = dict(self.section_counts)
        merged.update(counts)
        return GenerationConfig(
            mandatory_keywords=self.mandatory_keywords,
            optional_keywords=self.optional_keywords,
            mandatory_target_density=self.mandatory_target_density,
            optional_target_density=self.optional_target_density,
            custom_prompt=self.custom_prompt,
            selected_sections=list(self.selected_sections),
            section_counts=merged,
            api_key=self.api_key,
            model=self.model,
            inter_call_delay=self.inter_call_delay,
            max_tokens=self.max_tokens,
        )

    @classmethod
    def from_keyword_file(
        cls,
        file_path: Union[str, Path],
        sheet_name: Optional[str] = None,
        **overrides,
    ) -> "GenerationConfig":
        """Create a config whose keyword sets come from a CSV/Excel file.

        Args:
            file_path: Keyword file (see keyword_loader.load_keyword_sets).
            sheet_name: Optional sheet for Excel files.
            **overrides: Any other config values.

        Returns:
            GenerationConfig with mandatory/optional keywords filled in.
        """
        from .keyword_loader import load_keyword_sets

        keyword_sets = load_keyword_sets(file_path, sheet_name=sheet_name)
        defaults = {
            "mandatory_keywords": "\n".join(keyword_sets.mandatory),
            "optional_keywords": "\n".join(keyword_sets.optional),
        }
        defaults.update(overrides)
        return cls(**defaults)
