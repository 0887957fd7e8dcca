"""
Prompt construction for section copy generation.

A section prompt is the section's base template followed by appended
instruction blocks. Blocks are only ever appended; earlier text is never
rewritten after the count substitution.
"""

import logging
import random
from typing import Optional, Union

from .config import GenerationConfig
from .keyword_parser import join_keywords, select_optional_keywords
from .sections import COUNT_PLACEHOLDER, get_section_config

logger = logging.getLogger(__name__)

DEFAULT_REWRITE_INSTRUCTION = "Improve quality"


def _format_density(value: float) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    return f"{value:g}"


def build_seo_block(
    mandatory: list[str],
    optional: list[str],
    mandatory_density: float,
    optional_density: float,
) -> str:
    """Build the keyword/density instruction block."""
    return f"""

[SEO Instructions]
- Mandatory Keywords (MUST include these words): {join_keywords(mandatory)}
- Selected Optional Keywords (Try to include): {join_keywords(optional)}
- Target Mandatory Keyword Density for the entire page is approx {_format_density(mandatory_density)}%.
- Target Optional Keyword Density for the entire page is approx {_format_density(optional_density)}%."""


def build_rewrite_block(instruction: Optional[str], word_count: Optional[Union[int, str]]) -> str:
    """Build the single-section rewrite block."""
    block = f"""

[REWRITE INSTRUCTION]
This is a specific rewrite request for this section ONLY.
Focus on these specific changes: {instruction or DEFAULT_REWRITE_INSTRUCTION}."""
    if word_count:
        block += f"\nTarget word count for this section: {word_count}"
    return block


class PromptBuilder:
    """
    Builds section prompts from a session configuration.

    The builder reads the config on every call, so edits to keywords,
    densities or counts are picked up by the next prompt.
    """

    def __init__(self, config: GenerationConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng

    def build(
        self,
        section_id: str,
        is_rewrite: bool = False,
        rewrite_instruction: Optional[str] = None,
        rewrite_word_count: Optional[Union[int, str]] = None,
    ) -> str:
        """
        Compose the final prompt for one section.

        Args:
            section_id: Catalogue id of the section.
            is_rewrite: Append the rewrite block.
            rewrite_instruction: Requested change for a rewrite.
            rewrite_word_count: Optional target word count for a rewrite.

        Returns:
            The prompt, or an empty string if the section id is unknown.
        """
        section = get_section_config(section_id)
        if section is None:
            logger.warning("No section config for '%s', prompt left empty", section_id)
            return ""

        config = self.config
        prompt = section.base_prompt

        if section.has_count:
            prompt = prompt.replace(COUNT_PLACEHOLDER, str(config.count_for(section_id)))

        optional = select_optional_keywords(config.optional_keywords, rng=self.rng)
        logger.debug("Optional keywords for %s: %s", section_id, optional)

        prompt += build_seo_block(
            config.mandatory_list,
            optional,
            config.mandatory_target_density,
            config.optional_target_density,
        )

        if config.custom_prompt:
            prompt += f"\n\n[Additional User Instructions]: {config.custom_prompt}"

        if is_rewrite:
            prompt += build_rewrite_block(rewrite_instruction, rewrite_word_count)

        return prompt


def build_section_prompt(
    section_id: str,
    config: GenerationConfig,
    is_rewrite: bool = False,
    rewrite_instruction: Optional[str] = None,
    rewrite_word_count: Optional[Union[int, str]] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Convenience wrapper around PromptBuilder.build."""
    return PromptBuilder(config, rng=rng).build(
        section_id,
        is_rewrite=is_rewrite,
        rewrite_instruction=rewrite_instruction,
        rewrite_word_count=rewrite_word_count,
    )
