"""
SEO Section Writer

Generates SEO landing-page copy section by section with an LLM:
- Builds per-section prompts with mandatory and sampled optional keywords
- Runs sections sequentially with rate-limit delays and per-section failure isolation
- Reports keyword density of the generated English copy against targets
"""

__version__ = "1.0.0"
__author__ = "SEO Section Writer Team"

from .config import GenerationConfig

from .models import (
    BatchReport,
    BilingualText,
    DensityReport,
    GeneratedContent,
    GenerationRequest,
    KeywordDensityEntry,
    SectionConfig,
    SectionOutcome,
    SectionStatus,
)

from .sections import (
    SECTION_CONFIGS,
    SYSTEM_INSTRUCTION,
    get_section_config,
    section_ids,
)

from .keyword_parser import (
    parse_keywords,
    select_optional_keywords,
)

from .prompt_builder import (
    PromptBuilder,
    build_section_prompt,
)

from .orchestrator import (
    GenerationError,
    GenerationInProgressError,
    GenerationOrchestrator,
    GenerationSession,
    ResultStore,
    SectionGenerationError,
    UnknownSectionError,
)

from .density import (
    analyze_keyword_density,
    analyze_session,
)

__all__ = [
    # Configuration
    "GenerationConfig",
    # Models
    "BatchReport",
    "BilingualText",
    "DensityReport",
    "GeneratedContent",
    "GenerationRequest",
    "KeywordDensityEntry",
    "SectionConfig",
    "SectionOutcome",
    "SectionStatus",
    # Section catalogue
    "SECTION_CONFIGS",
    "SYSTEM_INSTRUCTION",
    "get_section_config",
    "section_ids",
    # Keywords
    "parse_keywords",
    "select_optional_keywords",
    # Prompts
    "PromptBuilder",
    "build_section_prompt",
    # Orchestration
    "GenerationError",
    "GenerationInProgressError",
    "GenerationOrchestrator",
    "GenerationSession",
    "ResultStore",
    "SectionGenerationError",
    "UnknownSectionError",
    # Density
    "analyze_keyword_density",
    "analyze_session",
]
