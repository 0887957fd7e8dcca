"""
Generation orchestration for SEO Section Writer.

This module drives the generation collaborator across the selected page
sections:
- Sections are queued and processed one at a time by a single worker
- A fixed delay separates consecutive calls (rate limiting)
- A failing section is recorded and skipped; the batch always completes
- Single-section rewrites replace one result and surface failures

Sleep and clock are injected so callers (and tests) control timing.
"""

import logging
import random
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional, Union

from .config import GenerationConfig
from .models import (
    BatchReport,
    BilingualText,
    GeneratedContent,
    GenerationRequest,
    SectionOutcome,
    SectionStatus,
)
from .prompt_builder import PromptBuilder
from .sections import get_section_config

logger = logging.getLogger(__name__)


# Generation collaborator: prompt in, bilingual copy out, raises on failure
Generator = Callable[[GenerationRequest], BilingualText]


class GenerationError(Exception):
    """Base class for orchestration errors."""
    pass


class GenerationInProgressError(GenerationError):
    """Raised when an operation starts while another is still in flight."""
    pass


class UnknownSectionError(GenerationError):
    """Raised when a rewrite targets a section id with no configuration."""
    pass


class SectionGenerationError(GenerationError):
    """Raised when a single-section rewrite fails."""

    def __init__(self, section_id: str, message: str):
        super().__init__(f"Rewrite of '{section_id}' failed: {message}")
        self.section_id = section_id
        self.reason = message


def epoch_millis() -> int:
    return int(time.time() * 1000)


class ResultStore:
    """
    Generated content keyed by section id, plus the last error per section.

    This is the only place generated content lives. Storing a result for a
    section clears that section's last error.
    """

    def __init__(self):
        self._contents: dict[str, GeneratedContent] = {}
        self._last_errors: dict[str, str] = {}

    def get(self, section_id: str) -> Optional[GeneratedContent]:
        return self._contents.get(section_id)

    def put(self, content: GeneratedContent) -> None:
        self._contents[content.section_id] = content
        self._last_errors.pop(content.section_id, None)

    def record_error(self, section_id: str, error: str) -> None:
        self._last_errors[section_id] = error

    def last_error(self, section_id: str) -> Optional[str]:
        return self._last_errors.get(section_id)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._last_errors)

    def clear(self) -> None:
        self._contents.clear()
        self._last_errors.clear()

    def section_ids(self) -> list[str]:
        return list(self._contents)

    def values(self) -> list[GeneratedContent]:
        return list(self._contents.values())

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._contents

    def __iter__(self) -> Iterator[GeneratedContent]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._contents)

    def to_dict(self) -> dict:
        """Serialize contents and errors for export."""
        return {
            "results": [content.to_dict() for content in self._contents.values()],
            "errors": dict(self._last_errors),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResultStore":
        store = cls()
        for item in data.get("results", []):
            store.put(GeneratedContent.from_dict(item))
        for section_id, error in data.get("errors", {}).items():
            store.record_error(section_id, error)
        return store

    @classmethod
    def from_contents(cls, contents: Iterable[GeneratedContent]) -> "ResultStore":
        store = cls()
        for content in contents:
            store.put(content)
        return store


@dataclass
class GenerationSession:
    """
    Mutable state for one copywriting session.

    Holds the user configuration, the result store and the shared
    "currently generating" marker used by both batch and rewrite.
    """
    config: GenerationConfig
    results: ResultStore = field(default_factory=ResultStore)
    generating_section_id: Optional[str] = None
    batch_running: bool = False

    @property
    def is_generating(self) -> bool:
        return self.batch_running or self.generating_section_id is not None


class GenerationOrchestrator:
    """
    Sequences section generation calls for a session.

    Args:
        session: Session whose config and result store are used.
        generator: Generation collaborator (e.g. an LLMClient instance).
        sleep: Called with the inter-call delay in seconds.
        clock: Returns the current time in epoch milliseconds.
        rng: Random source for optional keyword sampling.
    """

    def __init__(
        self,
        session: GenerationSession,
        generator: Generator,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = epoch_millis,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.generator = generator
        self.sleep = sleep
        self.clock = clock
        self.rng = rng

    @property
    def config(self) -> GenerationConfig:
        return self.session.config

    @property
    def prompt_builder(self) -> PromptBuilder:
        """Prompt builder over the session's current config."""
        return PromptBuilder(self.session.config, rng=self.rng)

    def _ensure_idle(self) -> None:
        if self.session.is_generating:
            busy = self.session.generating_section_id or "batch"
            raise GenerationInProgressError(f"Generation already in progress ({busy})")

    def _call_generator(self, section_id: str, prompt: str) -> GeneratedContent:
        request = GenerationRequest(prompt=prompt, credential=self.config.api_key or None)
        text = self.generator(request)
        return GeneratedContent.from_text(section_id, text, timestamp=self.clock())

    def generate_all(self, section_ids: Optional[list[str]] = None) -> BatchReport:
        """
        Generate every selected section, in order, one call at a time.

        Previous results are cleared first. Failures are recorded per
        section and never abort the batch.

        Args:
            section_ids: Sections to generate. Defaults to the session's
                selected sections.

        Returns:
            BatchReport with one outcome per requested section.

        Raises:
            GenerationInProgressError: If another operation is in flight.
        """
        self._ensure_idle()

        queue = deque(self.config.selected_sections if section_ids is None else section_ids)
        report = BatchReport()
        store = self.session.results
        store.clear()

        logger.info("Starting batch generation for %d section(s)", len(queue))
        self.session.batch_running = True
        try:
            first = True
            while queue:
                section_id = queue.popleft()
                self.session.generating_section_id = section_id

                if not first:
                    self.sleep(self.config.inter_call_delay)
                first = False

                report.outcomes.append(self._run_batch_task(section_id))
        finally:
            self.session.generating_section_id = None
            self.session.batch_running = False

        logger.info(
            "Batch finished: %d succeeded, %d failed",
            len(report.succeeded), len(report.failed),
        )
        return report

    def _run_batch_task(self, section_id: str) -> SectionOutcome:
        store = self.session.results

        prompt = self.prompt_builder.build(section_id)
        if not prompt:
            error = f"Unknown section: {section_id}"
            store.record_error(section_id, error)
            return SectionOutcome(section_id, SectionStatus.SKIPPED, error=error)

        try:
            content = self._call_generator(section_id, prompt)
        except Exception as e:
            logger.error("Error generating %s: %s", section_id, e)
            store.record_error(section_id, str(e))
            return SectionOutcome(section_id, SectionStatus.FAILED, error=str(e))

        store.put(content)
        logger.debug("Generated %s (%d words)", section_id, content.word_count)
        return SectionOutcome(section_id, SectionStatus.SUCCESS, content=content)

    def rewrite_section(
        self,
        section_id: str,
        instruction: str = "",
        word_count: Optional[Union[int, str]] = None,
    ) -> GeneratedContent:
        """
        Regenerate one section with an extra user instruction.

        On success the section's stored content is replaced; other sections
        are untouched. On failure the previous content is kept.

        Args:
            section_id: Section to rewrite.
            instruction: Requested change (defaults to a generic quality pass).
            word_count: Optional target word count.

        Returns:
            The new GeneratedContent.

        Raises:
            GenerationInProgressError: If another operation is in flight.
            UnknownSectionError: If the section id has no configuration.
            SectionGenerationError: If the generation call fails.
        """
        self._ensure_idle()

        if get_section_config(section_id) is None:
            raise UnknownSectionError(f"Unknown section: {section_id}")

        store = self.session.results
        self.session.generating_section_id = section_id
        try:
            prompt = self.prompt_builder.build(
                section_id,
                is_rewrite=True,
                rewrite_instruction=instruction,
                rewrite_word_count=word_count,
            )
            try:
                content = self._call_generator(section_id, prompt)
            except Exception as e:
                logger.error("Error rewriting %s: %s", section_id, e)
                store.record_error(section_id, str(e))
                raise SectionGenerationError(section_id, str(e)) from e

            store.put(content)
            logger.info("Rewrote %s (%d words)", section_id, content.word_count)
            return content
        finally:
            self.session.generating_section_id = None
