"""
Pytest fixtures and configuration for SEO Section Writer tests.
"""

import random
from pathlib import Path
from typing import Optional

import pytest

from seo_section_writer.config import GenerationConfig
from seo_section_writer.models import BilingualText, GenerationRequest
from seo_section_writer.orchestrator import GenerationOrchestrator, GenerationSession


class FakeGenerator:
    """Generation collaborator stand-in that records every request.

    Args:
        replies: English texts returned in call order (cycled). Chinese is
            derived from the English text.
        fail_on: 1-based call numbers that raise instead of replying.
    """

    def __init__(self, replies: Optional[list[str]] = None, fail_on: tuple[int, ...] = ()):
        self.replies = replies or ["Title: Fast SEO tool\nDescription: The best seo tool for writers."]
        self.fail_on = set(fail_on)
        self.requests: list[GenerationRequest] = []

    def __call__(self, request: GenerationRequest) -> BilingualText:
        self.requests.append(request)
        call_number = len(self.requests)
        if call_number in self.fail_on:
            raise RuntimeError(f"rate limited on call {call_number}")
        english = self.replies[(call_number - 1) % len(self.replies)]
        return BilingualText(english=english, chinese=f"中文: {english}")

    @property
    def prompts(self) -> list[str]:
        return [r.prompt for r in self.requests]


class RecordingSleeper:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sample_config() -> GenerationConfig:
    """Config with a few sections and both keyword sets filled in."""
    return GenerationConfig(
        mandatory_keywords="seo tool, ai writing",
        optional_keywords="fast，rank\nfree, easy",
        custom_prompt="Keep a professional tone.",
        selected_sections=["hero", "feature", "faq"],
    )


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def clock():
    """Deterministic epoch-millisecond clock advancing 1000 ms per call."""
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000, 1000))
    return lambda: next(ticks)


@pytest.fixture
def make_orchestrator(sample_config, sleeper, clock):
    """Factory building an orchestrator around a fresh session."""
    def _make(generator, config: Optional[GenerationConfig] = None):
        session = GenerationSession(config=config or sample_config)
        return GenerationOrchestrator(
            session,
            generator,
            sleep=sleeper,
            clock=clock,
            rng=random.Random(42),
        )
    return _make


@pytest.fixture
def sample_keywords_csv(tmp_path: Path) -> Path:
    """Create a sample keyword CSV file with a type column."""
    csv_path = tmp_path / "keywords.csv"
    csv_content = """keyword,type
seo tool,mandatory
ai writing,mandatory
rank faster,optional
free trial,optional
content generator,
"""
    csv_path.write_text(csv_content, encoding="utf-8")
    return csv_path


@pytest.fixture
def sample_keywords_excel(tmp_path: Path) -> Path:
    """Create a sample keyword Excel file."""
    import pandas as pd

    xlsx_path = tmp_path / "keywords.xlsx"
    data = {
        "Keyword": ["seo tool", "landing page", "copywriting"],
        "Type": ["mandatory", "optional", "optional"],
    }
    pd.DataFrame(data).to_excel(xlsx_path, index=False)
    return xlsx_path
