"""
Data models for SEO Section Writer.

This module defines the core data structures shared by the prompt builder,
the generation orchestrator and the density analyzer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SectionStatus(Enum):
    """Outcome of a single section generation attempt."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"  # No prompt could be built (unknown section)


@dataclass(frozen=True)
class SectionConfig:
    """Static definition of one page section and its prompt template."""
    id: str
    label: str
    has_count: bool
    base_prompt: str
    default_count: Optional[int] = None
    count_label: Optional[str] = None


@dataclass(frozen=True)
class GenerationRequest:
    """A single call to the generation collaborator."""
    prompt: str
    credential: Optional[str] = None


@dataclass(frozen=True)
class BilingualText:
    """English copy plus its Chinese translation, line structure preserved."""
    english: str
    chinese: str


@dataclass
class GeneratedContent:
    """Generated copy for one section."""
    section_id: str
    english: str
    chinese: str
    word_count: int
    char_count: int
    timestamp: int  # epoch milliseconds

    @classmethod
    def from_text(cls, section_id: str, text: BilingualText, timestamp: int) -> "GeneratedContent":
        """Build a record from collaborator output, computing the counters."""
        return cls(
            section_id=section_id,
            english=text.english,
            chinese=text.chinese,
            word_count=count_words(text.english),
            char_count=len(text.english),
            timestamp=timestamp,
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "section_id": self.section_id,
            "english": self.english,
            "chinese": self.chinese,
            "word_count": self.word_count,
            "char_count": self.char_count,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeneratedContent":
        english = data.get("english", "")
        return cls(
            section_id=data["section_id"],
            english=english,
            chinese=data.get("chinese", ""),
            word_count=data.get("word_count", count_words(english)),
            char_count=data.get("char_count", len(english)),
            timestamp=data.get("timestamp", 0),
        )


@dataclass
class SectionOutcome:
    """Result of generating one section: content on success, error otherwise."""
    section_id: str
    status: SectionStatus
    content: Optional[GeneratedContent] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == SectionStatus.SUCCESS


@dataclass
class BatchReport:
    """Ordered outcomes of a Generate-All run."""
    outcomes: list[SectionOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[str]:
        return [o.section_id for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[str]:
        return [o.section_id for o in self.outcomes if not o.ok]

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [
                {
                    "section_id": o.section_id,
                    "status": o.status.value,
                    "error": o.error,
                }
                for o in self.outcomes
            ],
        }


@dataclass(frozen=True)
class KeywordDensityEntry:
    """Occurrence statistics for one keyword across all generated copy."""
    keyword: str
    count: int
    density: str  # e.g. "1.25%"
    is_mandatory: bool

    @property
    def density_value(self) -> float:
        """Numeric density parsed back from the formatted string."""
        return float(self.density.rstrip("%"))


@dataclass
class DensityReport:
    """Density entries plus per-group aggregate sums."""
    entries: list[KeywordDensityEntry] = field(default_factory=list)
    total_words: int = 0
    mandatory_sum: str = "0.00%"
    optional_sum: str = "0.00%"
    mandatory_target: Optional[float] = None
    optional_target: Optional[float] = None

    @property
    def mandatory_entries(self) -> list[KeywordDensityEntry]:
        return [e for e in self.entries if e.is_mandatory]

    @property
    def optional_entries(self) -> list[KeywordDensityEntry]:
        return [e for e in self.entries if not e.is_mandatory]

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def to_dict(self) -> dict:
        return {
            "total_words": self.total_words,
            "mandatory_sum": self.mandatory_sum,
            "optional_sum": self.optional_sum,
            "mandatory_target": self.mandatory_target,
            "optional_target": self.optional_target,
            "entries": [
                {
                    "keyword": e.keyword,
                    "count": e.count,
                    "density": e.density,
                    "is_mandatory": e.is_mandatory,
                }
                for e in self.entries
            ],
        }


def count_words(text: str) -> int:
    """Count whitespace-separated words. Blank text has zero words."""
    return len(text.split())
