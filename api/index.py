"""
FastAPI wrapper for SEO Section Writer.

This module exposes section generation, single-section rewrites and the
keyword density report as a REST API. The API is stateless: every request
carries the session configuration, and rewrite/density requests carry the
current results.
"""

import time
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from seo_section_writer import __version__
from seo_section_writer.config import DEFAULT_INTER_CALL_DELAY, DEFAULT_MODEL, GenerationConfig
from seo_section_writer.density import analyze_keyword_density, analyze_session
from seo_section_writer.keyword_parser import parse_keywords
from seo_section_writer.llm_client import MISSING_KEY_MESSAGE, LLMClient, create_llm_client
from seo_section_writer.models import GeneratedContent
from seo_section_writer.orchestrator import (
    GenerationInProgressError,
    GenerationOrchestrator,
    GenerationSession,
    Generator,
    ResultStore,
    SectionGenerationError,
    UnknownSectionError,
)
from seo_section_writer.sections import SECTION_CONFIGS, default_section_counts, section_ids

app = FastAPI(
    title="SEO Section Writer API",
    description="Generates bilingual landing-page section copy and reports keyword density",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SessionInput(BaseModel):
    """Session configuration sent with every generation request."""
    mandatory_keywords: str = Field("", description="Mandatory keywords, comma or newline separated")
    optional_keywords: str = Field("", description="Optional keyword pool, comma or newline separated")
    mandatory_target_density: float = Field(2.0, ge=0)
    optional_target_density: float = Field(1.0, ge=0)
    custom_prompt: str = ""
    selected_sections: list[str] = Field(default_factory=section_ids)
    section_counts: dict[str, int] = Field(default_factory=default_section_counts)
    api_key: Optional[str] = Field(None, description="Optional caller credential; server key is used otherwise")
    model: str = DEFAULT_MODEL

    def to_config(self, inter_call_delay: float = DEFAULT_INTER_CALL_DELAY) -> GenerationConfig:
        return GenerationConfig(
            mandatory_keywords=self.mandatory_keywords,
            optional_keywords=self.optional_keywords,
            mandatory_target_density=self.mandatory_target_density,
            optional_target_density=self.optional_target_density,
            custom_prompt=self.custom_prompt,
            selected_sections=list(self.selected_sections),
            section_counts=dict(self.section_counts),
            api_key=self.api_key or None,
            model=self.model,
            inter_call_delay=inter_call_delay,
        )


class GeneratedContentModel(BaseModel):
    """Generated copy for one section."""
    section_id: str
    english: str
    chinese: str
    word_count: int
    char_count: int
    timestamp: int

    @classmethod
    def from_content(cls, content: GeneratedContent) -> "GeneratedContentModel":
        return cls(**content.to_dict())

    def to_content(self) -> GeneratedContent:
        return GeneratedContent(**self.model_dump())


class RewriteRequest(BaseModel):
    """Single-section rewrite request."""
    session: SessionInput = Field(default_factory=SessionInput)
    results: list[GeneratedContentModel] = Field(default_factory=list)
    section_id: str
    instruction: str = ""
    word_count: Optional[int] = Field(None, ge=1)


class DensityRequest(BaseModel):
    """Density report request over already generated results."""
    mandatory_keywords: str = ""
    optional_keywords: str = ""
    mandatory_target_density: Optional[float] = None
    optional_target_density: Optional[float] = None
    results: list[GeneratedContentModel] = Field(default_factory=list)


class DensityEntryModel(BaseModel):
    keyword: str
    count: int
    density: str
    is_mandatory: bool


class DensityResponse(BaseModel):
    total_words: int
    mandatory_sum: str
    optional_sum: str
    mandatory_target: Optional[float] = None
    optional_target: Optional[float] = None
    entries: list[DensityEntryModel] = Field(default_factory=list)


class SectionOutcomeModel(BaseModel):
    section_id: str
    status: str
    error: Optional[str] = None


class GenerateResponse(BaseModel):
    """Response for a full batch."""
    success: bool
    message: str
    results: list[GeneratedContentModel] = Field(default_factory=list)
    outcomes: list[SectionOutcomeModel] = Field(default_factory=list)
    density: DensityResponse


class RewriteResponse(BaseModel):
    success: bool
    message: str
    content: GeneratedContentModel
    results: list[GeneratedContentModel] = Field(default_factory=list)
    density: DensityResponse


class SectionModel(BaseModel):
    id: str
    label: str
    has_count: bool
    default_count: Optional[int] = None
    count_label: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def get_generator() -> Generator:
    """Generation collaborator using the server's Anthropic key, if it has one."""
    return create_llm_client(require_key=False)


def get_sleep() -> Callable[[float], None]:
    return time.sleep


def _density_response(report) -> DensityResponse:
    return DensityResponse(**report.to_dict())


def _results_payload(store: ResultStore) -> list[GeneratedContentModel]:
    return [GeneratedContentModel.from_content(c) for c in store.values()]


def _build_config(session: SessionInput) -> GenerationConfig:
    try:
        return session.to_config()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _ensure_credential(generator: Generator, config: GenerationConfig) -> None:
    """Reject the request when neither the server nor the caller has a key."""
    if isinstance(generator, LLMClient) and generator.client is None and not config.api_key:
        raise HTTPException(status_code=500, detail=MISSING_KEY_MESSAGE)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/api/sections", response_model=list[SectionModel])
async def list_sections():
    """List the section catalogue."""
    return [
        SectionModel(
            id=s.id,
            label=s.label,
            has_count=s.has_count,
            default_count=s.default_count,
            count_label=s.count_label,
        )
        for s in SECTION_CONFIGS
    ]


@app.post("/api/generate", response_model=GenerateResponse)
def generate_all(
    request: SessionInput,
    generator: Generator = Depends(get_generator),
    sleep: Callable[[float], None] = Depends(get_sleep),
):
    """Generate every selected section sequentially and report density."""
    config = _build_config(request)
    _ensure_credential(generator, config)
    session = GenerationSession(config=config)
    orchestrator = GenerationOrchestrator(session, generator, sleep=sleep)
    report = orchestrator.generate_all()

    return GenerateResponse(
        success=not report.failed,
        message=f"Generated {len(report.succeeded)} of {len(report.outcomes)} section(s)",
        results=_results_payload(session.results),
        outcomes=[SectionOutcomeModel(**o) for o in report.to_dict()["outcomes"]],
        density=_density_response(analyze_session(session)),
    )


@app.post("/api/rewrite", response_model=RewriteResponse)
def rewrite_section(
    request: RewriteRequest,
    generator: Generator = Depends(get_generator),
):
    """Rewrite one section; other supplied results are returned unchanged."""
    store = ResultStore.from_contents(r.to_content() for r in request.results)
    config = _build_config(request.session)
    _ensure_credential(generator, config)
    session = GenerationSession(config=config, results=store)
    orchestrator = GenerationOrchestrator(session, generator)

    try:
        content = orchestrator.rewrite_section(
            request.section_id,
            request.instruction,
            request.word_count,
        )
    except UnknownSectionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SectionGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return RewriteResponse(
        success=True,
        message=f"Rewrote {request.section_id}",
        content=GeneratedContentModel.from_content(content),
        results=_results_payload(session.results),
        density=_density_response(analyze_session(session)),
    )


@app.post("/api/density", response_model=DensityResponse)
async def keyword_density(request: DensityRequest):
    """Compute the keyword density report for supplied results."""
    report = analyze_keyword_density(
        [r.to_content() for r in request.results],
        parse_keywords(request.mandatory_keywords),
        parse_keywords(request.optional_keywords),
        mandatory_target=request.mandatory_target_density,
        optional_target=request.optional_target_density,
    )
    return _density_response(report)


@app.get("/api/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "SEO Section Writer API",
        "version": __version__,
        "endpoints": {
            "GET /api/health": "Health check",
            "GET /api/sections": "List sections",
            "POST /api/generate": "Generate all selected sections",
            "POST /api/rewrite": "Rewrite a single section",
            "POST /api/density": "Keyword density report",
        },
    }
