from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional, Tuple
from enum import Enum


class ClaimInput(BaseModel):
    """Request model for claim analysis"""
    claim_text: str


class HeuristicFlag(BaseModel):
    """A single local heuristic observation about the claim text"""
    severity: Literal["good", "warn", "bad"]
    message: str


class HeuristicResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    flags: List[HeuristicFlag] = Field(default_factory=list)


class SearchResult(BaseModel):
    """One ranked web search hit, annotated with its trust flag"""
    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    published_date: Optional[str] = None
    is_trusted: bool = False
    domain: str = ""


class SearchBundle(BaseModel):
    """Evidence gathered for one analysis cycle"""
    model_config = ConfigDict(frozen=True)

    context: str
    trusted_count: int = 0
    sources: Tuple[SearchResult, ...] = ()


class Verdict(BaseModel):
    """Parsed language-model verdict with its derived score"""
    label: str
    reasons: List[str] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)
    confidence: Optional[int] = None


class Tier(BaseModel):
    """Labeled score band used for presentation"""
    model_config = ConfigDict(frozen=True)

    min_score: int
    label: str
    description: str
    color: str
    gradient: Tuple[str, str]


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class AnalysisState(BaseModel):
    """
    Orchestrator state passed into and returned from each submission.

    cooldown_until is a monotonic timestamp; submissions before it are rejected.
    """
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.IDLE
    cooldown_until: Optional[float] = None

    def is_cooling_down(self, now: float) -> bool:
        return self.cooldown_until is not None and now < self.cooldown_until


class AnalysisResult(BaseModel):
    """Completed analysis cycle, handed to the presentation adapter"""
    claim: str
    score: int
    verdict: Verdict
    heuristics: HeuristicResult
    sources: List[SearchResult] = Field(default_factory=list)


class AnalysisStatus(str, Enum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


class AnalysisOutcome(BaseModel):
    status: AnalysisStatus
    state: AnalysisState
    message: Optional[str] = None
    result: Optional[AnalysisResult] = None
