from truthlens.core.config import COOLDOWN_SECONDS
from truthlens.core.exceptions import UpstreamUnavailable, ValidationError
from truthlens.models.claim import (
    AnalysisOutcome,
    AnalysisResult,
    AnalysisState,
    AnalysisStatus,
    Phase,
)
from truthlens.services.heuristic_service import HeuristicService
from truthlens.services.search_service import SearchService
from truthlens.services.verdict_service import VerdictService
from typing import Callable, Dict, Optional, Tuple
import threading
import time

SYSTEM_ERROR_MESSAGE = "System Error. Please try again."
EMPTY_CLAIM_MESSAGE = "Please enter a claim to analyze."
SHORT_CLAIM_MESSAGE = "Too short! Please enter a full claim."


def count_words(text: str) -> int:
    return len(text.split())


def validate_claim(text: str) -> str:
    """
    Trim the claim and reject input that cannot be analyzed.

    Raises:
        ValidationError: If the claim is empty, or has fewer than 2 words
            and fewer than 10 characters
    """
    text = text.strip()
    words = count_words(text)
    if words == 0:
        raise ValidationError(EMPTY_CLAIM_MESSAGE)
    if words < 2 and len(text) < 10:
        raise ValidationError(SHORT_CLAIM_MESSAGE)
    return text


class AnalysisService:
    """
    Runs one analysis cycle:
    1. Heuristic scoring (local)
    2. Web search (Tavily)
    3. Verdict generation (Groq), skipped when search returns no data
    4. Hand-off of the result object to presentation

    The cooldown lives in an AnalysisState value that callers pass in and
    receive back, so the service itself holds no per-user state.
    """

    def __init__(
        self,
        heuristics: Optional[HeuristicService] = None,
        search: Optional[SearchService] = None,
        verdict: Optional[VerdictService] = None,
        cooldown_seconds: float = COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.heuristics = heuristics or HeuristicService()
        self.search = search or SearchService()
        self.verdict = verdict or VerdictService()
        self.cooldown_seconds = cooldown_seconds
        self.clock = clock

    @property
    def cooldown_message(self) -> str:
        return f"Please wait {self.cooldown_seconds:g} seconds before scanning again."

    def admit(self, state: AnalysisState, claim_text: str, now: Optional[float] = None) -> Tuple[AnalysisState, Optional[AnalysisOutcome]]:
        """
        Gate a submission and start the cooldown.

        Args:
            state (AnalysisState): Current state
            claim_text (str): Raw user input
            now (float): Clock reading, defaults to the service clock

        Returns:
            tuple: (new_state, rejection). rejection is None when the claim was
            admitted; the state is then RUNNING with a fresh cooldown window.
            Rejected submissions return the state unchanged.
        """
        now = self.clock() if now is None else now

        if state.is_cooling_down(now):
            return state, AnalysisOutcome(status=AnalysisStatus.RATE_LIMITED, state=state, message=self.cooldown_message)

        try:
            validate_claim(claim_text)
        except ValidationError as e:
            return state, AnalysisOutcome(status=AnalysisStatus.REJECTED, state=state, message=e.message)

        running = AnalysisState(phase=Phase.RUNNING, cooldown_until=now + self.cooldown_seconds)
        return running, None

    def execute(self, state: AnalysisState, claim_text: str, on_status: Optional[Callable[[str], None]] = None) -> AnalysisOutcome:
        """
        Run the stages for an admitted claim. Always ends in the IDLE phase.

        Args:
            state (AnalysisState): State returned by admit()
            claim_text (str): Raw user input
            on_status (callable): Optional progress callback

        Returns:
            AnalysisOutcome: COMPLETED with a result, or FAILED with a user-facing message
        """
        text = claim_text.strip()
        notify = on_status or (lambda message: None)
        outcome_status = AnalysisStatus.FAILED
        result = None

        try:
            notify("Anchoring time & checking heuristics...")
            local_result = self.heuristics.analyze(text)

            search_data = self.search.search(text)
            if not search_data or not search_data.context:
                raise UpstreamUnavailable("Search failed", provider="search")

            notify("Cross-referencing live data...")
            ai_result = self.verdict.judge(text, search_data)

            result = AnalysisResult(
                claim=text,
                score=ai_result.score,
                verdict=ai_result,
                heuristics=local_result,
                sources=list(search_data.sources)
            )
            outcome_status = AnalysisStatus.COMPLETED
        except Exception as e:
            print(f"[Analysis] Runtime error: {str(e)}")
        finally:
            idle = AnalysisState(phase=Phase.IDLE, cooldown_until=state.cooldown_until)

        if outcome_status == AnalysisStatus.COMPLETED:
            print(f"[Analysis] Complete: score {result.score} ({result.verdict.label})")
            return AnalysisOutcome(status=outcome_status, state=idle, result=result)

        return AnalysisOutcome(status=outcome_status, state=idle, message=SYSTEM_ERROR_MESSAGE)

    def submit(self, state: AnalysisState, claim_text: str, now: Optional[float] = None, on_status: Optional[Callable[[str], None]] = None) -> AnalysisOutcome:
        """Admit and, if accepted, execute a claim in one call."""
        running, rejection = self.admit(state, claim_text, now)
        if rejection:
            return rejection
        return self.execute(running, claim_text, on_status)


class ClientSessions:
    """
    Per-client AnalysisState registry for the HTTP layer.
    The cooldown is claimed under the lock before any network work starts.
    """

    def __init__(self, service: AnalysisService):
        self.service = service
        self._states: Dict[str, AnalysisState] = {}
        self._lock = threading.Lock()

    def get_state(self, client_id: str) -> AnalysisState:
        with self._lock:
            return self._states.get(client_id, AnalysisState())

    def client_count(self) -> int:
        with self._lock:
            return len(self._states)

    def _prune(self, now: float):
        """Drop idle clients whose cooldown has expired. Caller holds the lock."""
        expired = [
            client_id for client_id, state in self._states.items()
            if state.phase == Phase.IDLE and not state.is_cooling_down(now)
        ]
        for client_id in expired:
            del self._states[client_id]

    def analyze(self, client_id: str, claim_text: str) -> AnalysisOutcome:
        with self._lock:
            now = self.service.clock()
            self._prune(now)
            state = self._states.get(client_id, AnalysisState())
            running, rejection = self.service.admit(state, claim_text, now)
            if rejection:
                return rejection
            self._states[client_id] = running

        outcome = self.service.execute(running, claim_text)

        with self._lock:
            current = self._states.get(client_id)
            if current is None or current.cooldown_until == running.cooldown_until:
                self._states[client_id] = outcome.state

        return outcome
