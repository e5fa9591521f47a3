from truthlens.models.claim import HeuristicFlag, HeuristicResult
import re


class HeuristicService:
    """
    Local, network-free scoring of claim text.
    Penalizes shouting and clickbait phrasing before any research runs.
    """

    def __init__(self):
        self.short_claim_length = 20
        self.caps_pattern = re.compile(r'[A-Z]{3,}')
        self.max_caps_runs = 2
        self.spam_words = ['urgent', 'viral', 'share max', '100% true']

    def analyze(self, text: str) -> HeuristicResult:
        """
        Score the claim text with fixed-weight rules.

        Args:
            text (str): Raw claim text

        Returns:
            HeuristicResult: Score clamped to [0, 100] and ordered flags
        """
        score = 100
        flags = []

        if len(text) < self.short_claim_length:
            flags.append(HeuristicFlag(severity="warn", message="Short claim detected."))

        if len(self.caps_pattern.findall(text)) > self.max_caps_runs:
            score -= 10
            flags.append(HeuristicFlag(severity="bad", message="Aggressive capitalization."))

        lowered = text.lower()
        if any(word in lowered for word in self.spam_words):
            score -= 20
            flags.append(HeuristicFlag(severity="bad", message="Clickbait language detected."))

        if not flags:
            flags.append(HeuristicFlag(severity="good", message="Tone analysis: Neutral"))
            flags.append(HeuristicFlag(severity="good", message="Grammar check: Passed"))

        return HeuristicResult(score=max(0, score), flags=flags)
