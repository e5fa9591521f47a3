from truthlens.core.config import (
    GROQ_API_KEY,
    GROQ_URL,
    GROQ_VERDICT_MODEL,
    REQUEST_TIMEOUT,
    VERDICT_MISSING_KEY_POLICY,
)
from truthlens.core.exceptions import MissingCredentialError
from truthlens.models.claim import SearchBundle, Verdict
from typing import Optional
import requests
import json
import re

FAILED_VERDICT = Verdict(label="Error", reasons=["Analysis Failed."], score=0)

_CITATION_PATTERNS = [
    re.compile(r'\s*\(Source:.*?\)', re.IGNORECASE),
    re.compile(r'\s*\[Source:.*?\]', re.IGNORECASE),
    re.compile(r'https?://[^\s]+'),
]


def clean_reasoning_text(text: str) -> str:
    """Strip inline source citations and raw URLs from a reason string."""
    # Repeat until stable: removing one citation can splice together another.
    while True:
        cleaned = text
        for pattern in _CITATION_PATTERNS:
            cleaned = pattern.sub('', cleaned)
        cleaned = cleaned.strip()
        if cleaned == text:
            return cleaned
        text = cleaned


def score_from_label(label: str, trusted_count: int) -> int:
    """
    Map a verdict label to a trust score.

    "true" earns 90 plus 2 per trusted source (max 99), "false" is always 0,
    anything else is 50. Matching ignores case and surrounding whitespace.
    """
    normalized = label.strip().lower()
    if normalized == "true":
        return min(99, 90 + trusted_count * 2)
    if normalized == "false":
        return 0
    return 50


def build_verdict_prompt(claim_text: str, evidence: str) -> str:
    return f"""
You are TruthLens Pro. You are a STRICT factual validator.

CORE PROTOCOLS:
1. **NO META-TALK:** Never say "Search says" or "Results show". State the fact directly.
2. **GEOGRAPHY RULE:** If User says "A is in B", but Search says "Diplomatic Relations", the Verdict is **FALSE**.
   - Example: "India is in Iceland" -> Verdict: False. (Reason: India is in South Asia.)
3. **OUTPUT JSON:** {{ "verdict": "True/False/Uncertain", "reasons": ["Concise fact 1", "Concise fact 2"] }}

INPUT DATA: {evidence}
USER CLAIM: "{claim_text}"
"""


def build_scoring_prompt(user_text: str, web_context: Optional[str]) -> str:
    """Prompt for the simpler direct-scoring endpoint."""
    return f"""
You are TruthLens. Compare USER CLAIM with LIVE NEWS.
If news confirms it -> 100/Verified. If contradicts -> 0/Fake.
Output JSON: {{ "score": 0-100, "reasons": ["Fact 1", "Fact 2"], "confidence": 0-100 }}

LIVE NEWS: {web_context or "No live news found."}
USER CLAIM: {user_text}
"""


class VerdictService:
    """
    Asks a Groq-hosted model to judge the claim against the search evidence.

    Fails closed: any transport or parse failure produces a score of 0,
    never a neutral "uncertain" result.
    """

    def __init__(
        self,
        api_key: Optional[str] = GROQ_API_KEY,
        base_url: str = GROQ_URL,
        model: str = GROQ_VERDICT_MODEL,
        timeout: float = REQUEST_TIMEOUT,
        missing_key_policy: str = VERDICT_MISSING_KEY_POLICY,
    ):
        if not api_key:
            print("WARNING: GROQ_API_KEY not set. Verdicts will be unavailable.")
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.missing_key_policy = missing_key_policy

    def post_completion(self, prompt: str, model: Optional[str] = None, temperature: float = 0.0) -> requests.Response:
        """
        Send a single system-message chat completion in JSON mode.

        Args:
            prompt (str): System instruction
            model (str): Model identifier, defaults to the verdict model
            temperature (float): Sampling temperature

        Returns:
            requests.Response: Raw upstream response
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "model": model or self.model,
            "messages": [{"role": "system", "content": prompt}],
            "response_format": {"type": "json_object"},
            "temperature": temperature
        }
        return requests.post(self.base_url, headers=headers, json=payload, timeout=self.timeout)

    def judge(self, claim_text: str, search_data: SearchBundle) -> Verdict:
        """
        Produce a verdict for the claim.

        Args:
            claim_text (str): The claim to judge
            search_data (SearchBundle): Evidence from the search stage

        Returns:
            Verdict: Parsed label, sanitized reasons and derived score
        """
        if not self.api_key:
            if self.missing_key_policy == "error":
                raise MissingCredentialError("Verdict API key missing", provider="groq")
            return Verdict(label="Uncertain", reasons=["API Key missing."], score=0, confidence=0)

        prompt = build_verdict_prompt(claim_text, search_data.context)

        try:
            print(f"[Verdict] Requesting verdict for: {claim_text[:50]}...")
            response = self.post_completion(prompt, temperature=0.0)
            print(f"[Verdict] Response status: {response.status_code}")

            if not response.ok:
                raise RuntimeError(f"API Error {response.status_code}")

            content = response.json()["choices"][0]["message"]["content"]
            label, reasons = self._parse_verdict(content)
        except Exception as e:
            print(f"[Verdict] Analysis failed: {str(e)}")
            return FAILED_VERDICT.model_copy(deep=True)

        score = score_from_label(label, search_data.trusted_count)
        print(f"[Verdict] Label: {label} -> score {score}")

        return Verdict(
            label=label,
            reasons=[clean_reasoning_text(r) for r in reasons],
            score=score
        )

    def _parse_verdict(self, content: str) -> tuple:
        """
        Extract (label, reasons) from the model's JSON reply.
        Raises ValueError when the reply does not follow the required shape.
        """
        json_match = re.search(r'\{.*\}', content or "", re.DOTALL)
        if not json_match:
            raise ValueError("No JSON object in model response")

        result = json.loads(json_match.group())
        label = result.get("verdict")
        reasons = result.get("reasons")

        if not isinstance(label, str):
            raise ValueError("Missing verdict label")
        if not isinstance(reasons, list):
            raise ValueError("Missing reasons list")

        return label, [str(r) for r in reasons]
