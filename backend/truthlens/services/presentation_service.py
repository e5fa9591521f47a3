from truthlens.models.claim import AnalysisResult, Tier

# Ordered from highest band to lowest; the first band whose floor is met wins
TIERS = [
    Tier(min_score=90, label="Verified Fact", description="Validated by trusted sources.",
         color="#00C853", gradient=("#00C853", "#69F0AE")),
    Tier(min_score=75, label="Likely True", description="Strong consensus found.",
         color="#4CAF50", gradient=("#4CAF50", "#81C784")),
    Tier(min_score=60, label="Plausible", description="Generally accurate.",
         color="#2196F3", gradient=("#2196F3", "#64B5F6")),
    Tier(min_score=40, label="Disputed", description="Conflict or outdated info.",
         color="#FFC107", gradient=("#FFC107", "#FFE082")),
    Tier(min_score=10, label="Misleading", description="Contains false elements.",
         color="#FF5722", gradient=("#FF5722", "#FF8A65")),
    Tier(min_score=0, label="Fabricated (Fake)", description="Contradicts facts or no evidence.",
         color="#D32F2F", gradient=("#D32F2F", "#EF5350")),
]


def get_tier(score: int) -> Tier:
    for tier in TIERS:
        if score >= tier.min_score:
            return tier
    return TIERS[-1]


class PresentationService:
    """
    Converts a completed analysis into the JSON view consumed by the frontend.
    """

    def __init__(self, favicon_url: str = "https://www.google.com/s2/favicons?domain={domain}&sz=32"):
        self.favicon_url = favicon_url

    def render(self, result: AnalysisResult) -> dict:
        """
        Build the response payload for a completed analysis.

        Args:
            result (AnalysisResult): Orchestrator output

        Returns:
            dict: Score, tier, AI reasons, heuristic flags and source pills
        """
        tier = get_tier(result.score)

        return {
            "claim_text": result.claim,
            "score": result.score,
            "verdict": result.verdict.label,
            "tier": {
                "label": tier.label,
                "description": tier.description,
                "color": tier.color,
                "gradient": list(tier.gradient)
            },
            "reasons": list(result.verdict.reasons),
            "heuristics": {
                "score": result.heuristics.score,
                "flags": [
                    {"type": flag.severity, "message": flag.message}
                    for flag in result.heuristics.flags
                ]
            },
            "sources": [
                {
                    "title": source.title,
                    "url": source.url,
                    "domain": source.domain,
                    "is_trusted": source.is_trusted,
                    "favicon": self.favicon_url.format(domain=source.domain)
                }
                for source in result.sources
            ],
            "source_count": len(result.sources)
        }
