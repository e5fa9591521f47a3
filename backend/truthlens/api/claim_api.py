import asyncio
from fastapi import APIRouter, HTTPException, Request, status
from truthlens.models.claim import AnalysisStatus, ClaimInput
from truthlens.services.analysis_service import AnalysisService, ClientSessions
from truthlens.services.presentation_service import PresentationService

router = APIRouter()
service = AnalysisService()
sessions = ClientSessions(service)
presenter = PresentationService()

_ERROR_STATUS = {
    AnalysisStatus.REJECTED: status.HTTP_400_BAD_REQUEST,
    AnalysisStatus.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    AnalysisStatus.FAILED: status.HTTP_502_BAD_GATEWAY,
}


@router.post("/analyze")
async def analyze_claim(data: ClaimInput, request: Request):
    """
    Fact-check a claim against live web search results.

    Raises:
        HTTPException: 400 for invalid input, 429 during the cooldown,
            502 when the search stage fails
    """
    client_id = request.client.host if request.client else "anonymous"

    # Run blocking analysis in threadpool to prevent blocking event loop
    loop = asyncio.get_event_loop()
    outcome = await loop.run_in_executor(None, sessions.analyze, client_id, data.claim_text)

    if outcome.status != AnalysisStatus.COMPLETED:
        raise HTTPException(status_code=_ERROR_STATUS[outcome.status], detail=outcome.message)

    return presenter.render(outcome.result)
