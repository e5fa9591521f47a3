import asyncio
import json
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from truthlens.core.config import GROQ_SCORING_MODEL
from truthlens.services.search_service import SearchService
from truthlens.services.verdict_service import VerdictService, build_scoring_prompt

router = APIRouter()
search_service = SearchService()
verdict_service = VerdictService()

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _method_not_allowed() -> Response:
    return PlainTextResponse("Method Not Allowed", status_code=405)


def _key_missing() -> Response:
    return JSONResponse({"error": "Server API Key Missing"}, status_code=500)


@router.api_route("/search", methods=ALL_METHODS)
async def proxy_search(request: Request):
    """
    Relay a search query to Tavily with the server-side API key.

    Body: {"query": str}. The upstream JSON is returned re-serialized with status 200.
    """
    if request.method != "POST":
        return _method_not_allowed()

    try:
        body = json.loads(await request.body())
        query = body.get("query") or ""

        if not search_service.api_key:
            return _key_missing()

        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(None, search_service.fetch, query)
        data = response.json()

        return JSONResponse(data, status_code=200)

    except Exception as e:
        print(f"[Proxy] Search failed: {str(e)}")
        return JSONResponse({"error": "Search Failed: " + str(e)}, status_code=500)


@router.api_route("/analyze", methods=ALL_METHODS)
async def proxy_analyze(request: Request):
    """
    Relay a direct-scoring request to Groq with the server-side API key.

    Body: {"userText": str, "webContext": str}. The model's message content is
    returned verbatim with status 200.
    """
    if request.method != "POST":
        return _method_not_allowed()

    try:
        body = json.loads(await request.body())
        user_text = body.get("userText") or ""
        web_context = body.get("webContext")

        if not verdict_service.api_key:
            return _key_missing()

        prompt = build_scoring_prompt(user_text, web_context)

        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(
            None,
            lambda: verdict_service.post_completion(prompt, model=GROQ_SCORING_MODEL, temperature=0.3)
        )
        data = response.json()
        content = data["choices"][0]["message"]["content"]

        return Response(content=content, status_code=200, media_type="application/json")

    except Exception as e:
        print(f"[Proxy] Analyze failed: {str(e)}")
        return JSONResponse({"error": "Backend Error: " + str(e)}, status_code=500)
