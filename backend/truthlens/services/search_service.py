from truthlens.core.config import (
    TAVILY_API_KEY,
    TAVILY_URL,
    SEARCH_MAX_RESULTS,
    SEARCH_QUERY_LIMIT,
    REQUEST_TIMEOUT,
    SEARCH_MISSING_KEY_POLICY,
)
from truthlens.core.exceptions import MissingCredentialError
from truthlens.models.claim import SearchBundle, SearchResult
from datetime import date
from typing import Callable, Optional
from urllib.parse import urlparse
import requests

# Domains whose results are marked [TRUSTED] in the evidence block
TRUSTED_SOURCES = [
    'dawn.com', 'geo.tv', 'bbc.com', 'reuters.com', 'aljazeera.com',
    'cnn.com', 'nytimes.com', 'tribune.com.pk', 'thenews.com.pk',
    'apnews.com', 'bloomberg.com', 'gov.pk', 'wikipedia.org', 'un.org'
]


def format_today(today: date) -> str:
    """Format a date like 'Monday, October 19, 2026'."""
    return f"{today:%A}, {today:%B} {today.day}, {today.year}"


def is_trusted_url(url: str) -> bool:
    return any(domain in url for domain in TRUSTED_SOURCES)


def extract_domain(url: str) -> str:
    hostname = urlparse(url).hostname or ""
    return hostname.replace("www.", "", 1)


class SearchService:
    """
    Gathers live web evidence for a claim through the Tavily search API.
    Returns None (no data) on any upstream failure instead of raising.
    """

    def __init__(
        self,
        api_key: Optional[str] = TAVILY_API_KEY,
        base_url: str = TAVILY_URL,
        max_results: int = SEARCH_MAX_RESULTS,
        query_limit: int = SEARCH_QUERY_LIMIT,
        timeout: float = REQUEST_TIMEOUT,
        missing_key_policy: str = SEARCH_MISSING_KEY_POLICY,
        today: Callable[[], date] = date.today,
    ):
        if not api_key:
            print("WARNING: TAVILY_API_KEY not set. Live search is unavailable.")
        self.api_key = api_key
        self.base_url = base_url
        self.max_results = max_results
        self.query_limit = query_limit
        self.timeout = timeout
        self.missing_key_policy = missing_key_policy
        self.today = today

    def fetch(self, query: str) -> requests.Response:
        """
        Issue the single search request. Transport errors propagate.

        Args:
            query (str): Claim text, truncated to the query limit

        Returns:
            requests.Response: Raw upstream response
        """
        payload = {
            "api_key": self.api_key,
            "query": query[:self.query_limit],
            "search_depth": "basic",
            "include_answer": False,
            "max_results": self.max_results
        }
        return requests.post(
            self.base_url,
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=self.timeout
        )

    def search(self, query: str) -> Optional[SearchBundle]:
        """
        Search the web for the claim and build the evidence bundle.

        Args:
            query (str): Claim text

        Returns:
            SearchBundle or None: None when no data could be obtained
        """
        if not self.api_key:
            if self.missing_key_policy == "error":
                raise MissingCredentialError("Search API key missing", provider="tavily")
            print("[Search] No API key configured, skipping search")
            return None

        try:
            print(f"[Search] Searching for: {query[:50]}...")
            response = self.fetch(query)
            print(f"[Search] Response status: {response.status_code}")

            if not response.ok:
                print(f"[Search] API error: {response.status_code} - {response.text[:200]}")
                return None

            return self.build_bundle(response.json())
        except requests.exceptions.Timeout:
            print("[Search] Tavily API timeout")
            return None
        except Exception as e:
            print(f"[Search] Tavily error: {str(e)}")
            return None

    def build_bundle(self, data: dict) -> SearchBundle:
        """
        Turn a Tavily response body into a SearchBundle.
        A missing or empty results field yields an empty bundle, not an error.

        Raises:
            ValueError: If the body or its results field has the wrong shape
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected search response body: {type(data).__name__}")

        results = data.get("results") or []
        if not isinstance(results, list):
            raise ValueError(f"Unexpected results field: {type(results).__name__}")

        today = format_today(self.today())
        lines = [f"TODAY'S DATE: {today}", "", "SEARCH RESULTS:"]
        sources = []
        trusted_count = 0

        for result in results:
            if not isinstance(result, dict):
                print(f"[Search] Skipping malformed result: {str(result)[:50]}")
                continue

            url = str(result.get("url") or "")
            title = str(result.get("title") or "")
            snippet = str(result.get("content") or "")[:300]
            published_date = result.get("published_date")
            published_date = str(published_date) if published_date else None
            trusted = is_trusted_url(url)
            if trusted:
                trusted_count += 1

            trust_label = "[TRUSTED]" if trusted else "[GENERAL]"
            lines.append(
                f"- {trust_label} Date: {published_date or 'Unknown'} | "
                f"Title: \"{title}\" | Snippet: {snippet} (Source: {url})"
            )
            sources.append(SearchResult(
                title=title,
                url=url,
                snippet=snippet,
                published_date=published_date,
                is_trusted=trusted,
                domain=extract_domain(url)
            ))

        if not sources:
            print("[Search] No results found")
            return SearchBundle(context=f"TODAY'S DATE: {today}\nNo news found.")

        print(f"[Search] Found {len(sources)} results ({trusted_count} trusted)")
        return SearchBundle(
            context="\n".join(lines) + "\n",
            trusted_count=trusted_count,
            sources=tuple(sources)
        )
