"""Stateless tools executed inside the worker process."""

import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from quill_server.worker import analysis

logger = logging.getLogger(__name__)

SEARCH_URL = "https://html.duckduckgo.com/html/"
WEATHER_URL = "https://wttr.in/{location}"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

WorkerTool = Callable[[dict[str, Any], httpx.Client], Any]


def web_search(arguments: dict[str, Any], http: httpx.Client) -> dict[str, Any]:
    """Search DuckDuckGo's HTML endpoint and return titles, snippets and URLs."""
    query = str(arguments["query"])
    num_results = int(arguments.get("numResults") or 5)

    try:
        response = http.get(
            SEARCH_URL,
            params={"q": query},
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise RuntimeError(f"Web search failed: {e}") from e

    soup = BeautifulSoup(response.text, "html.parser")
    results = []
    for element in soup.select(".result")[:num_results]:
        title = element.select_one(".result__title")
        snippet = element.select_one(".result__snippet")
        url = element.select_one(".result__url")
        title_text = title.get_text(strip=True) if title else ""
        snippet_text = snippet.get_text(strip=True) if snippet else ""
        if title_text and snippet_text:
            results.append(
                {
                    "title": title_text,
                    "snippet": snippet_text,
                    "url": url.get_text(strip=True) if url else "",
                }
            )

    logger.info(f"web_search '{query}' returned {len(results)} results")
    return {"query": query, "results": results, "count": len(results)}


def get_weather(arguments: dict[str, Any], http: httpx.Client) -> dict[str, Any]:
    """Look up current conditions for a location on wttr.in."""
    location = str(arguments["location"])

    try:
        response = http.get(
            WEATHER_URL.format(location=quote(location)),
            params={"format": "j1"},
        )
        response.raise_for_status()
        current = response.json()["current_condition"][0]
        return {
            "location": location,
            "temperature": f"{current['temp_C']}°C / {current['temp_F']}°F",
            "condition": current["weatherDesc"][0]["value"],
            "humidity": f"{current['humidity']}%",
            "windSpeed": f"{current['windspeedKmph']} km/h",
            "feelsLike": f"{current['FeelsLikeC']}°C / {current['FeelsLikeF']}°F",
        }
    except (httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        raise RuntimeError(f"Weather lookup failed: {e}") from e


def extract_entities(arguments: dict[str, Any], http: httpx.Client) -> dict[str, Any]:
    return analysis.extract_entities(str(arguments.get("text", "")))


def analyze_notes(arguments: dict[str, Any], http: httpx.Client) -> dict[str, Any]:
    notes = arguments.get("notes") or []
    return analysis.analyze_notes(notes, str(arguments.get("analysisType", "")))


WORKER_TOOLS: dict[str, WorkerTool] = {
    "web_search": web_search,
    "get_weather": get_weather,
    "extract_entities": extract_entities,
    "analyze_notes": analyze_notes,
}
