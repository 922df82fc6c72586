# app/services/ticker_analysis.py

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from app.config import Settings, get_settings
from app.models.enums import Sentiment

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a professional swing trader assistant. "
    "Be concise, objective, and risk-focused."
)
NO_ANALYSIS_TEXT = "No analysis generated."
CATALYST_FALLBACK = "See summary for details"
MAX_CATALYSTS = 5

_bullet_re = re.compile(r"^([-*]|\d+\.)")
_bullet_marker_re = re.compile(r"^[-*]\s*|^\d+\.\s*")


class TickerAnalysisError(RuntimeError):
    """Raised when the remote analysis lookup fails."""


@dataclass(frozen=True)
class NewsItem:
    title: str
    url: str
    source: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    summary: str
    sentiment: Sentiment
    catalysts: List[str] = field(default_factory=list)
    news_links: List[NewsItem] = field(default_factory=list)


def build_prompt(ticker: str, timeframe: str) -> str:
    return (
        f"Analyze the ticker symbol {ticker} for a swing trading setup on the {timeframe} timeframe.\n"
        "\n"
        "Focus on:\n"
        "1. Upcoming catalysts (earnings, fda approvals, macro events) in the next 2 weeks.\n"
        "2. Recent major news headlines.\n"
        "3. Overall sector sentiment.\n"
        "\n"
        "Provide a concise summary, a sentiment rating (bullish, bearish, neutral), "
        "and a list of specific upcoming catalysts.\n"
    )


# -------------------------------------------------
# Response parsing (heuristic; grounded search has no JSON schema mode)
# -------------------------------------------------
def detect_sentiment(text: str) -> Sentiment:
    lowered = text.lower()
    if "bullish" in lowered:
        return Sentiment.BULLISH
    if "bearish" in lowered:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def extract_catalysts(text: str, limit: int = MAX_CATALYSTS) -> List[str]:
    catalysts = [
        _bullet_marker_re.sub("", line.strip(), count=1).strip()
        for line in text.split("\n")
        if _bullet_re.match(line.strip())
    ][:limit]
    return catalysts or [CATALYST_FALLBACK]


def extract_news_links(candidate: Dict[str, Any]) -> List[NewsItem]:
    chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
    links: List[NewsItem] = []
    for chunk in chunks:
        web = chunk.get("web") or {}
        if web.get("uri") and web.get("title"):
            links.append(NewsItem(title=web["title"], url=web["uri"], source="Web Source"))
    return links


def extract_text(candidate: Optional[Dict[str, Any]]) -> str:
    if not candidate:
        return ""
    parts = (candidate.get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


def parse_generate_content(payload: Dict[str, Any]) -> AnalysisResult:
    candidates = payload.get("candidates") or []
    candidate = candidates[0] if candidates else {}

    text = extract_text(candidate) or NO_ANALYSIS_TEXT

    return AnalysisResult(
        summary=text,
        sentiment=detect_sentiment(text),
        catalysts=extract_catalysts(text),
        news_links=extract_news_links(candidate),
    )


# -------------------------------------------------
# Client
# -------------------------------------------------
class TickerAnalysisClient:
    """
    Sentiment / catalyst lookup through Gemini with Google Search grounding.

    Independent of the sizing core: failures surface as TickerAnalysisError
    and never touch calculator state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "TickerAnalysisClient":
        settings = settings or get_settings()
        return cls(
            settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.gemini_timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_request_body(self, ticker: str, timeframe: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": build_prompt(ticker, timeframe)}]}],
            "tools": [{"googleSearch": {}}],
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "generationConfig": {"temperature": 0.3},
        }

    async def analyze(self, ticker: str, timeframe: str) -> AnalysisResult:
        if not self.api_key:
            raise TickerAnalysisError("API Key not found in environment variables")

        ticker = ticker.strip().upper()
        body = self.build_request_body(ticker, timeframe)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json=body,
                    headers={"x-goog-api-key": self.api_key},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "ticker analysis for %s failed with HTTP %s",
                ticker,
                exc.response.status_code,
            )
            raise TickerAnalysisError(
                f"Analysis service returned HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Error analyzing ticker %s: %s", ticker, exc)
            raise TickerAnalysisError(f"Analysis service request failed: {exc}") from exc

        result = parse_generate_content(payload)
        logger.info(
            "analyzed %s (%s): sentiment=%s catalysts=%d links=%d",
            ticker,
            timeframe,
            result.sentiment.value,
            len(result.catalysts),
            len(result.news_links),
        )
        return result
