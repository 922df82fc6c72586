from fastapi import APIRouter, Depends, HTTPException, Query

from app.schemas.analysis import AnalysisResponse, NewsItemResponse
from app.services.ticker_analysis import TickerAnalysisClient, TickerAnalysisError

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


def get_analysis_client() -> TickerAnalysisClient:
    return TickerAnalysisClient.from_settings()


@router.get("/{ticker}", response_model=AnalysisResponse)
async def analyze_ticker(
    ticker: str,
    timeframe: str = Query("Daily", min_length=1),
    client: TickerAnalysisClient = Depends(get_analysis_client),
):
    """
    Catalyst / sentiment lookup for a ticker.
    Independent of the calculator; a failure here never affects sizing.
    """
    if not client.api_key:
        raise HTTPException(status_code=503, detail="Ticker analysis is not configured")

    try:
        result = await client.analyze(ticker, timeframe)
    except TickerAnalysisError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return AnalysisResponse(
        ticker=ticker.strip().upper(),
        timeframe=timeframe,
        summary=result.summary,
        sentiment=result.sentiment,
        catalysts=result.catalysts,
        news_links=[NewsItemResponse.model_validate(n) for n in result.news_links],
    )
