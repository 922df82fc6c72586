from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.enums import Sentiment


class NewsItemResponse(BaseModel):
    title: str
    url: str
    source: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AnalysisResponse(BaseModel):
    ticker: str
    timeframe: str
    summary: str
    sentiment: Sentiment
    catalysts: List[str]
    news_links: List[NewsItemResponse]

    model_config = ConfigDict(from_attributes=True)
