# app/models/__init__.py

from app.models.enums import Sentiment, TradeDirection  # noqa: F401
