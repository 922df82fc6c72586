import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import analysis as analysis_router
from app.api import risk as risk_router
from app.api import targets as targets_router
from app.config import get_settings

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Swing Trade Planner API")

# CORS - permissive by default for a local front-end; set CORS_ORIGINS to lock down
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(risk_router.router)
app.include_router(targets_router.router)
app.include_router(analysis_router.router)


@app.get("/health")
def health():
    return {"status": "ok"}


logger.info(
    "trade planner ready (ticker analysis %s)",
    "enabled" if settings.gemini_api_key else "disabled",
)
