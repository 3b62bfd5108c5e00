"""
main.py
-------
FastAPI application entrypoint.

Registers the survey and admin routers and configures CORS and logging.

Run with:
    uvicorn qcommerce_insights.main:app --reload --port 8000

Swagger UI: http://localhost:8000/docs
ReDoc:      http://localhost:8000/redoc
"""
from __future__ import annotations

import logging

import dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

dotenv.load_dotenv()

from qcommerce_insights.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)

from qcommerce_insights.routers.survey_router import router as survey_router
from qcommerce_insights.routers.admin_router import router as admin_router

app = FastAPI(
    title="Q-Commerce Dark Patterns Survey API",
    description=(
        "Step-by-step survey on dark patterns in quick-commerce apps. "
        "Validates responses, writes them to Google Sheets or Supabase, "
        "and returns an LLM-written summary of the respondent's answers."
    ),
    version="1.0.0",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(survey_router)      # GET /survey/questions, /survey/sessions/*, POST /survey/submit
app.include_router(admin_router)       # GET /admin/health


@app.get("/", tags=["root"])
def root():
    return {
        "service": "Q-Commerce Dark Patterns Survey API",
        "docs": "/docs",
        "health": "/admin/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
