"""
FastAPI application for CaseCoach.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Settings
from ..core.errors import CaseCoachError
from .routes import router

settings = Settings.from_env()

# Configure logging to show casecoach modules at the configured level
logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
logging.getLogger("casecoach").setLevel(settings.log_level)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="CaseCoach",
    description="Case-interview practice with a heuristic coach, scoring and feedback",
    version="0.1.0",
)

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

# API routes
app.include_router(router)


@app.exception_handler(CaseCoachError)
async def casecoach_error_handler(request: Request, exc: CaseCoachError):
    """Errors the routes did not translate themselves."""
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    return {"message": "CaseCoach API", "docs": "/docs"}
