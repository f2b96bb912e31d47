"""
main.py
-------
FastAPI application entrypoint for the voice context service.

Registers the routers and configures CORS and logging.

Run with:
    uvicorn voice_context.main:app --reload --port 8000

Swagger UI: http://localhost:8000/docs
"""
from __future__ import annotations

import logging
import os

import dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

dotenv.load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)

from voice_context.routers.admin_router import router as admin_router
from voice_context.routers.voice_context_router import router as voice_context_router
from voice_context.routers.voice_summaries_router import router as voice_summaries_router

app = FastAPI(
    title="Voice Context API",
    description=(
        "Tiered long-term memory over voice-note transcripts: today in full, "
        "then past 2 days, week and month from precomputed summaries."
    ),
    version="1.0.0",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(voice_context_router)    # GET /voice-context/{owner_id}, POST /voice-context/relevant
app.include_router(voice_summaries_router)  # POST /voice-summaries/upsert, GET .../staleness
app.include_router(admin_router)            # GET /admin/health


@app.get("/", tags=["root"])
def root():
    return {
        "service": "Voice Context API",
        "docs": "/docs",
        "health": "/admin/health",
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
