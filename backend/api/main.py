"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import countries, session

logger = logging.getLogger(__name__)

# Create app
app = FastAPI(
    title="Globe Flight API",
    description="Country search suggestions and camera flights over a 3D globe",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(countries.router, prefix="/countries", tags=["countries"])
app.include_router(session.router, prefix="/session", tags=["session"])


@app.on_event("startup")
async def startup_event():
    """Create the shared globe session on the server's event loop."""
    s = session.get_globe_session()
    logger.info("Globe session started (remote predictions: %s)", s.controller.has_predictor)


@app.on_event("shutdown")
async def shutdown_event():
    """Cancel pending frames, timers and predictor calls."""
    session.shutdown_globe_session()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Globe Flight API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
