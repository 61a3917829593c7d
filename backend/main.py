"""
SaveMyWines API

FastAPI backend for scanning wine labels and keeping a per-device
wine collection.

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from savemywines.config import Config

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}, USE_MOCKS={Config.use_mocks()}")

from savemywines.routes import scan_router, wines_router
from savemywines.routes.wines import get_wine_repo


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Migrate the collection database before serving
    get_wine_repo()
    logger.info("Service ready to handle requests")
    yield


app = FastAPI(
    title="SaveMyWines API",
    description="Scan wine labels and track your collection",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for the static web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(scan_router, tags=["scan"])
app.include_router(wines_router, tags=["wines"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "SaveMyWines API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
