"""
FoodShare Marketplace - Main FastAPI Application

Single entry point for the recipient, donor and admin API routes.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodshare import __version__
from foodshare.logging import get_logger
from foodshare.routers import router as api_router
from foodshare.routers.deps import shutdown_services

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    logger.info("FoodShare API starting (version %s)", __version__)
    yield
    # Shutdown
    await shutdown_services()


app = FastAPI(
    title="FoodShare Marketplace",
    description="Surplus food donation marketplace API",
    version=__version__,
    lifespan=lifespan,
)

# Browser frontends are served from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "foodshare"}
