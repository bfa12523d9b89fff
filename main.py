import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.database import async_session_maker, init_models
from app.core.exceptions import ProviderError
from app.core.logging_config import setup_logging
from app.api.v1.api import api_router
from app.middleware.logging import LoggingMiddleware
from app.services.chain import build_chain_provider

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: logging, tables, demo data and the chain provider"""
    setup_logging()
    logger.info(f"Starting Delivery Tracker ({settings.ENVIRONMENT})")

    await init_models()

    if settings.SEED_DEMO_DATA:
        from app.db.seeds.initial_data import create_initial_data
        async with async_session_maker() as session:
            await create_initial_data(session)

    chain_provider = build_chain_provider(settings)
    if settings.CHAIN_AUTO_CONNECT:
        try:
            identity = await chain_provider.connect()
            logger.info(f"Chain account connected at startup: {identity.address}")
        except ProviderError as e:
            logger.warning(f"Chain auto-connect failed, using local transaction hashes: {e.message}")
    app.state.chain_provider = chain_provider

    yield

    await chain_provider.close()
    logger.info("Delivery Tracker stopped")

# Create FastAPI app
app_config = {
    "title": "Delivery Tracker",
    "description": "Delivery tracking with a chain-backed transaction log",
    "version": "1.0.0",
    "lifespan": lifespan,
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "message": "Welcome to the Delivery Tracker API",
        "status": "active",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    chain_provider = getattr(app.state, "chain_provider", None)
    identity = chain_provider.current_identity() if chain_provider else None
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "components": {
            "chain_provider": chain_provider.name if chain_provider else "not initialised",
            "chain_connected": identity is not None,
        }
    }

def run_http():
    """Run HTTP server on port 9106"""
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=9106,
        reload=settings.DEBUG
    )

if __name__ == "__main__":
    run_http()
