from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from core.db import engine
from core.logging import setup_logging
from core.metrics import get_prometheus_metrics
from exceptions import domain_exception_handler
from services.exceptions import FleetDomainError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    try:
        yield
    finally:
        # teardown on shutdown
        await engine.dispose()
        logger.info("Database engine disposed.")


app = FastAPI(title="Bus Fleet API", lifespan=lifespan)

# Register exception handler
app.add_exception_handler(FleetDomainError, domain_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],   # Allows POST, GET, OPTIONS, etc
    allow_headers=["*"],
)

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")  # Public endpoint for Prometheus scraping
async def prometheus_metrics():
    """Prometheus metrics endpoint for scraping"""
    return Response(content=get_prometheus_metrics(), media_type="text/plain")
