"""FastAPI application for DeFi wallet risk reports."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from defi_guardian import __version__
from defi_guardian.graph.workflow import GuardianWorkflow
from defi_guardian.logging_config import configure_logging
from defi_guardian.models.schemas import AnalysisRequest, HealthResponse, RiskReport

logger = logging.getLogger(__name__)

# Global workflow instance
workflow: GuardianWorkflow | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global workflow
    configure_logging()
    # Fails fast when INTERNAL_API_KEY is missing
    workflow = GuardianWorkflow.from_env()
    logger.info("DeFi Guardian %s ready", __version__)
    yield
    workflow = None


app = FastAPI(
    title="DeFi Guardian API",
    description="DeFi portfolio risk aggregation across lending, yield and LP analytics",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


@app.post("/analyze", response_model=RiskReport)
async def analyze_wallet(request: AnalysisRequest) -> RiskReport:
    """
    Generate a risk report for a wallet.

    Malformed requests are rejected with 422 before any upstream call.
    Unavailable upstream services leave their report section null.
    """
    if workflow is None:
        raise HTTPException(status_code=503, detail="Service not initialized")

    try:
        return await workflow.analyze(request)
    except Exception:
        logger.exception("Report generation failed for %s", request.wallet_address)
        raise HTTPException(status_code=500, detail="Analysis failed")


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
