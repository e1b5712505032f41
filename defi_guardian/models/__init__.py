"""Pydantic models for DeFi wallet risk analysis."""

from defi_guardian.models.schemas import (
    AnalysisRequest,
    ImpermanentLossResult,
    LendingData,
    LPPositionInput,
    PortfolioData,
    RiskLevel,
    RiskReport,
    YieldData,
)

__all__ = [
    "AnalysisRequest",
    "LPPositionInput",
    "LendingData",
    "YieldData",
    "PortfolioData",
    "ImpermanentLossResult",
    "RiskLevel",
    "RiskReport",
]
