"""Pydantic models for DeFi wallet risk analysis."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import TypedDict

WALLET_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
DEFAULT_CHAIN_IDS = [1, 42161, 8453]  # Ethereum, Arbitrum, Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RiskLevel(str, Enum):
    """Risk level classification."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def from_score(cls, score: int) -> "RiskLevel":
        """Map a 0-100 composite score to its band."""
        if score >= 75:
            return cls.CRITICAL
        elif score >= 50:
            return cls.HIGH
        elif score >= 25:
            return cls.MODERATE
        return cls.LOW


# Request Models


class LPPositionInput(BaseModel):
    """Liquidity position supplied by the caller."""

    protocol: str = Field(min_length=1, description="DEX name (uniswap-v3, curve, balancer)")
    token0_symbol: str
    token1_symbol: str
    token0_amount: float = Field(ge=0)
    token1_amount: float = Field(ge=0)
    initial_price0: float = Field(gt=0)
    initial_price1: float = Field(gt=0)
    entry_date: datetime = Field(description="When the position was opened")
    current_price0: float | None = Field(
        default=None,
        gt=0,
        description="Current token0 price; without both current prices the IL estimate assumes no price movement",
    )
    current_price1: float | None = Field(
        default=None,
        gt=0,
        description="Current token1 price; without both current prices the IL estimate assumes no price movement",
    )


class AnalysisRequest(BaseModel):
    """Request to analyze a wallet."""

    wallet_address: str = Field(description="EVM wallet address to analyze")
    chain_ids: list[int] = Field(
        default_factory=lambda: list(DEFAULT_CHAIN_IDS),
        min_length=1,
        description="Chain IDs to analyze (default: Ethereum, Arbitrum, Base)",
    )
    include_perps: bool = Field(default=False, description="Include perpetuals funding analysis")
    include_arbitrage: bool = Field(
        default=False, description="Include cross-DEX arbitrage opportunities"
    )
    lp_positions: list[LPPositionInput] | None = Field(
        default=None, description="Optional LP positions for accurate IL analysis"
    )

    @field_validator("wallet_address")
    @classmethod
    def check_wallet_address(cls, value: str) -> str:
        value = value.strip()
        if not WALLET_ADDRESS_RE.match(value):
            raise ValueError("wallet_address must be a 0x-prefixed 40 hex character address")
        return value

    @field_validator("chain_ids")
    @classmethod
    def check_chain_ids(cls, value: list[int]) -> list[int]:
        if any(chain_id <= 0 for chain_id in value):
            raise ValueError("chain_ids must be positive integers")
        return value


# Upstream Response Models
#
# Extra fields are kept so they pass through to the report untouched.


class LendingPosition(BaseModel):
    """Lending position reported by the liquidation sentinel."""

    model_config = ConfigDict(extra="allow")

    protocol: str
    chain_id: int
    health_factor: float = Field(ge=0)
    collateral_usd: float = 0.0


class LendingData(BaseModel):
    model_config = ConfigDict(extra="allow")

    positions: list[LendingPosition] = Field(default_factory=list)
    total_positions: int = Field(default=0, ge=0)
    at_risk_count: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def default_total_positions(cls, data: Any) -> Any:
        """Count the reported positions when the service omits the total."""
        if isinstance(data, dict) and data.get("total_positions") is None:
            positions = data.get("positions")
            if isinstance(positions, list):
                data = {**data, "total_positions": len(positions)}
        return data


class YieldData(BaseModel):
    model_config = ConfigDict(extra="allow")

    pools: list[dict[str, Any]] = Field(default_factory=list)
    alerts_count: int = Field(default=0, ge=0)


class DetectedLPPosition(BaseModel):
    """LP position auto-detected by the portfolio scanner."""

    model_config = ConfigDict(extra="allow")

    protocol: str
    token0_symbol: str | None = None
    token1_symbol: str | None = None
    token0_amount: float = 0.0
    token1_amount: float = 0.0
    token0_price_usd: float = 0.0
    token1_price_usd: float = 0.0
    fees_owed_0: float = 0.0
    fees_owed_1: float = 0.0
    entry_timestamp: datetime | None = None


class PortfolioData(BaseModel):
    model_config = ConfigDict(extra="allow")

    lp_positions: list[DetectedLPPosition] = Field(default_factory=list)
    total_portfolio_value_usd: float = 0.0


class ImpermanentLossResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    il_percentage: float = Field(default=0.0, description="Negative means loss")
    net_apr: float = 0.0
    recommendation: str = "No data"


class PerpsData(BaseModel):
    model_config = ConfigDict(extra="allow")

    positions: list[dict[str, Any]] = Field(default_factory=list)


class ArbitrageData(BaseModel):
    model_config = ConfigDict(extra="allow")

    opportunities: list[dict[str, Any]] = Field(default_factory=list)


# Report Models


class LendingAnalysis(BaseModel):
    positions: list[LendingPosition] = Field(default_factory=list)
    at_risk_count: int = Field(default=0, ge=0)


class YieldAnalysis(BaseModel):
    pools: list[dict[str, Any]] = Field(default_factory=list)
    alerts_count: int = Field(default=0, ge=0)


class LPAnalysis(BaseModel):
    il_percentage: float
    net_apr: float
    recommendation: str


class PerpsAnalysis(BaseModel):
    positions: list[dict[str, Any]] = Field(default_factory=list)


class ArbitrageAnalysis(BaseModel):
    opportunities: list[dict[str, Any]] = Field(default_factory=list)


class RiskReport(BaseModel):
    """Aggregated wallet risk report."""

    wallet_address: str
    overall_risk_score: int = Field(ge=0, le=100, description="0 = safe, 100 = critical")
    total_positions: int = Field(ge=0)
    critical_alerts: list[str] = Field(default_factory=list)
    lending_analysis: LendingAnalysis | None = None
    yield_analysis: YieldAnalysis | None = None
    lp_analysis: LPAnalysis | None = None
    perps_analysis: PerpsAnalysis | None = None
    arbitrage_opportunities: ArbitrageAnalysis | None = None
    summary: str
    timestamp: datetime = Field(default_factory=utc_now)


# LangGraph State Models


class GuardianState(TypedDict):
    """State for one report request.

    Each upstream phase writes only its own key so parallel branches never
    conflict. ``None`` means the source was absent or skipped.
    """

    request: AnalysisRequest
    portfolio: PortfolioData | None
    lending: LendingData | None
    yield_data: YieldData | None
    primary_position: LPPositionInput | DetectedLPPosition | None
    lp: ImpermanentLossResult | None
    perps: PerpsData | None
    arbitrage: ArbitrageData | None
    report: RiskReport | None


# API Models


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "0.1.0"
    timestamp: datetime = Field(default_factory=utc_now)
