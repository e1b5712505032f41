"""LP Agent - Estimates impermanent loss for the primary liquidity position."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from defi_guardian.config import UpstreamService
from defi_guardian.models.schemas import (
    AnalysisRequest,
    DetectedLPPosition,
    GuardianState,
    ImpermanentLossResult,
    LPPositionInput,
    PortfolioData,
)
from defi_guardian.tools.upstream import UpstreamClient

logger = logging.getLogger(__name__)

DEFAULT_HOLDING_DAYS = 30

LPPosition = LPPositionInput | DetectedLPPosition


def select_primary_position(
    request: AnalysisRequest, portfolio: PortfolioData | None
) -> LPPosition | None:
    """First supplied position, else first detected one."""
    if request.lp_positions:
        return request.lp_positions[0]
    if portfolio and portfolio.lp_positions:
        return portfolio.lp_positions[0]
    return None


def days_held(entry: datetime | None, now: datetime) -> int:
    """Whole days since entry, defaulting to a 30-day estimate when unknown."""
    if entry is None:
        entry = now - timedelta(days=DEFAULT_HOLDING_DAYS)
    if entry.tzinfo is None:
        entry = entry.replace(tzinfo=timezone.utc)
    return max(0, (now - entry).days)


def build_il_payload(position: LPPosition, now: datetime) -> dict[str, Any] | None:
    """
    Build the impermanent-loss estimator request for a position.

    Supplied positions use their entry prices, and current prices when both
    are given. Detected positions only carry current USD prices, which stand
    in for the entry prices as well.

    Returns:
        The payload, or None when the price ratio cannot be computed.
    """
    if isinstance(position, LPPositionInput):
        if position.current_price0 and position.current_price1:
            ratio = position.current_price0 / position.current_price1
        else:
            logger.info(
                "No current prices for %s position, IL estimate assumes no price movement",
                position.protocol,
            )
            ratio = position.initial_price0 / position.initial_price1

        return {
            "initial_price_0": position.initial_price0,
            "initial_price_1": position.initial_price1,
            "current_price_ratio": ratio,
            "amount_0": position.token0_amount,
            "amount_1": position.token1_amount,
            "fees_earned": 0.0,
            "days_held": days_held(position.entry_date, now),
        }

    if position.token1_price_usd <= 0:
        return None

    fees_earned = (
        position.fees_owed_0 * position.token0_price_usd
        + position.fees_owed_1 * position.token1_price_usd
    )
    return {
        "initial_price_0": position.token0_price_usd,
        "initial_price_1": position.token1_price_usd,
        "current_price_ratio": position.token0_price_usd / position.token1_price_usd,
        "amount_0": position.token0_amount,
        "amount_1": position.token1_amount,
        "fees_earned": fees_earned,
        "days_held": days_held(position.entry_timestamp, now),
    }


class LPAgent:
    """Agent responsible for impermanent-loss analysis."""

    def __init__(self, client: UpstreamClient) -> None:
        self.client = client
        self.name = "lp_agent"

    async def estimate_impermanent_loss(
        self, position: LPPosition, now: datetime | None = None
    ) -> ImpermanentLossResult | None:
        payload = build_il_payload(position, now or datetime.now(timezone.utc))
        if payload is None:
            logger.info("Skipping IL analysis for %s: no usable price ratio", position.protocol)
            return None
        return await self.client.call(UpstreamService.LP, payload, ImpermanentLossResult)

    async def analyze_lp(self, state: GuardianState) -> dict[str, Any]:
        """Graph node: runs after position discovery."""
        position = select_primary_position(state["request"], state.get("portfolio"))

        if position is None:
            logger.info("No LP positions, skipping IL analysis")
            return {"primary_position": None, "lp": None}

        logger.info("Analyzing %s LP position for impermanent loss", position.protocol)
        lp = await self.estimate_impermanent_loss(position)

        return {"primary_position": position, "lp": lp}
