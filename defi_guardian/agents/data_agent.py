"""Data Agent - Fetches wallet data from the internal analytics services."""

import logging
from typing import Any

from defi_guardian.config import UpstreamService
from defi_guardian.models.schemas import (
    ArbitrageData,
    GuardianState,
    LendingData,
    PerpsData,
    PortfolioData,
    YieldData,
)
from defi_guardian.tools.upstream import UpstreamClient

logger = logging.getLogger(__name__)

LENDING_PROTOCOLS = ["aave", "compound"]
LENDING_ALERT_THRESHOLD = 1.5

YIELD_PROTOCOL_IDS = ["aave-v3", "compound-v3", "uniswap-v3"]
YIELD_APY_THRESHOLD = 10
YIELD_TVL_THRESHOLD = 0.2

PERPS_VENUE_IDS = ["okx", "hyperliquid"]
PERPS_MARKETS = ["BTC/USDT:USDT", "ETH/USDT:USDT"]

ARBITRAGE_MIN_PROFIT_PCT = 0.3


class DataAgent:
    """
    Agent responsible for the independent upstream fetches.

    Each graph node reads the request from state and returns only the key it
    owns, so all of them can run in the same graph step.
    """

    def __init__(self, client: UpstreamClient) -> None:
        self.client = client
        self.name = "data_agent"

    async def fetch_portfolio(self, wallet_address: str, chain_ids: list[int]) -> PortfolioData | None:
        return await self.client.call(
            UpstreamService.PORTFOLIO,
            {"wallet_address": wallet_address, "chain_ids": chain_ids},
            PortfolioData,
        )

    async def fetch_lending(self, wallet_address: str, chain_ids: list[int]) -> LendingData | None:
        return await self.client.call(
            UpstreamService.LENDING,
            {
                "wallet_address": wallet_address,
                "chain_ids": chain_ids,
                "protocols": LENDING_PROTOCOLS,
                "alert_threshold": LENDING_ALERT_THRESHOLD,
            },
            LendingData,
        )

    async def fetch_yield(self, chain_ids: list[int]) -> YieldData | None:
        return await self.client.call(
            UpstreamService.YIELD,
            {
                "protocol_ids": YIELD_PROTOCOL_IDS,
                "chain_ids": chain_ids,
                "apy_threshold": YIELD_APY_THRESHOLD,
                "tvl_threshold": YIELD_TVL_THRESHOLD,
            },
            YieldData,
        )

    async def fetch_perps(self) -> PerpsData | None:
        return await self.client.call(
            UpstreamService.PERPS,
            {"venue_ids": PERPS_VENUE_IDS, "markets": PERPS_MARKETS},
            PerpsData,
        )

    async def fetch_arbitrage(self, chain_id: int) -> ArbitrageData | None:
        return await self.client.call(
            UpstreamService.ARBITRAGE,
            {"chain_id": chain_id, "min_profit_pct": ARBITRAGE_MIN_PROFIT_PCT},
            ArbitrageData,
        )

    # Graph nodes

    async def discover_positions(self, state: GuardianState) -> dict[str, Any]:
        """Auto-detect LP positions unless the caller supplied them."""
        request = state["request"]

        if request.lp_positions:
            logger.info(
                "Using %d supplied LP position(s), skipping portfolio scan",
                len(request.lp_positions),
            )
            return {"portfolio": None}

        logger.info("Scanning wallet %s for LP positions", request.wallet_address)
        portfolio = await self.fetch_portfolio(request.wallet_address, request.chain_ids)
        detected = len(portfolio.lp_positions) if portfolio else 0
        logger.info("Found %d LP position(s)", detected)

        return {"portfolio": portfolio}

    async def analyze_lending(self, state: GuardianState) -> dict[str, Any]:
        request = state["request"]
        logger.info("Analyzing lending positions")
        lending = await self.fetch_lending(request.wallet_address, request.chain_ids)
        return {"lending": lending}

    async def analyze_yield(self, state: GuardianState) -> dict[str, Any]:
        request = state["request"]
        logger.info("Analyzing yield pools")
        yield_data = await self.fetch_yield(request.chain_ids)
        return {"yield_data": yield_data}

    async def analyze_perps(self, state: GuardianState) -> dict[str, Any]:
        if not state["request"].include_perps:
            return {"perps": None}

        logger.info("Analyzing perpetuals funding")
        return {"perps": await self.fetch_perps()}

    async def scan_arbitrage(self, state: GuardianState) -> dict[str, Any]:
        request = state["request"]
        if not request.include_arbitrage:
            return {"arbitrage": None}

        logger.info("Scanning arbitrage opportunities on chain %d", request.chain_ids[0])
        return {"arbitrage": await self.fetch_arbitrage(request.chain_ids[0])}
