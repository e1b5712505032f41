"""Shared fixtures for DeFi Guardian tests."""

from typing import Any, Callable

import httpx
import pytest
import respx

from defi_guardian.config import GuardianConfig, UpstreamService
from defi_guardian.models.schemas import AnalysisRequest

WALLET = "0x" + "ab" * 20

TEST_URLS = {service: f"https://{service.value}.guardian.test/api" for service in UpstreamService}

LENDING_PAYLOAD = {
    "positions": [
        {"protocol": "aave", "chain_id": 1, "health_factor": 1.0, "collateral_usd": 1000},
        {"protocol": "compound", "chain_id": 42161, "health_factor": 1.3, "collateral_usd": 2500},
        {"protocol": "aave", "chain_id": 8453, "health_factor": 1.1, "collateral_usd": 500},
    ],
    "total_positions": 3,
    "at_risk_count": 2,
}

YIELD_PAYLOAD = {
    "pools": [
        {"pool": "aave-v3-usdc", "chain": "Ethereum", "apy": 12.5},
        {"pool": "uniswap-v3-eth-usdc", "chain": "Base", "apy": 18.1},
    ],
    "alerts_count": 1,
}

LP_PAYLOAD = {"il_percentage": -15.0, "net_apr": -3.25, "recommendation": "Consider exiting"}

PORTFOLIO_PAYLOAD = {
    "lp_positions": [
        {
            "protocol": "uniswap-v3",
            "token0_symbol": "WETH",
            "token1_symbol": "USDC",
            "token0_amount": 1.5,
            "token1_amount": 3000,
            "token0_price_usd": 2000,
            "token1_price_usd": 1,
            "fees_owed_0": 0.01,
            "fees_owed_1": 5,
        },
        {
            "protocol": "curve",
            "token0_amount": 100,
            "token1_amount": 100,
            "token0_price_usd": 1,
            "token1_price_usd": 1,
        },
    ],
    "total_portfolio_value_usd": 6200,
}

PERPS_PAYLOAD = {"positions": [{"market": "BTC/USDT:USDT", "funding_rate": 0.0001}]}

ARBITRAGE_PAYLOAD = {"opportunities": [{"pair": "ETH/USDC", "profit_pct": 0.45}]}


def _side_effect(response: Any):
    if isinstance(response, dict):
        return lambda request: httpx.Response(200, json=response)
    if isinstance(response, int):
        return lambda request: httpx.Response(response)
    # Exception or side effect callable
    return response


@pytest.fixture
def config() -> GuardianConfig:
    """Config pointing at mocked upstream URLs."""
    return GuardianConfig(api_key="test-key", service_urls=dict(TEST_URLS), timeout=1.0)


@pytest.fixture
def request_data() -> AnalysisRequest:
    return AnalysisRequest(wallet_address=WALLET)


@pytest.fixture
def upstream():
    """Mock router for the upstream services."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def mock_services(upstream) -> Callable[..., dict[UpstreamService, respx.Route]]:
    """
    Register one route per service.

    Values may be a JSON payload, a status code, an exception or a side
    effect callable. Services left out answer 503.
    """

    def _mock(responses: dict[UpstreamService, Any] | None = None):
        responses = responses or {}
        routes = {}
        for service, url in TEST_URLS.items():
            route = upstream.post(url)
            route.mock(side_effect=_side_effect(responses.get(service, 503)))
            routes[service] = route
        return routes

    return _mock


@pytest.fixture
def all_services_up() -> dict[UpstreamService, Any]:
    return {
        UpstreamService.LENDING: LENDING_PAYLOAD,
        UpstreamService.YIELD: YIELD_PAYLOAD,
        UpstreamService.LP: LP_PAYLOAD,
        UpstreamService.PORTFOLIO: PORTFOLIO_PAYLOAD,
        UpstreamService.PERPS: PERPS_PAYLOAD,
        UpstreamService.ARBITRAGE: ARBITRAGE_PAYLOAD,
    }
