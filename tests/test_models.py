"""Tests for request and report models."""

import pytest
from pydantic import ValidationError

from conftest import WALLET
from defi_guardian.models.schemas import (
    AnalysisRequest,
    LendingData,
    LPPositionInput,
    RiskLevel,
    RiskReport,
)

LP_INPUT = {
    "protocol": "uniswap-v3",
    "token0_symbol": "WETH",
    "token1_symbol": "USDC",
    "token0_amount": 1.0,
    "token1_amount": 2000.0,
    "initial_price0": 2000.0,
    "initial_price1": 1.0,
    "entry_date": "2026-09-01T00:00:00Z",
}


def test_request_defaults():
    request = AnalysisRequest(wallet_address=WALLET)

    assert request.chain_ids == [1, 42161, 8453]
    assert request.include_perps is False
    assert request.include_arbitrage is False
    assert request.lp_positions is None


def test_request_default_chains_not_shared():
    first = AnalysisRequest(wallet_address=WALLET)
    first.chain_ids.append(10)

    assert AnalysisRequest(wallet_address=WALLET).chain_ids == [1, 42161, 8453]


def test_request_strips_wallet_whitespace():
    assert AnalysisRequest(wallet_address=f"  {WALLET} ").wallet_address == WALLET


@pytest.mark.parametrize(
    "wallet",
    ["", "0x123", "ab" * 21, "0x" + "g" * 40, "0x" + "a" * 41],
)
def test_request_rejects_bad_wallet(wallet):
    with pytest.raises(ValidationError):
        AnalysisRequest(wallet_address=wallet)


@pytest.mark.parametrize("chain_ids", [[], [0], [1, -1]])
def test_request_rejects_bad_chain_ids(chain_ids):
    with pytest.raises(ValidationError):
        AnalysisRequest(wallet_address=WALLET, chain_ids=chain_ids)


def test_lp_input_parses_entry_date():
    position = LPPositionInput(**LP_INPUT)

    assert position.entry_date.year == 2026
    assert position.entry_date.tzinfo is not None
    assert position.current_price0 is None


@pytest.mark.parametrize(
    "field,value",
    [
        ("token0_amount", -1),
        ("initial_price0", 0),
        ("initial_price1", -2),
        ("entry_date", "last tuesday"),
    ],
)
def test_lp_input_rejects_bad_values(field, value):
    with pytest.raises(ValidationError):
        LPPositionInput(**{**LP_INPUT, field: value})


@pytest.mark.parametrize(
    "score,level",
    [
        (0, RiskLevel.LOW),
        (24, RiskLevel.LOW),
        (25, RiskLevel.MODERATE),
        (50, RiskLevel.HIGH),
        (75, RiskLevel.CRITICAL),
        (100, RiskLevel.CRITICAL),
    ],
)
def test_risk_level_from_score(score, level):
    assert RiskLevel.from_score(score) == level


def test_report_score_bounds():
    with pytest.raises(ValidationError):
        RiskReport(wallet_address=WALLET, overall_risk_score=101, total_positions=0, summary="")


def test_report_serializes_absent_sections_as_null():
    report = RiskReport(wallet_address=WALLET, overall_risk_score=0, total_positions=0, summary="ok")

    data = report.model_dump(mode="json")

    assert data["lending_analysis"] is None
    assert data["arbitrage_opportunities"] is None
    assert isinstance(data["timestamp"], str)


def test_lending_total_defaults_to_position_count():
    lending = LendingData.model_validate(
        {"positions": [{"protocol": "aave", "chain_id": 1, "health_factor": 2.0}]}
    )

    assert lending.total_positions == 1


def test_lending_reported_total_kept():
    lending = LendingData.model_validate({"positions": [], "total_positions": 4})

    assert lending.total_positions == 4
