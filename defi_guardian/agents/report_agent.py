"""Report Agent - Assembles the wallet risk report and its summary."""

import logging
from typing import Any

from defi_guardian.models.schemas import (
    ArbitrageAnalysis,
    ArbitrageData,
    GuardianState,
    ImpermanentLossResult,
    LendingAnalysis,
    LendingData,
    LPAnalysis,
    PerpsAnalysis,
    PerpsData,
    PortfolioData,
    RiskLevel,
    RiskReport,
    YieldAnalysis,
    YieldData,
    utc_now,
)
from defi_guardian.tools.alerts import extract_alerts
from defi_guardian.tools.risk_metrics import RiskCalculator, get_calculator

logger = logging.getLogger(__name__)

RISK_LABELS = {
    RiskLevel.CRITICAL: "🚨 CRITICAL",
    RiskLevel.HIGH: "⚠️ HIGH",
    RiskLevel.MODERATE: "ℹ️ MODERATE",
    RiskLevel.LOW: "✅ LOW",
}


class ReportAgent:
    """Agent responsible for generating risk reports."""

    def __init__(self, calculator: RiskCalculator | None = None) -> None:
        self.calculator = calculator or get_calculator()
        self.name = "report_agent"

    def generate_summary(
        self,
        risk_score: int,
        critical_alerts: list[str],
        lending: LendingData | None,
        yield_data: YieldData | None,
        lp: ImpermanentLossResult | None,
        portfolio: PortfolioData | None,
        supplied_positions: int = 0,
    ) -> str:
        """
        Render the narrative summary.

        Clauses always appear in the same order and only when their data is
        present, so identical inputs give identical text.
        """
        label = RISK_LABELS[RiskLevel.from_score(risk_score)]
        parts = [f"{label} risk detected (score: {risk_score}/100)."]

        detected = portfolio.lp_positions if portfolio else []
        if detected:
            dex_count = len({p.protocol for p in detected})
            parts.append(
                f"Found {len(detected)} LP position(s) worth "
                f"${portfolio.total_portfolio_value_usd:.0f} across {dex_count} DEX(es)."
            )

        lending_positions = lending.total_positions if lending else 0
        if lending and lending_positions > 0:
            total_collateral = sum(p.collateral_usd for p in lending.positions)
            parts.append(
                f"${total_collateral:.0f} deposited across "
                f"{lending_positions} lending protocol(s)."
            )

        if critical_alerts:
            parts.append(f"{len(critical_alerts)} critical alert(s) require immediate attention.")

        if lending and lending.at_risk_count > 0:
            parts.append(f"{lending.at_risk_count} position(s) at liquidation risk.")

        if lp is not None:
            if lp.net_apr < 0:
                parts.append(f"LP position showing negative returns ({lp.net_apr:.2f}% APR).")
            else:
                parts.append(f"LP position earning {lp.net_apr:.2f}% net APR.")

        if yield_data and yield_data.pools:
            parts.append(f"Found {len(yield_data.pools)} high-yield opportunities.")

        lp_positions = len(detected) + supplied_positions
        if risk_score < 25 and lending_positions == 0 and lp_positions == 0:
            parts.append(
                "No active DeFi positions detected. Consider the yield opportunities shown."
            )
        elif risk_score < 25:
            parts.append("Your DeFi positions are healthy. Continue monitoring for changes.")

        return " ".join(parts)

    def generate_report(self, state: GuardianState) -> RiskReport:
        """Build the final report from the collected upstream results."""
        request = state["request"]
        lending: LendingData | None = state.get("lending")
        yield_data: YieldData | None = state.get("yield_data")
        lp: ImpermanentLossResult | None = state.get("lp")
        perps: PerpsData | None = state.get("perps")
        arbitrage: ArbitrageData | None = state.get("arbitrage")
        portfolio: PortfolioData | None = state.get("portfolio")

        risk_score = self.calculator.calculate_risk_score(lending, lp, yield_data)
        critical_alerts = extract_alerts(lending, lp, state.get("primary_position"))
        summary = self.generate_summary(
            risk_score,
            critical_alerts,
            lending,
            yield_data,
            lp,
            portfolio,
            supplied_positions=len(request.lp_positions or []),
        )

        total_positions = (lending.total_positions if lending else 0) + (
            len(yield_data.pools) if yield_data else 0
        )

        return RiskReport(
            wallet_address=request.wallet_address,
            overall_risk_score=risk_score,
            total_positions=total_positions,
            critical_alerts=critical_alerts,
            lending_analysis=LendingAnalysis(
                positions=lending.positions, at_risk_count=lending.at_risk_count
            )
            if lending
            else None,
            yield_analysis=YieldAnalysis(
                pools=yield_data.pools, alerts_count=yield_data.alerts_count
            )
            if yield_data
            else None,
            lp_analysis=LPAnalysis(
                il_percentage=lp.il_percentage,
                net_apr=lp.net_apr,
                recommendation=lp.recommendation,
            )
            if lp
            else None,
            perps_analysis=PerpsAnalysis(positions=perps.positions) if perps else None,
            arbitrage_opportunities=ArbitrageAnalysis(opportunities=arbitrage.opportunities)
            if arbitrage
            else None,
            summary=summary,
            timestamp=utc_now(),
        )

    async def assemble_report(self, state: GuardianState) -> dict[str, Any]:
        """Graph node: joins every upstream branch."""
        report = self.generate_report(state)
        logger.info(
            "Report for %s: score %d, %d alert(s)",
            report.wallet_address,
            report.overall_risk_score,
            len(report.critical_alerts),
        )
        return {"report": report}

    def format_report(self, report: RiskReport) -> str:
        """Format risk report as markdown."""
        level = RiskLevel.from_score(report.overall_risk_score)
        lines = [
            f"# DeFi Guardian Report: {report.wallet_address}",
            "",
            f"_Generated: {report.timestamp.strftime('%Y-%m-%d %H:%M UTC')}_",
            "",
            f"**Risk Score:** {report.overall_risk_score}/100 ({level.value.upper()})",
            f"**Total Positions:** {report.total_positions}",
            "",
            "## Summary",
            "",
            report.summary,
            "",
        ]

        if report.critical_alerts:
            lines.append("## Critical Alerts")
            for alert in report.critical_alerts:
                lines.append(f"- {alert}")
            lines.append("")

        lines.append("## Lending")
        if report.lending_analysis:
            lines.append(f"**At Risk:** {report.lending_analysis.at_risk_count}")
            for pos in report.lending_analysis.positions:
                lines.append(
                    f"- {pos.protocol} (chain {pos.chain_id}): health factor "
                    f"{pos.health_factor:.2f}, collateral ${pos.collateral_usd:,.0f}"
                )
        else:
            lines.append("_Lending data unavailable_")
        lines.append("")

        lines.append("## Yield")
        if report.yield_analysis:
            lines.append(f"**Pools:** {len(report.yield_analysis.pools)}")
            lines.append(f"**Alerts:** {report.yield_analysis.alerts_count}")
        else:
            lines.append("_Yield data unavailable_")
        lines.append("")

        lines.append("## Liquidity Positions")
        if report.lp_analysis:
            lines.append(f"**Impermanent Loss:** {report.lp_analysis.il_percentage:.2f}%")
            lines.append(f"**Net APR:** {report.lp_analysis.net_apr:.2f}%")
            lines.append(f"**Recommendation:** {report.lp_analysis.recommendation}")
        else:
            lines.append("_No LP analysis_")
        lines.append("")

        if report.perps_analysis:
            lines.append("## Perpetuals")
            lines.append(f"**Positions:** {len(report.perps_analysis.positions)}")
            lines.append("")

        if report.arbitrage_opportunities:
            lines.append("## Arbitrage")
            lines.append(
                f"**Opportunities:** {len(report.arbitrage_opportunities.opportunities)}"
            )
            lines.append("")

        lines.extend(
            [
                "---",
                "",
                "*This report is generated algorithmically from third-party analytics. "
                "It should not be considered financial advice.*",
            ]
        )

        return "\n".join(lines)
