"""Composite risk scoring for wallet positions."""

import math

from defi_guardian.models.schemas import ImpermanentLossResult, LendingData, YieldData


class RiskCalculator:
    """Calculate the 0-100 composite risk score for a wallet."""

    # Lending: positions close to liquidation
    HEALTH_FACTOR_CRITICAL = 1.2
    LENDING_POINTS_PER_POSITION = 25
    LENDING_CAP = 50

    # LP: impermanent loss beyond the tolerance band
    IL_TOLERANCE = -5.0
    LP_POINTS_PER_PERCENT = 3
    LP_CAP = 30

    # Yield: pool volatility alerts
    YIELD_POINTS_PER_ALERT = 5
    YIELD_CAP = 20

    MAX_SCORE = 100

    def count_critical_positions(self, lending: LendingData | None) -> int:
        """Count lending positions with a health factor below the critical threshold."""
        if lending is None:
            return 0
        return sum(
            1 for p in lending.positions if p.health_factor < self.HEALTH_FACTOR_CRITICAL
        )

    def score_lending(self, lending: LendingData | None) -> int:
        """Lending component, capped at 50."""
        count = self.count_critical_positions(lending)
        return min(count * self.LENDING_POINTS_PER_POSITION, self.LENDING_CAP)

    def score_lp(self, lp: ImpermanentLossResult | None) -> float:
        """Impermanent-loss component, capped at 30."""
        if lp is None or lp.il_percentage >= self.IL_TOLERANCE:
            return 0.0
        return min(abs(lp.il_percentage) * self.LP_POINTS_PER_PERCENT, self.LP_CAP)

    def score_yield(self, yield_data: YieldData | None) -> int:
        """Yield alert component, capped at 20."""
        if yield_data is None:
            return 0
        return min(yield_data.alerts_count * self.YIELD_POINTS_PER_ALERT, self.YIELD_CAP)

    def calculate_risk_score(
        self,
        lending: LendingData | None,
        lp: ImpermanentLossResult | None,
        yield_data: YieldData | None,
    ) -> int:
        """
        Combine the per-source components into one score.

        Missing sources contribute nothing. The sum is rounded half-up and
        clamped to [0, 100].
        """
        total = self.score_lending(lending) + self.score_lp(lp) + self.score_yield(yield_data)
        rounded = math.floor(total + 0.5)
        return max(0, min(int(rounded), self.MAX_SCORE))


# Singleton instance
_calculator: RiskCalculator | None = None


def get_calculator() -> RiskCalculator:
    """Get or create RiskCalculator singleton."""
    global _calculator
    if _calculator is None:
        _calculator = RiskCalculator()
    return _calculator
