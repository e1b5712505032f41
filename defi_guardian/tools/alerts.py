"""Critical alert extraction from lending and LP results."""

from defi_guardian.models.schemas import (
    DetectedLPPosition,
    ImpermanentLossResult,
    LendingData,
    LPPositionInput,
)
from defi_guardian.tools.risk_metrics import RiskCalculator

IL_ALERT_THRESHOLD = -10.0


def lending_alerts(lending: LendingData | None) -> list[str]:
    """One alert per lending position below the critical health factor."""
    if lending is None:
        return []
    return [
        f"🚨 {p.protocol} on chain {p.chain_id}: Health factor {p.health_factor:.2f}"
        for p in lending.positions
        if p.health_factor < RiskCalculator.HEALTH_FACTOR_CRITICAL
    ]


def impermanent_loss_alert(
    lp: ImpermanentLossResult | None,
    position: LPPositionInput | DetectedLPPosition | None,
) -> str | None:
    if lp is None or position is None or lp.il_percentage >= IL_ALERT_THRESHOLD:
        return None
    return f"💸 {position.protocol}: {lp.il_percentage:.2f}% impermanent loss detected"


def extract_alerts(
    lending: LendingData | None,
    lp: ImpermanentLossResult | None,
    primary_position: LPPositionInput | DetectedLPPosition | None,
) -> list[str]:
    """
    Derive critical alerts in discovery order.

    Lending alerts come first, followed by at most one impermanent-loss alert
    for the primary LP position. Duplicates are kept.
    """
    alerts = lending_alerts(lending)
    il_alert = impermanent_loss_alert(lp, primary_position)
    if il_alert:
        alerts.append(il_alert)
    return alerts
