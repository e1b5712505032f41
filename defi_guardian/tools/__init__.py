"""Tools for upstream access, risk scoring and alerting."""

from defi_guardian.tools.alerts import extract_alerts
from defi_guardian.tools.risk_metrics import RiskCalculator
from defi_guardian.tools.upstream import UpstreamClient, UpstreamUnavailable

__all__ = ["UpstreamClient", "UpstreamUnavailable", "RiskCalculator", "extract_alerts"]
