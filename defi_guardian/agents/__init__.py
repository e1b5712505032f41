"""Agent implementations for wallet risk aggregation."""

from defi_guardian.agents.data_agent import DataAgent
from defi_guardian.agents.lp_agent import LPAgent
from defi_guardian.agents.report_agent import ReportAgent

__all__ = ["DataAgent", "LPAgent", "ReportAgent"]
