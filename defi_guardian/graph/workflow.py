"""LangGraph workflow definition for wallet risk aggregation."""

import logging
from typing import Any

from langgraph.graph import END, START, StateGraph

from defi_guardian.agents.data_agent import DataAgent
from defi_guardian.agents.lp_agent import LPAgent
from defi_guardian.agents.report_agent import ReportAgent
from defi_guardian.config import GuardianConfig
from defi_guardian.models.schemas import AnalysisRequest, GuardianState, RiskReport
from defi_guardian.tools.upstream import UpstreamClient

logger = logging.getLogger(__name__)

# Branches that start as soon as the request is admitted
FAN_OUT_NODES = [
    "discover_positions",
    "analyze_lending",
    "analyze_yield",
    "analyze_perps",
    "scan_arbitrage",
]

# Branches the report waits on
JOIN_NODES = [
    "analyze_lp",
    "analyze_lending",
    "analyze_yield",
    "analyze_perps",
    "scan_arbitrage",
]


def create_initial_state(request: AnalysisRequest) -> dict[str, Any]:
    """Create initial state for workflow execution."""
    return {
        "request": request,
        "portfolio": None,
        "lending": None,
        "yield_data": None,
        "primary_position": None,
        "lp": None,
        "perps": None,
        "arbitrage": None,
        "report": None,
    }


def create_workflow(client: UpstreamClient, report_agent: ReportAgent | None = None) -> StateGraph:
    """
    Create the LangGraph workflow for wallet risk aggregation.

    Position discovery, lending, yield, perps and arbitrage run in parallel.
    LP analysis waits on position discovery, and report assembly waits on
    every branch.
    """
    data_agent = DataAgent(client)
    lp_agent = LPAgent(client)
    report_agent = report_agent or ReportAgent()

    workflow = StateGraph(GuardianState)

    workflow.add_node("discover_positions", data_agent.discover_positions)
    workflow.add_node("analyze_lending", data_agent.analyze_lending)
    workflow.add_node("analyze_yield", data_agent.analyze_yield)
    workflow.add_node("analyze_perps", data_agent.analyze_perps)
    workflow.add_node("scan_arbitrage", data_agent.scan_arbitrage)
    workflow.add_node("analyze_lp", lp_agent.analyze_lp)
    workflow.add_node("assemble_report", report_agent.assemble_report)

    for node in FAN_OUT_NODES:
        workflow.add_edge(START, node)

    workflow.add_edge("discover_positions", "analyze_lp")
    workflow.add_edge(JOIN_NODES, "assemble_report")
    workflow.add_edge("assemble_report", END)

    return workflow


def compile_workflow(client: UpstreamClient, report_agent: ReportAgent | None = None):
    """Compile the workflow for execution."""
    workflow = create_workflow(client, report_agent)
    return workflow.compile()


class GuardianWorkflow:
    """High-level interface for generating wallet risk reports."""

    def __init__(self, config: GuardianConfig, client: UpstreamClient | None = None) -> None:
        self.config = config
        self.client = client or UpstreamClient(config)
        self.report_agent = ReportAgent()
        self.app = compile_workflow(self.client, self.report_agent)

    @classmethod
    def from_env(cls) -> "GuardianWorkflow":
        """Build a workflow from environment configuration."""
        return cls(GuardianConfig.from_env())

    async def analyze(self, request: AnalysisRequest | dict[str, Any]) -> RiskReport:
        """
        Generate a risk report for a wallet.

        Args:
            request: Validated request, or raw fields to validate

        Returns:
            The assembled report. Upstream failures only blank out sections.

        Raises:
            pydantic.ValidationError: If the request is malformed. Raised
                before any upstream call is made.
        """
        if not isinstance(request, AnalysisRequest):
            request = AnalysisRequest.model_validate(request)

        result = await self.app.ainvoke(create_initial_state(request))
        return result["report"]

    def format_report(self, report: RiskReport) -> str:
        """Format report as markdown string."""
        return self.report_agent.format_report(report)
