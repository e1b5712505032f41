"""CLI interface for DeFi wallet risk reports."""

import asyncio
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from defi_guardian import __version__
from defi_guardian.config import ConfigError
from defi_guardian.graph.workflow import GuardianWorkflow
from defi_guardian.logging_config import configure_logging
from defi_guardian.models.schemas import DEFAULT_CHAIN_IDS, AnalysisRequest

app = typer.Typer(
    name="defi-guardian",
    help="DeFi portfolio risk aggregation",
    add_completion=False,
)
console = Console()


def run_async(coro):
    """Run async function in sync context."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        return asyncio.run(coro)
    else:
        return loop.run_until_complete(coro)


@app.command()
def analyze(
    wallet: Annotated[str, typer.Argument(help="Wallet address to analyze (0x...)")],
    chains: Annotated[
        list[int] | None,
        typer.Option("--chain", "-c", help="Chain ID to include (repeatable)"),
    ] = None,
    perps: Annotated[
        bool, typer.Option("--perps", help="Include perpetuals funding analysis")
    ] = False,
    arbitrage: Annotated[
        bool, typer.Option("--arbitrage", help="Include cross-DEX arbitrage opportunities")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """
    Generate a risk report for a wallet.

    Example:
        defi-guardian analyze 0xabc...
        defi-guardian analyze 0xabc... -c 1 -c 8453 --perps
        defi-guardian analyze 0xabc... --json
    """
    configure_logging()

    try:
        request = AnalysisRequest(
            wallet_address=wallet,
            chain_ids=chains or list(DEFAULT_CHAIN_IDS),
            include_perps=perps,
            include_arbitrage=arbitrage,
        )
    except ValidationError as e:
        for error in e.errors():
            console.print(f"[red]Invalid input:[/red] {error['msg']}")
        raise typer.Exit(1)

    try:
        workflow = GuardianWorkflow.from_env()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(f"Analyzing {wallet}...", total=None)
        report = run_async(workflow.analyze(request))
        progress.update(task, completed=True)

    if json_output:
        console.print(report.model_dump_json(indent=2))
    else:
        console.print(Markdown(workflow.format_report(report)))


@app.command()
def version() -> None:
    """Show version information."""
    console.print(Panel(f"DeFi Guardian v{__version__}", style="green"))
    console.print("Built with LangGraph, FastAPI, and Typer")
    console.print("Sources: lending sentinel, yield watcher, IL estimator, portfolio scanner")


if __name__ == "__main__":
    app()
