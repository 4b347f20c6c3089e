"""
main.py
CLI entry point for the SPLS Port Cost Estimator.

Usage:
  python main.py demo   --module cargo
  python main.py demo   --module all --sample
  python main.py api
"""
import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running directly
sys.path.insert(0, str(Path(__file__).parent))

# ── Reference scenarios, one per module ───────────────────────────────────────
DEMO_SCENARIOS = {
    "vessel": {
        "gross_tonnage": 30000, "loa": 190, "draft": 11.5, "beam": 32,
        "cargo": "Coal", "quantity": 50000, "trade_type": "Foreign",
    },
    "cargo": {
        "cargo": "Coal", "weight": 10000, "trade_type": "Foreign",
        "days_after_free": 4, "quantity_delivered": 100, "storage_type": "Open",
    },
    "rail": {
        "cargo_type": "Coal", "wagon_type": "BOXN", "num_wagons": 58,
        "operation_hours": 40, "cargo_weight": 3800,
    },
    "storage": {
        "storage_type": "immediate", "cargo": "Coal", "weight": 5000,
        "area_type": "Covered", "days": 20,
    },
    "stevedore": {
        "cargo": "Coal", "weight": 10000, "labour_line": "1",
        "mobile_crane": "N", "shift": "Full",
    },
}


# Demo mode

def run_demo(module: str = "all", sample: bool = False) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    from calculation_engine.engine import CalculationEngine
    from knowledge_base.sample_data import SAMPLE_ROWS
    from knowledge_base.table_store import TableStore, get_table_store
    from query_processor.models import ScenarioValidationError
    from query_processor.parser import ScenarioBuilder

    console = Console()
    console.print("\n[bold blue]═══ SPLS PORT COST ESTIMATOR: DEMO ═══[/bold blue]\n")

    store = get_table_store()
    if sample or not store.loaded_tables():
        console.print("  [yellow]Using the bundled sample rate tables[/yellow]\n")
        store = TableStore.from_rows(SAMPLE_ROWS)

    engine  = CalculationEngine(store=store)
    builder = ScenarioBuilder()
    modules = engine.modules if module == "all" else [module]

    for name in modules:
        raw = DEMO_SCENARIOS[name]
        try:
            result = engine.calculate(name, builder.build(name, raw))
        except ScenarioValidationError as exc:
            console.print(f"  [red]{name}: invalid scenario[/red]")
            for issue in exc.issues:
                console.print(f"    • {issue}")
            continue

        console.print(f"[bold]{name.title()}[/bold]  " + ", ".join(f"{k}={v}" for k, v in raw.items()))

        if result.logistics:
            logi = Table(title="Logistics", box=box.SIMPLE)
            logi.add_column("Field", style="cyan")
            logi.add_column("Value")
            for key, value in result.logistics.items():
                if key == "eligible_berths":
                    value = "; ".join(f"{g['dock']}: {', '.join(g['berths'])}" for g in value) or "none"
                logi.add_row(key.replace("_", " ").title(), str(value))
            console.print(logi)

        table = Table(
            title=f"{name.title()} charges ({result.mode})",
            box=box.ROUNDED,
            show_lines=True,
        )
        table.add_column("Charge", style="cyan", width=52)
        table.add_column("Amount (INR)", justify="right", style="green", width=20)
        for item in result.breakdown:
            table.add_row(item["item"], f"₹{item['amount']:>16,.2f}")
        table.add_section()
        table.add_row("Subtotal", f"₹{result.subtotal:>16,.2f}")
        table.add_row(f"GST ({result.metadata.get('tax_rate', 0):.0%})", f"₹{result.taxes:>16,.2f}")
        table.add_row("[bold]TOTAL[/bold]", f"[bold green]₹{result.total:>16,.2f}[/bold green]")
        console.print(table)

        gr = result.metadata.get("guardrails", {})
        status_str = "[green]PASSED[/green]" if gr.get("passed", True) else "[red]FLAGGED[/red]"
        console.print(f"  [bold]Guardrail Status:[/bold] {status_str}")
        for issue in gr.get("issues", []):
            console.print(f"  [red]✗  {issue}[/red]")
        for w in result.warnings:
            console.print(f"  [yellow]⚠  {w}[/yellow]")
        if "inr_per_usd" in result.metadata:
            console.print(
                f"  INR/USD {result.metadata['inr_per_usd']} "
                f"({result.metadata.get('exchange_rate_source')})"
            )
        console.print()


# ── API mode ──────────────────────────────────────────────────────────────────

def run_api(reload: bool = False) -> None:
    import uvicorn
    from config.settings import settings
    from monitoring import start_metrics_server
    start_metrics_server(settings.metrics_port)
    uvicorn.run(
        "api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="SPLS Port Cost Estimator")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Render a sample breakdown in the console")
    demo.add_argument(
        "--module", default="all", choices=["all", *DEMO_SCENARIOS],
        help="Module to demonstrate (default: all)",
    )
    demo.add_argument("--sample", action="store_true", help="Use the bundled sample rate tables")

    api = sub.add_parser("api", help="Serve the REST API with uvicorn")
    api.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    if args.command == "demo":
        run_demo(args.module, args.sample)
    else:
        run_api(args.reload)


if __name__ == "__main__":
    main()
