# storefront_catalog/cli/runner.py

"""Headless CLI runner around the async catalog orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from storefront_catalog.models.outcome import CatalogResult
from storefront_catalog.models.product import Product
from storefront_catalog.parsers.markup import get_markup_parser
from storefront_catalog.services.catalog_orchestrator import (
    CatalogOrchestrator,
)
from storefront_catalog.services.health_checker import (
    HealthChecker,
    HealthResult,
)

logger = logging.getLogger("storefront_catalog.cli")

# Status goes to stderr; stdout carries only the catalog
_status = Console(stderr=True)

_HEALTH_STYLES: dict[str, str] = {
    "ok": "[green]OK[/green]",
    "slow": "[yellow]SLOW[/yellow]",
    "down": "[red]DOWN[/red]",
}


def _catalog_table(products: list[Product]) -> Table:
    table = Table(title="Storefront Catalog", show_lines=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", max_width=50)
    table.add_column("Price", style="green", justify="right")
    table.add_column("Handle", style="magenta")
    table.add_column("Image", justify="center")
    table.add_column("URL", style="dim", overflow="fold")

    for idx, product in enumerate(products, 1):
        table.add_row(
            str(idx),
            product.title,
            "-" if product.price is None else f"{product.price:,.2f}",
            product.handle or "-",
            "yes" if product.image else "no",
            product.url,
        )
    return table


def _report_attempts(result: CatalogResult) -> None:
    """One stderr line per ladder rung, then the source used."""
    for outcome in result.attempts:
        mark, colour = (
            ("+", "green") if outcome.accepted else ("-", "yellow")
        )
        detail = (
            f"{len(outcome.products)} products"
            if outcome.accepted
            else outcome.reason
        )
        _status.print(
            f"[{colour}]{mark} {outcome.strategy} "
            f"[{outcome.kind.name.lower()}] {detail} "
            f"in {outcome.elapsed:.1f}s[/{colour}]"
        )

    notes = [
        f"{count} {label}"
        for count, label in (
            (result.deduplicated_count, "duplicates"),
            (result.invalid_count, "invalid"),
        )
        if count
    ]
    suffix = f", dropped {' and '.join(notes)}" if notes else ""
    colour = "red" if result.used_fallback else "green"
    _status.print(
        f"[{colour}]{len(result.products)} products from "
        f"{result.source or 'nowhere'}{suffix}[/{colour}]"
    )


async def cli_fetch(
    output_format: str,
    parser_name: str | None = None,
) -> int:
    """Run the ladder and print the catalog.

    Returns 0 when products were produced, 1 otherwise.
    """
    parser = get_markup_parser(parser_name)
    _status.print(f"[bold]Fetching catalog[/bold] (parser: {parser.name})")

    result = await CatalogOrchestrator(parser=parser).fetch_catalog()
    _report_attempts(result)
    if not result.products:
        return 1

    if output_format == "table":
        Console().print(_catalog_table(result.products))
    else:
        payload = [p.to_dict() for p in result.products]
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2))
        sys.stdout.write("\n")
    return 0


def _health_table(results: list[HealthResult]) -> Table:
    table = Table(title="Storefront Endpoint Health", show_lines=True)
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("URL", style="dim", overflow="fold")
    table.add_column("Notes", style="dim")
    for r in results:
        table.add_row(
            r.endpoint_id,
            _HEALTH_STYLES.get(r.status, r.status),
            f"{r.latency_ms:.0f} ms",
            r.url,
            r.message,
        )
    return table


async def run_health_check() -> int:
    """Probe every endpoint; exit code 1 if any is down."""
    _status.print("[bold]Probing storefront endpoints...[/bold]")
    results = await HealthChecker().check_all()
    Console().print(_health_table(results))
    return int(any(r.status == "down" for r in results))
