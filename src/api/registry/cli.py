"""Command-line entry point for fetching a schema from the registry.

Resolves the configured service's schema once and prints either a summary
of its types and directives or the full SDL.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

from graphql import GraphQLSchema, print_schema
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infrastructure.logging import configure_logging
from infrastructure.settings import get_registry_settings, get_settings
from infrastructure.version import __version__
from registry.application.schema_builder import SchemaSummary, describe_schema
from registry.dependencies import get_schema_provider
from registry.domain.exceptions import SchemaProviderError
from shared_kernel.observability_context import ObservationContext

console = Console()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="registry-schema",
        description="Fetch a GraphQL schema from the schema registry",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--service",
        help="Service specifier (<id> or <id>@<tag>); overrides REGISTRY_SERVICE",
    )
    parser.add_argument(
        "--sdl",
        action="store_true",
        help="Print the schema as SDL instead of a summary",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


async def fetch_schema(service: str | None = None) -> GraphQLSchema:
    """Resolve the schema for ``service`` (or the configured one) and close the client."""
    settings = get_registry_settings()
    if service is not None:
        settings = settings.model_copy(update={"service": service})

    context = ObservationContext(session_id="cli")
    async with get_schema_provider(settings=settings, context=context) as provider:
        return await provider.resolve_schema()


def render_summary(summary: SchemaSummary, output: Console | None = None) -> None:
    """Print a table of schema types followed by root types and directives."""
    out = output or console

    table = Table(title="Schema types", box=box.ROUNDED)
    table.add_column("Type", style="cyan")
    table.add_column("Kind")
    for name, kind in sorted(summary.types.items()):
        table.add_row(name, kind)
    out.print(table)

    roots = {
        "query": summary.query_type,
        "mutation": summary.mutation_type,
        "subscription": summary.subscription_type,
    }
    out.print(
        "[bold]Root types:[/] "
        + ", ".join(f"{op}={name}" for op, name in roots.items() if name)
    )
    out.print("[bold]Directives:[/] " + ", ".join(summary.directives))


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        configure_logging(get_settings().log_level)
        schema = asyncio.run(fetch_schema(args.service))
    except (SchemaProviderError, ValidationError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return 1

    if args.sdl:
        console.print(print_schema(schema), markup=False, highlight=False)
    else:
        render_summary(describe_schema(schema))
    return 0


if __name__ == "__main__":
    sys.exit(main())
