"""Command-line interface for the portal catalog.

Commands:

1. `portal-catalog catalog`: Build the catalog of a portal
   - Discover services from the portal's services directory
   - Fetch metadata, availability and extent for each service
   - Extract keyword tags and group services by type
   - Print a table, optionally filtered, and optionally save JSON

2. `portal-catalog layers NAME TYPE`: Show the layers of one service

3. `portal-catalog records NAME TYPE LAYER_ID`: Show sample records of a layer

4. `portal-catalog serve`: Run the REST API
"""

import argparse
import asyncio
import json
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .catalog import build_catalog
from .config import get_port, get_portal_url
from .exceptions import CatalogError, NLPModelNotAvailableError
from .fetcher import PortalClient, service_url_for
from .keywords import SpacyTokenizer, TextNormalizer
from .models import ServiceCatalog

console = Console()


def _add_portal_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--portal-url",
        default=get_portal_url(),
        help="Services directory URL (default: ESRI_PORTAL_URL or the NSW portal)",
    )


def _create_catalog_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the catalog subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    catalog_parser = subparsers.add_parser(
        "catalog",
        help="Build the service catalog of a portal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Build the service catalog of a portal:

  1. Fetch the services directory
  2. Fetch metadata, availability and extent for every service
  3. Extract keyword tags and group services by type
  4. Print the catalog table
        """,
    )
    _add_portal_argument(catalog_parser)

    catalog_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Save the catalog as JSON to this file",
    )

    catalog_parser.add_argument(
        "--type",
        dest="service_type",
        help="Only show services of this type (e.g. MapServer)",
    )

    catalog_parser.add_argument(
        "--keyword",
        help="Only show services tagged with this keyword",
    )


def _create_layers_parser(subparsers: argparse._SubParsersAction) -> None:
    layers_parser = subparsers.add_parser("layers", help="Show the layers of a service")
    layers_parser.add_argument("name", help="Service name, including folder")
    layers_parser.add_argument("type", help="Service type, e.g. MapServer")
    _add_portal_argument(layers_parser)


def _create_records_parser(subparsers: argparse._SubParsersAction) -> None:
    records_parser = subparsers.add_parser(
        "records", help="Show sample records of a service layer"
    )
    records_parser.add_argument("name", help="Service name, including folder")
    records_parser.add_argument("type", help="Service type, e.g. FeatureServer")
    records_parser.add_argument("layer_id", type=int, help="Layer ID")
    _add_portal_argument(records_parser)


def _create_serve_parser(subparsers: argparse._SubParsersAction) -> None:
    port = get_port()
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=port,
        help=f"Port to listen on (default: {port})",
    )


def render_catalog_table(catalog: ServiceCatalog, rows: list | None = None) -> Table:
    """Render catalog rows as a rich table.

    Args:
        catalog: The catalog to render.
        rows: Subset of ``catalog.rows`` to show. Defaults to all rows.

    Returns:
        The table.
    """
    table = Table(title=f"Indexed Services ({catalog.portal_url})")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Availability")
    table.add_column("WKID")
    table.add_column("Keywords", style="dim")

    for row in catalog.rows if rows is None else rows:
        service = row.service
        availability = service.availability
        if availability is None or not availability.is_available:
            status = "[red]Unavailable[/]"
        else:
            rt = availability.response_time
            status = (
                f"[{availability.color}]{availability.status}[/] "
                f"({rt if rt is not None else 'N/A'} ms)"
            )
        table.add_row(
            service.name,
            service.type,
            status,
            str(service.wkid or "N/A"),
            ", ".join(row.keywords),
        )
    return table


async def _run_catalog(args: argparse.Namespace) -> None:
    normalizer = TextNormalizer(SpacyTokenizer())

    async with PortalClient() as client:
        catalog = await build_catalog(args.portal_url, client, normalizer)

    if catalog is None:
        raise CatalogError(f"Failed to fetch services from portal {args.portal_url}")

    rows = catalog.filter_rows(service_type=args.service_type, keyword=args.keyword)
    console.print(render_catalog_table(catalog, rows))
    console.print(
        f"Services: {catalog.service_count}  "
        f"Types: {', '.join(catalog.types) or '-'}  "
        f"Keywords: {len(catalog.keywords)}"
    )

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(catalog.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"[green]Saved JSON to: {args.output}[/]")


async def _run_layers(args: argparse.Namespace) -> None:
    service_url = service_url_for(args.portal_url, args.name, args.type)
    async with PortalClient() as client:
        layers = await client.fetch_layer_details(service_url)

    if layers is None:
        raise CatalogError(f"Failed to fetch layers of {service_url}")

    table = Table(title=service_url)
    table.add_column("ID")
    table.add_column("Name", style="bold")
    table.add_column("Geometry")
    table.add_column("WKID")
    table.add_column("Fields", style="dim")
    for layer in layers:
        wkid = (layer.spatial_reference or {}).get("wkid", "N/A")
        table.add_row(
            str(layer.id),
            layer.name,
            layer.geometry_type,
            str(wkid),
            ", ".join(layer.field_names),
        )
    console.print(table)


async def _run_records(args: argparse.Namespace) -> None:
    service_url = service_url_for(args.portal_url, args.name, args.type)
    async with PortalClient() as client:
        records = await client.fetch_sample_records(service_url, args.layer_id)

    if records is None:
        raise CatalogError(f"Failed to fetch records of {service_url}/{args.layer_id}")
    if not records:
        console.print("No sample records available.")
        return

    console.print_json(json.dumps(records, default=str))


def _run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def main() -> None:
    """Run the portal catalog CLI."""
    # Load .env file for ESRI_PORTAL_URL and PORT
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="portal-catalog",
        description="Catalog the geospatial services of an ArcGIS portal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  portal-catalog catalog                          # Catalog the default portal
  portal-catalog catalog --type MapServer -o catalog.json
  portal-catalog layers Transport/Roads MapServer
  portal-catalog records Water/Hydrants FeatureServer 0
  portal-catalog serve --port 3000

Environment variables:
  ESRI_PORTAL_URL              - Default services directory URL
  PORT                         - Default API port
  PORTAL_CATALOG_SPACY_MODEL   - spaCy model for keywords (default: en_core_web_sm)
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    _create_catalog_parser(subparsers)
    _create_layers_parser(subparsers)
    _create_records_parser(subparsers)
    _create_serve_parser(subparsers)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        raise SystemExit(1)

    if args.command == "serve":
        _run_serve(args)
        return

    commands = {
        "catalog": _run_catalog,
        "layers": _run_layers,
        "records": _run_records,
    }

    try:
        asyncio.run(commands[args.command](args))
    except NLPModelNotAvailableError as e:
        console.print("\n[red]Error: spaCy model not installed[/]")
        console.print(f"Install with: [cyan]python -m spacy download {e.model}[/]")
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/]")
        raise SystemExit(1) from None
    except Exception as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
