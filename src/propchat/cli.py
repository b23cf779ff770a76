"""CLI entrypoint for propchat."""

import argparse
import json
from pathlib import Path
from typing import Any, Dict

from propchat.catalog.schema_catalog import generate_schema_documentation, get_properties_schema
from propchat.chat.service import answer_question
from propchat.config.loader import get_classifier_settings, get_query_settings, get_sqlite_path, load_config
from propchat.database.sqlite_client import dispose_engines, session_context
from propchat.ingestion.file_ingestor import load_properties_from_csv
from propchat.intent.classifier import GroqIntentClassifier
from propchat.output.chat_reply import aggregation_text, format_properties_table, render_json
from propchat.query.aggregation import AggregationKind, aggregate
from propchat.query.models import LocationFilter, PropertyFilter
from propchat.query.resolver import resolve
from propchat.utils.logging import get_logger

logger = get_logger(__name__)


def _load_cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    config_path = getattr(args, "config", None)
    return load_config(Path(config_path) if config_path else None)


def cmd_load(args: argparse.Namespace) -> None:
    """Load properties from a CSV file."""
    config = _load_cli_config(args)
    sqlite_path = get_sqlite_path(config)
    csv_path = Path(args.csv)

    with session_context(sqlite_path) as session:
        count = load_properties_from_csv(csv_path, session)

    print(f"Loaded {count} properties into {sqlite_path}")


def cmd_search(args: argparse.Namespace) -> None:
    """Resolve a structured filter and print one page."""
    config = _load_cli_config(args)
    settings = get_query_settings(config)
    limit = args.limit or settings["page_size"]

    filters = PropertyFilter(
        name_term=args.name,
        location=LocationFilter(city=args.city, state=args.state),
        info_types=args.info or [],
    )

    with session_context(get_sqlite_path(config)) as session:
        result = resolve(
            session,
            filters,
            offset=args.offset,
            limit=limit,
            sample_cap=settings["fuzzy_sample_cap"],
            threshold=settings["fuzzy_distance_threshold"],
        )

    if args.format == "json":
        print(result.model_dump_json(indent=2))
        return

    if not result.items:
        print("No properties found.")
        return

    print(f"Showing {len(result.items)} of {result.total} ({result.match_mode} match)")
    print(format_properties_table(result.items, filters.info_types), end="")
    if result.has_more:
        print(f"More results: --offset {result.offset + result.limit}")


def cmd_stats(args: argparse.Namespace) -> None:
    """Print a dataset-wide statistic."""
    config = _load_cli_config(args)

    with session_context(get_sqlite_path(config)) as session:
        stat = aggregate(session, args.kind)

    if stat is None:
        print("Statistic unavailable.")
        return

    if args.format == "json":
        print(stat.model_dump_json(indent=2))
    else:
        print(aggregation_text(args.kind, stat, ""))


def cmd_schema(args: argparse.Namespace) -> None:
    """Print the queryable property attributes."""
    config = _load_cli_config(args)

    with session_context(get_sqlite_path(config)) as session:
        schema = get_properties_schema(session)

    if args.format == "json":
        print(json.dumps([col.model_dump(by_alias=True) for col in schema], indent=2))
    else:
        print(generate_schema_documentation(schema))


def cmd_ask(args: argparse.Namespace) -> None:
    """Answer a natural-language question through the intent classifier."""
    config = _load_cli_config(args)
    settings = get_query_settings(config)
    classifier = GroqIntentClassifier.from_settings(get_classifier_settings(config))

    with session_context(get_sqlite_path(config)) as session:
        reply = answer_question(
            session,
            args.message,
            classifier,
            offset=args.offset,
            page_size=settings["page_size"],
            sample_cap=settings["fuzzy_sample_cap"],
            threshold=settings["fuzzy_distance_threshold"],
        )

    if args.format == "json":
        print(render_json(reply))
        return

    print(reply.response)
    if reply.has_more:
        print(f"\nMore results: --offset {reply.current_offset + settings['page_size']}")


def main() -> None:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="propchat",
        description="Answer questions about a property dataset",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: propchat.config.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # load command
    load_parser = subparsers.add_parser("load", help="Load properties from a CSV file")
    load_parser.add_argument(
        "--csv",
        type=str,
        default="tests/fixtures/properties.csv",
        help="CSV file with property rows (default: tests/fixtures/properties.csv)",
    )
    load_parser.set_defaults(func=cmd_load)

    # search command
    search_parser = subparsers.add_parser("search", help="Search properties with a structured filter")
    search_parser.add_argument("--name", type=str, help="Property name or slug term")
    search_parser.add_argument("--city", type=str, help="City (matched against address)")
    search_parser.add_argument("--state", type=str, help="State (matched against address)")
    search_parser.add_argument(
        "--info",
        type=str,
        action="append",
        help="Extra attribute column to show (repeatable), e.g. wifi",
    )
    search_parser.add_argument("--offset", type=int, default=0, help="Result offset (default: 0)")
    search_parser.add_argument("--limit", type=int, default=None, help="Page size (default: from config)")
    search_parser.add_argument(
        "--format",
        type=str,
        choices=["md", "json"],
        default="md",
        help="Output format: md or json (default: md)",
    )
    search_parser.set_defaults(func=cmd_search)

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Compute a dataset-wide statistic")
    stats_parser.add_argument(
        "kind",
        type=str,
        choices=[kind.value for kind in AggregationKind],
        help="Statistic to compute",
    )
    stats_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format: text or json (default: text)",
    )
    stats_parser.set_defaults(func=cmd_stats)

    # schema command
    schema_parser = subparsers.add_parser("schema", help="Show queryable property attributes")
    schema_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format: text or json (default: text)",
    )
    schema_parser.set_defaults(func=cmd_schema)

    # ask command
    ask_parser = subparsers.add_parser("ask", help="Ask a natural-language question")
    ask_parser.add_argument("message", type=str, help="The question")
    ask_parser.add_argument("--offset", type=int, default=0, help="Result offset (default: 0)")
    ask_parser.add_argument(
        "--format",
        type=str,
        choices=["md", "json"],
        default="md",
        help="Output format: md or json (default: md)",
    )
    ask_parser.set_defaults(func=cmd_ask)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except FileNotFoundError as e:
        logger.error(f"Config not found: {e}")
        print("Error: Config file not found. Create propchat.config.yaml or pass --config.")
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise
    finally:
        dispose_engines()


if __name__ == "__main__":
    main()
