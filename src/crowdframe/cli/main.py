"""Command-line interface for CrowdFrame."""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from crowdframe.api.assignments import get_assignment
from crowdframe.api.bonuses import get_bonuses
from crowdframe.api.hits import search_hits
from crowdframe.collect.retry import RetryPolicy
from crowdframe.config import DEFAULT_CONFIG_PATH, load_config
from crowdframe.config.schema import CrowdFrameConfig, LoggingConfig
from crowdframe.errors import CrowdFrameError
from crowdframe.remote.client import Boto3RemoteClient, RemoteClient


logger = logging.getLogger(__name__)

ENTITIES = ("assignments", "hits", "bonuses")

# Service client stack loggers; held at WARNING unless logging at DEBUG.
CLIENT_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if getattr(args, "command", None) != "export":
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        config = _apply_export_overrides(config, args)
        output_dir = Path(config.output.directory)

        log_path = setup_logging(config.logging, output_dir)

        result = run_export(args.entity, args, output_dir, config)
        result["log_file"] = str(log_path) if log_path else None
        write_summary(result, output_dir)
        message = f"Exported {result['rows']} {args.entity} to {output_dir}"
        if log_path:
            message += f" (logs: {log_path})"
        print(message)
        return 0

    except (CrowdFrameError, FileNotFoundError, ModuleNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="crowdframe",
        description="CrowdFrame - export crowdsourcing task data as flat tables"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    export_parser = subparsers.add_parser("export", help="Export an entity table as CSV")
    export_parser.add_argument("entity", choices=ENTITIES, help="Table to export")
    export_parser.add_argument(
        "--out",
        dest="output",
        type=Path,
        default=None,
        help="Output directory for the tables (overrides the configured directory)"
    )
    export_parser.add_argument(
        "--assignment",
        nargs="+",
        help="AssignmentId(s) to fetch"
    )
    export_parser.add_argument("--hit", nargs="+", help="HITId(s) to collect from")
    export_parser.add_argument("--hit-type", dest="hit_type", nargs="+", help="HITTypeId(s) to collect from")
    export_parser.add_argument(
        "--annotation",
        help="Regular expression matched against the HITs' RequesterAnnotation"
    )
    export_parser.add_argument(
        "--status",
        nargs="+",
        choices=["Approved", "Rejected", "Submitted"],
        help="Assignment statuses to include (default: configured statuses)"
    )
    export_parser.add_argument(
        "--answers",
        action="store_true",
        help="Also export the parsed answers of each assignment"
    )
    export_parser.add_argument("--results", type=int, help="Maximum number of rows to export")
    export_parser.add_argument("--page-size", dest="page_size", type=int, help="Results per remote call (1-100)")
    export_parser.add_argument(
        "--persist-on-error",
        dest="persist_on_error",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Retry transient failures (use --no-persist-on-error to disable)"
    )
    export_parser.add_argument(
        "--sandbox",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use the requester sandbox"
    )
    export_parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file (default: bundled default.yml)"
    )

    return parser


def _apply_export_overrides(config: CrowdFrameConfig, args: argparse.Namespace) -> CrowdFrameConfig:
    """Apply CLI overrides to the loaded configuration for the export command."""

    if getattr(args, "command", None) != "export":
        return config

    updated = config.model_copy(deep=True)

    if getattr(args, "output", None) is not None:
        updated.output.directory = str(args.output)
    if getattr(args, "page_size", None) is not None:
        updated.collection.page_size = int(args.page_size)
    if getattr(args, "results", None) is not None:
        updated.collection.results = int(args.results)
    if getattr(args, "status", None):
        updated.collection.statuses = list(args.status)
    if getattr(args, "persist_on_error", None) is not None:
        updated.collection.persist_on_error = bool(args.persist_on_error)
    if getattr(args, "sandbox", None) is not None:
        updated.client.sandbox = bool(args.sandbox)

    return updated


def setup_logging(logging_config: LoggingConfig, output_dir: Path) -> Optional[Path]:
    """Send CrowdFrame's log records to stderr and, if configured, a log file.

    A relative ``logging_config.file`` is placed inside ``output_dir`` next to
    the exported tables. Records from the service client libraries are kept
    at WARNING unless CrowdFrame itself logs at DEBUG.

    Returns:
        Path of the log file, or ``None`` when file logging is disabled

    Raises:
        ValueError: If ``logging_config.level`` is not a logging level name
    """

    level = logging.getLevelName(logging_config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {logging_config.level!r}")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_path = None
    if logging_config.file:
        log_path = Path(logging_config.file)
        if not log_path.is_absolute():
            log_path = output_dir / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=logging_config.format,
        handlers=handlers,
        force=True,
    )

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in CLIENT_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return log_path


def build_client(config: CrowdFrameConfig) -> RemoteClient:
    """Create the remote client described by ``config``."""

    return Boto3RemoteClient.from_config(config.client)


def run_export(
    entity: str,
    args: argparse.Namespace,
    output_dir: Path,
    config: CrowdFrameConfig,
    client: Optional[RemoteClient] = None,
) -> Dict[str, Any]:
    """Fetch ``entity`` and write its table(s) as CSV into ``output_dir``.

    Returns:
        Dictionary describing what was exported
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    client = client or build_client(config)
    collection = config.collection
    retry = RetryPolicy.from_config(collection)
    common = {
        "results": collection.results,
        "page_size": collection.page_size,
        "persist_on_error": collection.persist_on_error,
        "retry": retry,
    }
    selectors = {
        "assignment": getattr(args, "assignment", None),
        "hit": getattr(args, "hit", None),
        "hit_type": getattr(args, "hit_type", None),
        "annotation": getattr(args, "annotation", None),
    }

    tables = {}
    if entity == "assignments":
        fetched = get_assignment(
            client,
            **selectors,
            status=collection.statuses,
            get_answers=True,
            **common,
        )
        tables["assignments"] = fetched.assignments
        if getattr(args, "answers", False):
            tables["answers"] = fetched.answers
    elif entity == "bonuses":
        tables["bonuses"] = get_bonuses(client, **selectors, **common)
    elif entity == "hits":
        fetched = search_hits(client, **common)
        tables["hits"] = fetched.hits
        tables["qualification_requirements"] = fetched.qualification_requirements
    else:
        raise ValueError(f"Unsupported entity: {entity}")

    files = {}
    for name, table in tables.items():
        path = output_dir / f"{name}.csv"
        table.to_csv(path, index=False)
        files[name] = str(path)
        logger.info("Wrote %d rows to %s", len(table.index), path)

    return {
        "entity": entity,
        "rows": len(tables[entity].index),
        "files": files,
        "output_directory": str(output_dir),
        "exported_at": datetime.now().isoformat(timespec="seconds"),
        "config": config.model_dump(),
    }


def write_summary(result: dict, output_dir: Path) -> Path:
    """Write the export summary to ``summary.json`` in ``output_dir``."""

    summary_path = output_dir / "summary.json"

    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump(result, f, indent=2, default=str)

    return summary_path


if __name__ == "__main__":
    sys.exit(main())
