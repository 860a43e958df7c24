# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""probeport CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from ..api import HttpProbeCollection
from ..config import ApiSettings, load_api_settings
from ..errors import (
    EXIT_ERROR,
    EXIT_SIGINT,
    EXIT_SUCCESS,
    ConfigurationError,
    ProbePortError,
    TransportError,
    error_category_to_reason,
    invalid_value_message,
)
from ..log import level_for_verbosity, setup_logging
from ..models import ImportOutcome
from ..portable import (
    Format,
    ProbeExporter,
    ProbeImporter,
    parse_label_filters,
    parse_probe_ids,
    resolve_status_filter,
    write_export,
)
from ..portable.formats import parse_format_flag
from ..utils.deadline import Deadline
from ..version import __version__

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "json", "yaml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="probeport",
        description="Bulk import and export of uptime probe configurations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Logging level (default: $PROBEPORT_LOG_LEVEL or WARNING)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v info, -vv debug)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline in seconds for the whole run (default: 120 for import, 60 for export)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    import_cmd = commands.add_parser("import", help="Create probes from a YAML or JSON file")
    import_cmd.add_argument("-f", "--file", required=True, help="Path to the probe configuration file")
    import_cmd.add_argument("--format", help="File format: yaml or json (default: detected from extension)")
    import_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and preview the probes without creating anything",
    )
    import_cmd.add_argument("-o", "--output", default="table", help="Summary format: table, json or yaml")

    export_cmd = commands.add_parser("export", help="Write existing probes to a YAML or JSON file")
    export_cmd.add_argument("--format", default=Format.YAML.value, help="Output format: yaml or json (default: yaml)")
    export_cmd.add_argument("--file", help="Write to this path instead of stdout (created with mode 0600)")
    export_cmd.add_argument("--probe-ids", help="Comma-separated probe IDs to export")
    export_cmd.add_argument("--status", help="Only export probes with this status")
    export_cmd.add_argument("--labels", help="Only export probes matching labels (key=value,key)")
    return parser


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _print_yaml(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    sys.stdout.write(yaml.safe_dump(payload, sort_keys=False, default_flow_style=False))


def _print_table(outcome: ImportOutcome) -> None:
    rows = [
        ("Total", outcome.total),
        ("Created", len(outcome.created)),
        ("Skipped", len(outcome.skipped)),
        ("Failed", len(outcome.failed)),
    ]
    width = max(len(label) for label, _ in rows)
    print("Import summary:")
    for label, count in rows:
        print(f"  {label.ljust(width)}  {count}")
    if outcome.errors:
        print("Errors:")
        for error in outcome.errors:
            print(f"  - {error}")


def _print_outcome(outcome: ImportOutcome, output: str) -> None:
    if output == "json":
        _print_json(outcome)
    elif output == "yaml":
        _print_yaml(outcome)
    else:
        _print_table(outcome)


def _run_deadline(args: argparse.Namespace, default_seconds: float) -> Deadline:
    seconds = args.timeout if args.timeout is not None else default_seconds
    return Deadline(seconds)


def _run_import(args: argparse.Namespace, settings: ApiSettings) -> int:
    output = (args.output or "table").lower()
    if output not in OUTPUT_FORMATS:
        raise ConfigurationError(invalid_value_message("--output", args.output, OUTPUT_FORMATS))

    importer = ProbeImporter(deadline=_run_deadline(args, settings.import_timeout), page_size=settings.page_size)
    if args.dry_run:
        importer.run(args.file, args.format, dry_run=True)
        return EXIT_SUCCESS

    # Decode and validate before touching credentials or the network.
    records = importer.load(args.file, args.format)
    with HttpProbeCollection.from_settings(settings) as collection:
        importer.collection = collection
        outcome = importer.apply(records)

    _print_outcome(outcome, output)
    return EXIT_ERROR if outcome.has_failures else EXIT_SUCCESS


def _run_export(args: argparse.Namespace, settings: ApiSettings) -> int:
    fmt = parse_format_flag(args.format)
    probe_ids = parse_probe_ids(args.probe_ids)
    status = resolve_status_filter(args.status)
    labels = parse_label_filters(args.labels)

    deadline = _run_deadline(args, settings.export_timeout)
    with HttpProbeCollection.from_settings(settings) as collection:
        exporter = ProbeExporter(collection, deadline=deadline, page_size=settings.page_size)
        data, count = exporter.export(fmt, probe_ids=probe_ids, status=status, labels=labels)

    if args.file:
        write_export(data, args.file)
        print(f"Exported {count} probe(s) to {args.file}", file=sys.stderr)
    else:
        sys.stdout.write(data.decode("utf-8"))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or level_for_verbosity(args.verbose))

    settings = load_api_settings()
    handlers = {"import": _run_import, "export": _run_export}
    try:
        return handlers[args.command](args, settings)
    except ProbePortError as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        if isinstance(exc, TransportError):
            reason = error_category_to_reason(exc.category)
            if reason:
                print(f"  Reason: {reason}", file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_SIGINT


if __name__ == "__main__":
    raise SystemExit(main())
