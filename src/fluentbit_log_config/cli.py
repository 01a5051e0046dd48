from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from fluentbit_log_config.core.config import LOG_LEVEL_ENV
from fluentbit_log_config.core.inputs import load_request
from fluentbit_log_config.core.registries import supported_technologies
from fluentbit_log_config.tools.build import (
    build_log_config_impl,
    parse_source_spec,
    validate_log_config_impl,
)


def _parse_source(s: str) -> dict[str, str]:
    try:
        return parse_source_spec(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _resolve_inputs(args: argparse.Namespace) -> dict[str, list[Any]]:
    """Merge the request file (if any) with --source flags."""
    log_sources: list[Any] = []
    custom_parsers: list[Any] = []
    custom_filters: list[Any] = []
    if args.request:
        request = asyncio.run(load_request(args.request))
        log_sources.extend(request.log_sources)
        custom_parsers.extend(request.custom_parsers)
        custom_filters.extend(request.custom_filters)
    log_sources.extend(args.sources)
    return {
        "log_sources": log_sources,
        "custom_parsers": custom_parsers,
        "custom_filters": custom_filters,
    }


def main() -> None:
    p = argparse.ArgumentParser(
        description="Generate Fluent Bit parser/filter lists for ECS containers."
    )
    p.add_argument("request", nargs="?", default=None, help="JSON request file (tfvars JSON works)")
    p.add_argument(
        "--source",
        dest="sources",
        action="append",
        type=_parse_source,
        default=[],
        help="TECHNOLOGY[:CONTAINER], repeatable (e.g., --source php:app --source envoy)",
    )
    p.add_argument("--check", action="store_true", help="Only validate; report every violation")
    p.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    p.add_argument("--list-technologies", action="store_true", help="Print supported technologies")

    args = p.parse_args()

    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(stream=sys.stderr, level=getattr(logging, level_name, logging.WARNING))

    if args.list_technologies:
        print("\n".join(supported_technologies()))
        return

    try:
        inputs = _resolve_inputs(args)
        if args.check:
            report = validate_log_config_impl(**inputs)
            print(json.dumps(report, indent=args.indent))
            if not report["valid"]:
                raise SystemExit(1)
            return
        out = build_log_config_impl(**inputs)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    print(json.dumps(out, indent=args.indent))


if __name__ == "__main__":
    main()
