"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: build or validate a parser/filter configuration
- Resources: built-in registries, defaults and JSON schemas
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m fluentbit_log_config.server.config_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from fluentbit_log_config.core.config import LOG_LEVEL_ENV
from fluentbit_log_config.core.inputs import load_request
from fluentbit_log_config.prompts.registry import register_prompts
from fluentbit_log_config.resources.registry import register_resources, resolve_request_path
from fluentbit_log_config.tools.build import (
    build_log_config_impl,
    describe_technology_impl,
    validate_log_config_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("fluentbit-log-config", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
def build_log_config(
    log_sources: list[dict[str, Any] | str],
    custom_parsers: list[dict[str, Any]] | None = None,
    custom_filters: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build Fluent Bit parser and filter lists for ECS containers.

    Parameters
    ----------
    log_sources:
        Technologies to configure, each {"technology": ..., "container": ...}.
        `container` defaults to "*" (any container). The shorthand
        "php:app" is accepted for {"technology": "php", "container": "app"}.
        Supported technologies: php, nginx, envoy, dotnet, datadog, nodejs.
    custom_parsers:
        Extra parsers (format json, regex, ltsv or logfmt) appended verbatim.
    custom_filters:
        Extra filters (grep, modify, nest, parser, ...) appended verbatim.

    Returns
    -------
    dict:
        {"log_config_parsers": list[dict], "log_config_filters": list[dict]}
    """
    return build_log_config_impl(
        log_sources=log_sources,
        custom_parsers=custom_parsers,
        custom_filters=custom_filters,
    )


@mcp.tool()
async def build_log_config_from_file(path: str) -> dict[str, Any]:
    """Build the configuration from a JSON request file under LOG_CONFIG_BASE_DIR."""
    request = await load_request(resolve_request_path(path))
    return build_log_config_impl(
        log_sources=request.log_sources,
        custom_parsers=request.custom_parsers,
        custom_filters=request.custom_filters,
    )


@mcp.tool()
def validate_log_config(
    log_sources: list[dict[str, Any] | str],
    custom_parsers: list[dict[str, Any]] | None = None,
    custom_filters: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Check the inputs and report every violation.

    Returns
    -------
    dict:
        {"valid": bool, "violations": [{"code", "location", "message"}]}
    """
    return validate_log_config_impl(
        log_sources=log_sources,
        custom_parsers=custom_parsers,
        custom_filters=custom_filters,
    )


@mcp.tool()
def describe_technology(technology: str) -> dict[str, Any]:
    """Return the built-in parsers and filters for one technology."""
    return describe_technology_impl(technology)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
