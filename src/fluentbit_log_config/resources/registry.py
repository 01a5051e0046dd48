"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from fluentbit_log_config.core.config import BASE_DIR_ENV
from fluentbit_log_config.core.inputs import load_request
from fluentbit_log_config.core.models import FILTER_ADAPTER, PARSER_ADAPTER, LogConfigRequest
from fluentbit_log_config.core.registries import default_parsers, supported_technologies
from fluentbit_log_config.tools.build import describe_technology_impl

ALLOWED_FILE_SUFFIXES = {".json"}

EXAMPLE_REQUEST: dict[str, Any] = {
    "name": "orders",
    "log_sources": [
        {"technology": "php", "container": "app"},
        {"technology": "nginx", "container": "web"},
        {"technology": "envoy"},
    ],
    "custom_parsers": [],
    "custom_filters": [
        {"name": "grep", "match": "*", "exclude": "log ^\\s*$"},
    ],
}


def _base_dir() -> Path:
    """Return the resolved base directory for request files."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _allowed_suffix(path: Path) -> str:
    """Return the effective suffix for allowlist checks."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def resolve_request_path(path: str) -> Path:
    """Resolve and validate a request file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if _allowed_suffix(resolved) not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed} (optionally .gz).")
    return resolved


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://fluentbit-log-config/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        base = _base_dir()
        return (
            "Resources:\n"
            "- app://fluentbit-log-config/help\n"
            "- app://fluentbit-log-config/technologies\n"
            "- app://fluentbit-log-config/registries/{technology}\n"
            "- app://fluentbit-log-config/defaults\n"
            "- app://fluentbit-log-config/schemas/parser\n"
            "- app://fluentbit-log-config/schemas/filter\n"
            "- app://fluentbit-log-config/schemas/request\n"
            "- app://fluentbit-log-config/examples/request\n"
            f"- file://{{path}} (request JSON restricted to {BASE_DIR_ENV})\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://fluentbit-log-config/technologies")
    def technologies() -> list[str]:
        """Return the supported technology names."""
        return list(supported_technologies())

    @mcp.resource("app://fluentbit-log-config/registries/{technology}")
    def technology_registry(technology: str) -> dict[str, Any]:
        """Return the built-in parsers and filters for a technology."""
        return describe_technology_impl(technology)

    @mcp.resource("app://fluentbit-log-config/defaults")
    def defaults() -> list[dict[str, Any]]:
        """Return the parsers included in every configuration."""
        return [p.to_dict() for p in default_parsers()]

    @mcp.resource("app://fluentbit-log-config/schemas/parser")
    def parser_schema() -> dict[str, Any]:
        return PARSER_ADAPTER.json_schema()

    @mcp.resource("app://fluentbit-log-config/schemas/filter")
    def filter_schema() -> dict[str, Any]:
        return FILTER_ADAPTER.json_schema()

    @mcp.resource("app://fluentbit-log-config/schemas/request")
    def request_schema() -> dict[str, Any]:
        return LogConfigRequest.model_json_schema()

    @mcp.resource("app://fluentbit-log-config/examples/request")
    def example_request() -> str:
        """Return a small request document for demos and tests."""
        return json.dumps(EXAMPLE_REQUEST, indent=2)

    @mcp.resource("file://{path}")
    async def read_request(path: str) -> dict[str, Any]:
        """Read and decode a request file from within LOG_CONFIG_BASE_DIR."""
        request = await load_request(resolve_request_path(path))
        return request.model_dump(mode="json")
