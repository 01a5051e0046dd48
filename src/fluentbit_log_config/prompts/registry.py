"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_sources(sources: Sequence[str] | str) -> str:
    """Return `tech[:container]` items as a JSON array literal for prompt display."""
    if isinstance(sources, str):
        items = [s.strip() for s in sources.split(",") if s.strip()]
    else:
        items = [str(s).strip() for s in sources if str(s).strip()]
    if not items:
        return "[]"
    quoted = ", ".join(f'"{item}"' for item in items)
    return f"[{quoted}]"


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def configure_log_sources(
        service: str,
        log_sources: Sequence[str] | str = ("php:app", "nginx:web"),
    ) -> list[dict[str, Any]]:
        """Build a prompt that produces a parser/filter configuration for a service."""
        sources_display = _format_sources(log_sources)
        return [
            {
                "role": "system",
                "content": (
                    "You configure Fluent Bit log routing for ECS Fargate services. "
                    "Only use parsers and filters returned by the tools; do not invent "
                    "regexes unless the user asks for a custom parser."
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Service: {service}\n\n"
                    "Follow this workflow:\n"
                    "- Call validate_log_config first with the log sources below. "
                    "If it reports violations, explain each one and stop.\n"
                    "- Then call build_log_config with the same arguments.\n"
                    "- Log sources are strings like \"php:app\" (technology:container); "
                    "omit the container to match every container.\n\n"
                    f"log_sources: {sources_display}\n\n"
                    "Return this structure:\n"
                    "1) Parsers (name, format, time_key) grouped by technology\n"
                    "2) Filters per container with their match pattern\n"
                    "3) Anything the user should add as a custom parser or filter\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Supported technologies:"},
                    {"type": "resource", "uri": "app://fluentbit-log-config/technologies"},
                ],
            },
        ]

    @mcp.prompt()
    def review_custom_parser(sample_line: str, technology: str | None = None) -> list[dict[str, Any]]:
        """Build a prompt that drafts a custom parser for an unparsed log line."""
        context: list[dict[str, Any]] = [
            {"type": "text", "text": "Parser schema:"},
            {"type": "resource", "uri": "app://fluentbit-log-config/schemas/parser"},
        ]
        if technology:
            context.append(
                {"type": "resource", "uri": f"app://fluentbit-log-config/registries/{technology}"}
            )
        return [
            {
                "role": "system",
                "content": (
                    "You write Fluent Bit parsers. Prefer format json when the line is JSON. "
                    "Regex parsers use Onigmo named groups (?<name>...) and must set 'regex'. "
                    "Any 'filter' block must set 'key_name'."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Draft one custom_parsers entry for this log line, then call "
                    "validate_log_config with it:\n\n"
                    f"{sample_line}\n"
                ),
            },
            {"role": "user", "content": context},
        ]
