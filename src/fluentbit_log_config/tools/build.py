"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fluentbit_log_config.core.aggregator import build
from fluentbit_log_config.core.config import BuildConfig, resolve_build_config
from fluentbit_log_config.core.registries import get_registry, supported_technologies
from fluentbit_log_config.core.validation import collect_violations

logger = logging.getLogger(__name__)


def parse_source_spec(spec: str) -> dict[str, str]:
    """Parse `technology[:container]` shorthand into a log source mapping."""
    tech, sep, container = spec.strip().partition(":")
    if not tech:
        raise ValueError(f"Invalid log source '{spec}'. Expected TECHNOLOGY[:CONTAINER].")
    out = {"technology": tech.lower()}
    if sep and container:
        out["container"] = container
    return out


def normalize_log_sources(log_sources: Sequence[Any] | None) -> list[Any]:
    """Accept mappings and `technology[:container]` strings interchangeably."""
    if not log_sources:
        return []
    return [parse_source_spec(s) if isinstance(s, str) else s for s in log_sources]


def build_log_config_impl(
    *,
    log_sources: Sequence[Any] | None = None,
    custom_parsers: Sequence[Any] | None = None,
    custom_filters: Sequence[Any] | None = None,
    cfg: BuildConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `build_log_config` MCP tool.

    Returns
    -------
    dict:
        {"log_config_parsers": list[dict], "log_config_filters": list[dict]}
    """
    cfg = resolve_build_config(cfg)
    sources = normalize_log_sources(log_sources)
    result = build(sources, custom_parsers or (), custom_filters or (), cfg=cfg)
    out = result.to_outputs()
    logger.info(
        "Built log config: %d sources, %d parsers, %d filters",
        len(sources),
        len(out["log_config_parsers"]),
        len(out["log_config_filters"]),
    )
    return out


def validate_log_config_impl(
    *,
    log_sources: Sequence[Any] | None = None,
    custom_parsers: Sequence[Any] | None = None,
    custom_filters: Sequence[Any] | None = None,
) -> dict[str, Any]:
    """Implementation for the `validate_log_config` MCP tool.

    Reports every violation instead of stopping at the first one.
    """
    violations = collect_violations(
        normalize_log_sources(log_sources),
        custom_parsers or (),
        custom_filters or (),
    )
    if violations:
        logger.info("Log config has %d violation(s)", len(violations))
    return {
        "valid": not violations,
        "violations": [v.to_dict() for v in violations],
    }


def describe_technology_impl(technology: str) -> dict[str, Any]:
    """Return the built-in parsers and filters for one technology."""
    name = technology.strip().lower()
    try:
        registry = get_registry(name)
    except KeyError as e:
        valid = ", ".join(supported_technologies())
        raise ValueError(f"Unknown technology '{technology}'. Valid values: {valid}.") from e
    return {
        "technology": registry.technology,
        "parsers": [p.to_dict() for p in registry.parsers],
        "filters": [f.to_dict() for f in registry.filters],
    }
