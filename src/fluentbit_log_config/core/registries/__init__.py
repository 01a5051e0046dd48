"""Built-in parser/filter registries.

One module per technology plus the always-on defaults. The table is
immutable; iteration order is the declaration order below.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..models import Filter, Parser, Technology
from . import datadog, dotnet, envoy, nginx, nodejs, php
from .base import TechnologyRegistry
from .defaults import DEFAULT_FILTERS, DEFAULT_PARSERS

REGISTRIES: Mapping[Technology, TechnologyRegistry] = MappingProxyType(
    {
        Technology.PHP: php.REGISTRY,
        Technology.NGINX: nginx.REGISTRY,
        Technology.ENVOY: envoy.REGISTRY,
        Technology.DOTNET: dotnet.REGISTRY,
        Technology.DATADOG: datadog.REGISTRY,
        Technology.NODEJS: nodejs.REGISTRY,
    }
)


def supported_technologies() -> tuple[str, ...]:
    return tuple(t.value for t in REGISTRIES)


def get_registry(technology: Technology | str) -> TechnologyRegistry:
    """Return the registry for a technology name; raise KeyError if unknown."""
    try:
        tech = Technology(technology)
    except ValueError as e:
        raise KeyError(f"No registry for technology {technology!r}") from e
    return REGISTRIES[tech]


def default_parsers() -> tuple[Parser, ...]:
    return DEFAULT_PARSERS


def default_filters() -> tuple[Filter, ...]:
    return DEFAULT_FILTERS


__all__ = [
    "REGISTRIES",
    "TechnologyRegistry",
    "default_filters",
    "default_parsers",
    "get_registry",
    "supported_technologies",
]
