""".NET registry. Parsers are pending; records are only tagged with their source."""

from __future__ import annotations

from .base import TechnologyRegistry, stamp_log_source

TECHNOLOGY = "dotnet"

REGISTRY = TechnologyRegistry(
    technology=TECHNOLOGY,
    parsers=(),
    filters=(stamp_log_source(TECHNOLOGY),),
)
