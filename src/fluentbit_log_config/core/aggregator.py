"""Combine registries, defaults and custom entries into the two output lists.

parsers = distinct(defaults + technology parsers (once per technology) + custom)
filters = distinct(defaults + technology filters (once per log source, match
          scoped to the container) + custom)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from .config import BuildConfig
from .models import (
    BuildResult,
    Filter,
    LogSource,
    Parser,
    record_key,
)
from .registries import REGISTRIES, default_filters, default_parsers
from .validation import coerce_filters, coerce_parsers, coerce_sources, validate_inputs

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


def distinct(records: Iterable[R]) -> list[R]:
    """Drop structurally identical records, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[R] = []
    for r in records:
        k = record_key(r)
        if k in seen:
            continue
        seen.add(k)
        out.append(r)
    return out


def container_match(container: str, cfg: BuildConfig) -> str | None:
    """Return the match pattern for a container, or None to keep the registry's."""
    if container == cfg.wildcard_container:
        return None
    return cfg.container_match_template.format(container=container)


def _technology_parsers(sources: Sequence[LogSource]) -> list[Parser]:
    requested = {s.technology for s in sources}
    out: list[Parser] = []
    for tech, registry in REGISTRIES.items():
        if tech in requested:
            out.extend(registry.parsers)
    return out


def _technology_filters(sources: Sequence[LogSource], cfg: BuildConfig) -> list[Filter]:
    out: list[Filter] = []
    for s in sources:
        match = container_match(s.container, cfg)
        for f in REGISTRIES[s.technology].filters:
            out.append(f if match is None else f.model_copy(update={"match": match}))
    return out


def aggregate(
    sources: Sequence[LogSource],
    custom_parsers: Sequence[Parser] = (),
    custom_filters: Sequence[Filter] = (),
    *,
    cfg: BuildConfig | None = None,
) -> BuildResult:
    """Aggregate already-validated models. Never fails."""
    if cfg is None:
        cfg = BuildConfig()

    parsers = distinct([*default_parsers(), *_technology_parsers(sources), *custom_parsers])
    filters = distinct([*default_filters(), *_technology_filters(sources, cfg), *custom_filters])

    logger.debug(
        "Aggregated %d log sources into %d parsers and %d filters",
        len(sources),
        len(parsers),
        len(filters),
    )
    return BuildResult(parsers=tuple(parsers), filters=tuple(filters))


def build(
    log_sources: Sequence[Any],
    custom_parsers: Sequence[Any] = (),
    custom_filters: Sequence[Any] = (),
    *,
    cfg: BuildConfig | None = None,
) -> BuildResult:
    """Validate the input and return the parser and filter lists.

    Entries may be plain mappings (as decoded from JSON) or model instances.
    Raises a LogConfigError subclass on the first invalid entry; nothing is
    returned for a partially valid input.
    """
    validate_inputs(log_sources, custom_parsers, custom_filters)
    return aggregate(
        coerce_sources(log_sources),
        coerce_parsers(custom_parsers),
        coerce_filters(custom_filters),
        cfg=cfg,
    )
