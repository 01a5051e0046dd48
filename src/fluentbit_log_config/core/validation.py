"""Input validation for log sources and custom parsers/filters.

Rules run on the raw input (mappings or model instances) so each failure can
be reported against the exact entry that caused it. Entries that pass the
rules are then checked against the pydantic schema, so anything `build`
would reject is reported here too.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import (
    DuplicateLogSource,
    DuplicateParserName,
    InvalidParserFormat,
    LogConfigError,
    MalformedConfigEntry,
    MissingFilterKeyName,
    MissingNestOperation,
    MissingParserFilterFields,
    MissingRegexPattern,
    UnsupportedTechnology,
)
from .models import (
    FILTER_ADAPTER,
    FILTER_TYPES,
    PARSER_ADAPTER,
    PARSER_FORMATS,
    PARSER_TYPES,
    WILDCARD,
    Filter,
    LogSource,
    Parser,
    Technology,
    record_key,
)
from .registries import REGISTRIES, default_parsers

SUPPORTED_TECHNOLOGIES = tuple(t.value for t in Technology)


def _as_mapping(entry: Any, location: str) -> Mapping[str, Any]:
    if isinstance(entry, BaseModel):
        return entry.model_dump()
    if isinstance(entry, Mapping):
        return entry
    raise MalformedConfigEntry(
        f"expected an object, got {type(entry).__name__}", location=location, value=entry
    )


def _enum_value(v: Any) -> Any:
    return v.value if isinstance(v, Technology) else v


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors(include_url=False):
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _coerce_one(
    validate: Callable[[Any], Any], types: tuple[type, ...], entry: Any, location: str
) -> Any:
    if isinstance(entry, types):
        return entry
    raw = entry.model_dump() if isinstance(entry, BaseModel) else entry
    try:
        return validate(raw)
    except ValidationError as e:
        raise MalformedConfigEntry(_describe(e), location=location, value=entry) from e


def coerce_sources(log_sources: Sequence[Any]) -> list[LogSource]:
    return [
        _coerce_one(LogSource.model_validate, (LogSource,), s, f"log_sources[{i}]")
        for i, s in enumerate(log_sources)
    ]


def coerce_parsers(custom_parsers: Sequence[Any]) -> list[Parser]:
    return [
        _coerce_one(PARSER_ADAPTER.validate_python, PARSER_TYPES, p, f"custom_parsers[{i}]")
        for i, p in enumerate(custom_parsers)
    ]


def coerce_filters(custom_filters: Sequence[Any]) -> list[Filter]:
    return [
        _coerce_one(FILTER_ADAPTER.validate_python, FILTER_TYPES, f, f"custom_filters[{i}]")
        for i, f in enumerate(custom_filters)
    ]


def _requested_technologies(log_sources: Sequence[Any]) -> set[Technology]:
    out: set[Technology] = set()
    for entry in log_sources:
        if isinstance(entry, BaseModel):
            entry = entry.model_dump()
        if isinstance(entry, Mapping):
            tech = _enum_value(entry.get("technology", entry.get("name")))
            if tech in SUPPORTED_TECHNOLOGIES:
                out.add(Technology(tech))
    return out


def _builtin_parser_keys(technologies: set[Technology]) -> dict[str, str]:
    """Map each built-in parser name that will be emitted to its record key."""
    parsers = list(default_parsers())
    for tech, registry in REGISTRIES.items():
        if tech in technologies:
            parsers.extend(registry.parsers)
    return {p.name: record_key(p) for p in parsers}


def _source_violations(log_sources: Sequence[Any]) -> Iterator[LogConfigError]:
    seen: dict[tuple[Any, Any], int] = {}
    for i, entry in enumerate(log_sources):
        loc = f"log_sources[{i}]"
        try:
            raw = _as_mapping(entry, loc)
        except LogConfigError as e:
            yield e
            continue

        tech = _enum_value(raw.get("technology", raw.get("name")))
        if tech not in SUPPORTED_TECHNOLOGIES:
            allowed = ", ".join(SUPPORTED_TECHNOLOGIES)
            yield UnsupportedTechnology(
                f"unsupported technology {tech!r}. Allowed: {allowed}", location=loc, value=tech
            )
            continue

        container = raw.get("container")
        if container is None:
            container = WILDCARD
        if not isinstance(container, str):
            yield MalformedConfigEntry("'container' must be a string", location=loc, value=container)
            continue
        key = (tech, container)
        if key in seen:
            yield DuplicateLogSource(
                f"duplicate log source (technology={tech!r}, container={container!r}); "
                f"already defined at log_sources[{seen[key]}]",
                location=loc,
                value=key,
            )
            continue
        seen[key] = i


def _parser_violations(
    custom_parsers: Sequence[Any], builtin: Mapping[str, str]
) -> Iterator[LogConfigError]:
    names: dict[Any, int] = {}
    for i, entry in enumerate(custom_parsers):
        loc = f"custom_parsers[{i}]"
        try:
            raw = _as_mapping(entry, loc)
        except LogConfigError as e:
            yield e
            continue

        fmt = raw.get("format")
        if fmt not in PARSER_FORMATS:
            allowed = ", ".join(PARSER_FORMATS)
            yield InvalidParserFormat(
                f"invalid parser format {fmt!r}. Allowed: {allowed}", location=loc, value=fmt
            )
        elif fmt == "regex" and raw.get("regex") is None:
            yield MissingRegexPattern(
                "parsers with format 'regex' must define 'regex'", location=loc, value=raw.get("name")
            )

        block = raw.get("filter")
        if block is not None:
            block = block.model_dump() if isinstance(block, BaseModel) else block
            if not isinstance(block, Mapping) or block.get("key_name") is None:
                yield MissingFilterKeyName(
                    "parser 'filter' block must define 'key_name'",
                    location=f"{loc}.filter",
                    value=raw.get("name"),
                )

        name = raw.get("name")
        if not isinstance(name, str):
            continue
        if name in names:
            yield DuplicateParserName(
                f"parser name {name!r} already used at custom_parsers[{names[name]}]",
                location=loc,
                value=name,
            )
            continue
        names[name] = i
        if name in builtin:
            try:
                parsed = _coerce_one(PARSER_ADAPTER.validate_python, PARSER_TYPES, entry, loc)
            except MalformedConfigEntry:
                # reported by the schema pass
                continue
            if record_key(parsed) != builtin[name]:
                yield DuplicateParserName(
                    f"parser name {name!r} is already used by a built-in parser "
                    "with a different definition",
                    location=loc,
                    value=name,
                )


def _filter_violations(custom_filters: Sequence[Any]) -> Iterator[LogConfigError]:
    for i, entry in enumerate(custom_filters):
        loc = f"custom_filters[{i}]"
        try:
            raw = _as_mapping(entry, loc)
        except LogConfigError as e:
            yield e
            continue

        name = raw.get("name")
        if name == "parser":
            missing = [k for k in ("parser", "key_name") if raw.get(k) is None]
            if missing:
                yield MissingParserFilterFields(
                    f"'parser' filters must define 'parser' and 'key_name' (missing: {', '.join(missing)})",
                    location=loc,
                    value=missing,
                )
        elif name == "nest" and raw.get("operation") is None:
            yield MissingNestOperation("'nest' filters must define 'operation'", location=loc)


def _schema_violations(
    entries: Sequence[Any],
    validate: Callable[[Any], Any],
    types: tuple[type, ...],
    field: str,
    flagged: set[str],
) -> Iterator[LogConfigError]:
    for i, entry in enumerate(entries):
        loc = f"{field}[{i}]"
        if loc in flagged:
            continue
        try:
            _coerce_one(validate, types, entry, loc)
        except MalformedConfigEntry as e:
            yield e


def _iter_violations(
    log_sources: Sequence[Any],
    custom_parsers: Sequence[Any],
    custom_filters: Sequence[Any],
) -> Iterator[LogConfigError]:
    flagged: set[str] = set()
    builtin = _builtin_parser_keys(_requested_technologies(log_sources))
    for check in (
        _source_violations(log_sources),
        _parser_violations(custom_parsers, builtin),
        _filter_violations(custom_filters),
    ):
        for err in check:
            if err.location:
                flagged.add(err.location.split(".", 1)[0])
            yield err

    # entries already flagged by a rule are not reported twice
    yield from _schema_violations(
        log_sources, LogSource.model_validate, (LogSource,), "log_sources", flagged
    )
    yield from _schema_violations(
        custom_parsers, PARSER_ADAPTER.validate_python, PARSER_TYPES, "custom_parsers", flagged
    )
    yield from _schema_violations(
        custom_filters, FILTER_ADAPTER.validate_python, FILTER_TYPES, "custom_filters", flagged
    )


def collect_violations(
    log_sources: Sequence[Any],
    custom_parsers: Sequence[Any] = (),
    custom_filters: Sequence[Any] = (),
) -> list[LogConfigError]:
    """Return every violation: rule checks in input order, then schema mismatches."""
    return list(_iter_violations(log_sources, custom_parsers, custom_filters))


def validate_inputs(
    log_sources: Sequence[Any],
    custom_parsers: Sequence[Any] = (),
    custom_filters: Sequence[Any] = (),
) -> None:
    """Raise the first violation; return None when the input is valid."""
    for err in _iter_violations(log_sources, custom_parsers, custom_filters):
        raise err
