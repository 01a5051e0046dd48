"""Registry record and declarative helpers shared by technology modules."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Filter, GrepFilter, ModifyFilter, Parser, ParserFilter

LOG_KEY = "log"


@dataclass(frozen=True, slots=True)
class TechnologyRegistry:
    """Static parsers/filters for one technology.

    Every filter carries ``match="*"``; the aggregator scopes it to a container.
    """

    technology: str
    parsers: tuple[Parser, ...] = ()
    filters: tuple[Filter, ...] = ()


def on_log_key() -> ParserFilter:
    """Apply a parser to the raw `log` field, keeping the other record fields."""
    return ParserFilter(
        match="*",
        key_name=LOG_KEY,
        reserve_data=True,
        preserve_key=False,
        unescape_key=False,
    )


def exclude(pattern: str, *, key: str = LOG_KEY) -> GrepFilter:
    """Drop records whose `key` matches `pattern`."""
    return GrepFilter(match="*", exclude=f"{key} {pattern}")


def stamp_log_source(technology: str) -> ModifyFilter:
    """Tag every record with the technology it came from."""
    return ModifyFilter(match="*", add_fields={"log_source": technology})
