"""Core data models for Fluent Bit parser/filter configuration."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)

WILDCARD = "*"


class Technology(str, Enum):
    """Application stacks with a built-in parser/filter registry."""

    PHP = "php"
    NGINX = "nginx"
    ENVOY = "envoy"
    DOTNET = "dotnet"
    DATADOG = "datadog"
    NODEJS = "nodejs"


PARSER_FORMATS = ("json", "regex", "ltsv", "logfmt")


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict without unset (None) fields."""
        return self.model_dump(mode="json", exclude_none=True)


class LogSource(_Record):
    """One requested log stream: a technology running in a container."""

    technology: Technology = Field(validation_alias=AliasChoices("technology", "name"))
    container: str = WILDCARD

    @field_validator("container", mode="before")
    @classmethod
    def _default_container(cls, v: Any) -> Any:
        # null behaves like an omitted attribute
        return WILDCARD if v is None else v


class ParserFilter(_Record):
    """How Fluent Bit applies a parser to records (embedded `filter` block)."""

    match: str = WILDCARD
    key_name: str | None = None
    reserve_data: bool | None = None
    preserve_key: bool | None = None
    unescape_key: bool | None = None


class _ParserBase(_Record):
    name: str
    time_key: str | None = None
    time_format: str | None = None
    time_keep: bool | None = None
    time_offset: str | None = None
    decode_field: str | None = None
    decode_field_as: str | None = None
    types: str | None = None
    skip_empty_values: bool | None = None
    filter: ParserFilter | None = None


class JsonParser(_ParserBase):
    format: Literal["json"] = "json"


class RegexParser(_ParserBase):
    format: Literal["regex"] = "regex"
    regex: str | None = None


class LtsvParser(_ParserBase):
    format: Literal["ltsv"] = "ltsv"


class LogfmtParser(_ParserBase):
    format: Literal["logfmt"] = "logfmt"


Parser = Annotated[
    Union[JsonParser, RegexParser, LtsvParser, LogfmtParser],
    Field(discriminator="format"),
]


class _FilterBase(_Record):
    name: str
    # an omitted match is written out as "*"
    match: str = WILDCARD


class GrepFilter(_FilterBase):
    name: Literal["grep"] = "grep"
    regex: str | None = None
    exclude: str | None = None
    logical_op: Literal["AND", "OR", "legacy"] | None = None


class ModifyFilter(_FilterBase):
    name: Literal["modify"] = "modify"
    add_fields: dict[str, str] | None = None
    set_fields: dict[str, str] | None = None
    rename_fields: dict[str, str] | None = None
    remove_fields: list[str] | None = None


class NestFilter(_FilterBase):
    name: Literal["nest"] = "nest"
    operation: Literal["nest", "lift"] | None = None
    wildcard: list[str] | None = None
    nest_under: str | None = None
    nested_under: str | None = None
    add_prefix: str | None = None
    remove_prefix: str | None = None


class ParserTypeFilter(_FilterBase):
    name: Literal["parser"] = "parser"
    parser: str | None = None
    key_name: str | None = None
    reserve_data: bool | None = None
    preserve_key: bool | None = None
    unescape_key: bool | None = None


class GenericFilter(_FilterBase):
    """Any other Fluent Bit filter plugin; options pass through verbatim."""

    model_config = ConfigDict(frozen=True, extra="allow")


_TYPED_FILTERS = frozenset({"grep", "modify", "nest", "parser"})


def _filter_tag(value: Any) -> str:
    if isinstance(value, Mapping):
        name = value.get("name")
    else:
        name = getattr(value, "name", None)
    return name if name in _TYPED_FILTERS else "generic"


Filter = Annotated[
    Union[
        Annotated[GrepFilter, Tag("grep")],
        Annotated[ModifyFilter, Tag("modify")],
        Annotated[NestFilter, Tag("nest")],
        Annotated[ParserTypeFilter, Tag("parser")],
        Annotated[GenericFilter, Tag("generic")],
    ],
    Discriminator(_filter_tag),
]

PARSER_TYPES = (JsonParser, RegexParser, LtsvParser, LogfmtParser)
FILTER_TYPES = (GrepFilter, ModifyFilter, NestFilter, ParserTypeFilter, GenericFilter)

PARSER_ADAPTER: TypeAdapter[Parser] = TypeAdapter(Parser)
FILTER_ADAPTER: TypeAdapter[Filter] = TypeAdapter(Filter)


class LogConfigRequest(BaseModel):
    """Full module input. `name`/`context` are label passthrough only."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    log_sources: list[dict[str, Any]] = Field(default_factory=list)
    custom_parsers: list[dict[str, Any]] = Field(default_factory=list)
    custom_filters: list[dict[str, Any]] = Field(default_factory=list)


def record_key(record: BaseModel) -> str:
    """Structural identity of a record (insensitive to mapping key order)."""
    return json.dumps(record.model_dump(mode="json", exclude_none=True), sort_keys=True)


@dataclass(frozen=True, slots=True)
class BuildResult:
    """The two output lists consumed by container definitions."""

    parsers: tuple[Parser, ...]
    filters: tuple[Filter, ...]

    def to_outputs(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "log_config_parsers": [p.to_dict() for p in self.parsers],
            "log_config_filters": [f.to_dict() for f in self.filters],
        }
