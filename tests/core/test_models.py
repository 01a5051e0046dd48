from __future__ import annotations

import pytest
from pydantic import ValidationError

from fluentbit_log_config.core.models import (
    FILTER_ADAPTER,
    PARSER_ADAPTER,
    GenericFilter,
    GrepFilter,
    LogfmtParser,
    LogSource,
    LtsvParser,
    ModifyFilter,
    NestFilter,
    ParserTypeFilter,
    RegexParser,
    Technology,
)


def test_log_source_defaults_to_wildcard_container() -> None:
    assert LogSource.model_validate({"technology": "php"}).container == "*"
    assert LogSource.model_validate({"technology": "php", "container": None}).container == "*"


def test_log_source_accepts_name_alias() -> None:
    src = LogSource.model_validate({"name": "nginx", "container": "web"})
    assert src.technology is Technology.NGINX
    assert src.container == "web"


def test_log_source_rejects_unknown_technology() -> None:
    with pytest.raises(ValidationError):
        LogSource.model_validate({"technology": "cobol"})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"name": "a", "format": "regex", "regex": "^(?<m>.*)$"}, RegexParser),
        ({"name": "b", "format": "ltsv"}, LtsvParser),
        ({"name": "c", "format": "logfmt"}, LogfmtParser),
    ],
)
def test_parser_union_dispatches_on_format(raw, expected) -> None:
    assert isinstance(PARSER_ADAPTER.validate_python(raw), expected)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"name": "grep", "regex": "log error"}, GrepFilter),
        ({"name": "modify", "rename_fields": {"msg": "message"}}, ModifyFilter),
        ({"name": "nest", "operation": "lift", "nested_under": "kubernetes"}, NestFilter),
        ({"name": "parser", "parser": "nginx_access", "key_name": "log"}, ParserTypeFilter),
        ({"name": "record_modifier", "record": "hostname ${HOSTNAME}"}, GenericFilter),
    ],
)
def test_filter_union_dispatches_on_name(raw, expected) -> None:
    f = FILTER_ADAPTER.validate_python(raw)
    assert isinstance(f, expected)
    assert f.match == "*"


def test_nest_operation_is_restricted() -> None:
    with pytest.raises(ValidationError):
        FILTER_ADAPTER.validate_python({"name": "nest", "operation": "flatten"})


def test_records_are_frozen() -> None:
    f = GrepFilter(exclude="log x")
    with pytest.raises(ValidationError):
        f.match = "container-app-*"  # type: ignore[misc]


def test_to_dict_drops_unset_fields() -> None:
    assert ModifyFilter(add_fields={"env": "prod"}).to_dict() == {
        "name": "modify",
        "match": "*",
        "add_fields": {"env": "prod"},
    }
