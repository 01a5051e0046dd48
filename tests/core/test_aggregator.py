from __future__ import annotations

import pytest

from fluentbit_log_config.core.aggregator import aggregate, build, container_match, distinct
from fluentbit_log_config.core.config import BuildConfig
from fluentbit_log_config.core.errors import (
    DuplicateLogSource,
    DuplicateParserName,
    MalformedConfigEntry,
    MissingRegexPattern,
    UnsupportedTechnology,
)
from fluentbit_log_config.core.models import (
    GenericFilter,
    GrepFilter,
    JsonParser,
    LogSource,
    Technology,
)
from fluentbit_log_config.core.registries import REGISTRIES, default_parsers
from fluentbit_log_config.core.registries import nginx as nginx_registry
from fluentbit_log_config.core.registries import php as php_registry


def _names(records) -> list[str]:
    return [r.name for r in records]


def test_empty_sources_yield_defaults_only() -> None:
    result = build([])
    assert list(result.parsers) == list(default_parsers())
    assert len(result.parsers) == 12
    assert result.filters == ()


def test_defaults_come_first_with_wildcard_match(php_and_nginx) -> None:
    result = build(php_and_nginx)
    defaults = list(default_parsers())
    assert list(result.parsers[: len(defaults)]) == defaults
    assert all(p.filter is not None and p.filter.match == "*" for p in defaults)


def test_php_and_nginx_scenario(php_and_nginx) -> None:
    result = build(php_and_nginx)

    assert len(result.parsers) == 12 + 5 + 3
    assert _names(result.parsers[12:17]) == _names(php_registry.PARSERS)
    assert _names(result.parsers[17:]) == _names(nginx_registry.PARSERS)

    php_filters = result.filters[: len(php_registry.FILTERS)]
    nginx_filters = result.filters[len(php_registry.FILTERS) :]
    assert len(php_filters) == 11
    assert len(nginx_filters) == 4
    assert {f.match for f in php_filters} == {"container-app-*"}
    assert {f.match for f in nginx_filters} == {"container-web-*"}
    assert [f.name for f in php_filters].count("grep") == 10
    assert php_filters[-1].add_fields == {"log_source": "php"}
    assert nginx_filters[-1].add_fields == {"log_source": "nginx"}


def test_registry_filters_are_not_mutated(php_and_nginx) -> None:
    build(php_and_nginx)
    assert {f.match for f in php_registry.FILTERS} == {"*"}


def test_wildcard_container_keeps_registry_match() -> None:
    result = build([{"technology": "envoy"}])
    assert result.parsers == tuple(default_parsers())
    assert len(result.filters) == 1
    assert result.filters[0].match == "*"
    assert result.filters[0].add_fields == {"log_source": "envoy"}


def test_one_filter_copy_per_container() -> None:
    result = build(
        [
            {"technology": "php", "container": "app"},
            {"technology": "php", "container": "worker"},
        ]
    )
    # parsers are added once per technology
    assert len(result.parsers) == 12 + 5
    assert len(result.filters) == 22
    assert [f.match for f in result.filters[:11]] == ["container-app-*"] * 11
    assert [f.match for f in result.filters[11:]] == ["container-worker-*"] * 11


def test_identical_wildcard_filters_are_deduplicated() -> None:
    result = build([{"technology": "php"}, {"technology": "nginx"}])
    # health check, ELB and kubelet excludes are shared by both registries
    assert len(result.filters) == 11 + 4 - 3
    assert _names(result.filters).count("modify") == 2


def test_technology_order_follows_registry_declaration() -> None:
    a = build([{"technology": "nodejs"}, {"technology": "php"}])
    b = build([{"technology": "php"}, {"technology": "nodejs"}])
    assert a.parsers == b.parsers
    assert _names(a.parsers[12:17]) == _names(php_registry.PARSERS)


def test_filters_follow_input_order() -> None:
    result = build([{"technology": "envoy", "container": "proxy"}, {"technology": "dotnet", "container": "api"}])
    assert [f.add_fields["log_source"] for f in result.filters] == ["envoy", "dotnet"]


def test_build_is_idempotent(php_and_nginx) -> None:
    custom = [{"name": "grep", "match": "*", "exclude": "log ^$"}]
    first = build(php_and_nginx, custom_filters=custom).to_outputs()
    second = build(php_and_nginx, custom_filters=custom).to_outputs()
    assert first == second


def test_custom_entries_pass_through_unchanged(php_and_nginx) -> None:
    custom_parsers = [
        {"name": "app_regex", "format": "regex", "regex": "^(?<message>.*)$"},
        {
            "name": "app_json",
            "format": "json",
            "time_key": "ts",
            "time_format": "%s",
            "filter": {"match": "container-app-*", "key_name": "log", "reserve_data": True},
        },
    ]
    custom_filters = [
        {"name": "grep", "match": "container-app-*", "regex": "level (error|warning)"},
        {"name": "lua", "match": "*", "script": "enrich.lua", "call": "enrich"},
    ]
    out = build(php_and_nginx, custom_parsers, custom_filters).to_outputs()

    assert out["log_config_parsers"][-2:] == custom_parsers
    assert out["log_config_filters"][-2:] == custom_filters


def test_custom_parser_identical_to_default_is_collapsed() -> None:
    duplicate = default_parsers()[0].to_dict()
    result = build([], [duplicate])
    assert len(result.parsers) == 12


def test_custom_filter_identical_to_registry_filter_is_collapsed() -> None:
    duplicate = {"name": "modify", "match": "*", "add_fields": {"log_source": "envoy"}}
    result = build([{"technology": "envoy"}], custom_filters=[duplicate])
    assert len(result.filters) == 1


def test_same_name_different_content_is_kept() -> None:
    grep_a = {"name": "grep", "match": "*", "exclude": "log a"}
    grep_b = {"name": "grep", "match": "*", "exclude": "log b"}
    result = build([], custom_filters=[grep_a, grep_b])
    assert len(result.filters) == 2


def test_custom_parser_cannot_shadow_builtin_name() -> None:
    parser = {"name": "php_error_log", "format": "regex", "regex": "^(?<m>.*)$"}
    with pytest.raises(DuplicateParserName):
        build([{"technology": "php"}], [parser])


def test_output_parser_names_are_unique(php_and_nginx) -> None:
    custom = [p.to_dict() for p in php_registry.REGISTRY.parsers]
    names = _names(build(php_and_nginx, custom).parsers)
    assert len(names) == len(set(names))


def test_custom_filter_without_match_gets_wildcard() -> None:
    out = build([], custom_filters=[{"name": "grep", "exclude": "log x"}]).to_outputs()
    assert out["log_config_filters"] == [{"name": "grep", "match": "*", "exclude": "log x"}]


def test_model_instances_are_accepted() -> None:
    result = build(
        [LogSource(technology=Technology.DATADOG, container="agent")],
        [JsonParser(name="custom_json", time_key="t")],
        [GrepFilter(exclude="log noise")],
    )
    assert result.parsers[-1].name == "custom_json"
    assert isinstance(result.filters[-1], GrepFilter)
    assert result.filters[0].match == "container-agent-*"


def test_generic_filter_keeps_extra_options() -> None:
    result = build([], custom_filters=[{"name": "throttle", "match": "*", "rate": 800, "window": 3}])
    f = result.filters[0]
    assert isinstance(f, GenericFilter)
    assert f.to_dict() == {"name": "throttle", "match": "*", "rate": 800, "window": 3}


@pytest.mark.parametrize(
    ("sources", "parsers", "error"),
    [
        ([{"technology": "cobol"}], [], UnsupportedTechnology),
        (
            [{"technology": "php", "container": "app"}, {"technology": "php", "container": "app"}],
            [],
            DuplicateLogSource,
        ),
        ([], [{"name": "x", "format": "regex"}], MissingRegexPattern),
    ],
)
def test_build_rejects_invalid_input(sources, parsers, error) -> None:
    with pytest.raises(error):
        build(sources, parsers)


def test_schema_mismatch_is_malformed() -> None:
    with pytest.raises(MalformedConfigEntry) as exc:
        build([], [{"format": "json"}])
    assert exc.value.location == "custom_parsers[0]"
    assert "name" in str(exc.value)

    with pytest.raises(MalformedConfigEntry):
        build([], custom_filters=[{"name": "grep", "exlude": "log typo"}])


def test_container_match() -> None:
    cfg = BuildConfig()
    assert container_match("*", cfg) is None
    assert container_match("app", cfg) == "container-app-*"

    custom = BuildConfig(container_match_template="ecs.{container}.*")
    assert container_match("app", custom) == "ecs.app.*"


def test_aggregate_uses_config_template() -> None:
    cfg = BuildConfig(container_match_template="ecs.{container}.*")
    result = aggregate([LogSource(technology="envoy", container="proxy")], cfg=cfg)
    assert result.filters[0].match == "ecs.proxy.*"


def test_distinct_ignores_mapping_key_order() -> None:
    a = GrepFilter(exclude="log x")
    b = GrepFilter.model_validate({"exclude": "log x", "match": "*", "name": "grep"})
    c = GrepFilter(exclude="log y")
    assert distinct([a, b, c]) == [a, c]


def test_every_registry_filter_starts_with_wildcard_match() -> None:
    for registry in REGISTRIES.values():
        assert all(f.match == "*" for f in registry.filters)
