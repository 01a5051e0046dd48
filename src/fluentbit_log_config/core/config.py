"""Build configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from .models import WILDCARD

MATCH_TEMPLATE_ENV = "LOG_CONFIG_MATCH_TEMPLATE"
LOG_LEVEL_ENV = "LOG_CONFIG_LOG_LEVEL"
BASE_DIR_ENV = "LOG_CONFIG_BASE_DIR"


def check_match_template(template: str, *, source: str = "container_match_template") -> str:
    """Return `template` if it formats with only a `{container}` field."""
    if "{container}" not in template:
        raise ValueError(f"{source} must contain '{{container}}'")
    try:
        used = template.format(container="a") != template.format(container="b")
    except (KeyError, IndexError, AttributeError, ValueError) as exc:
        raise ValueError(
            f"{source} must only use the '{{container}}' placeholder (got {template!r}: {exc!r})"
        ) from exc
    if not used:
        raise ValueError(f"{source} must contain '{{container}}'")
    return template


@dataclass(frozen=True, slots=True)
class BuildConfig:
    # Fluent Bit tags container logs as "container-<name>-<id>"
    container_match_template: str = "container-{container}-*"
    wildcard_container: str = WILDCARD

    def __post_init__(self) -> None:
        check_match_template(self.container_match_template)


def resolve_build_config(cfg: BuildConfig | None = None) -> BuildConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = BuildConfig()

    env = os.getenv(MATCH_TEMPLATE_ENV)
    if env is None or env == "":
        return cfg

    check_match_template(env, source=MATCH_TEMPLATE_ENV)
    if env == cfg.container_match_template:
        return cfg
    return replace(cfg, container_match_template=env)
