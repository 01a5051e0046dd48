from __future__ import annotations

import gzip
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def write_request() -> Callable[[Path, Any], None]:
    def _write(path: Path, doc: Any) -> None:
        text = json.dumps(doc)
        if path.suffix == ".gz":
            with gzip.open(path, mode="wt", encoding="utf-8") as f:
                f.write(text)
        else:
            path.write_text(text, encoding="utf-8")

    return _write


@pytest.fixture
def php_and_nginx() -> list[dict[str, str]]:
    return [
        {"technology": "php", "container": "app"},
        {"technology": "nginx", "container": "web"},
    ]
