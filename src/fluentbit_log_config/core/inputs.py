"""Loading of request documents (module inputs as JSON).

Accepted shapes:
- a request object: {"log_sources": [...], "custom_parsers": [...], ...}
- tfvars JSON, which has the same top-level keys
- a bare list, taken as `log_sources`
"""

from __future__ import annotations

import gzip
import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.threadpool import wrap
from pydantic import ValidationError

from .errors import MalformedConfigEntry
from .models import LogConfigRequest

TEXT_ENCODING = "utf-8"


@asynccontextmanager
async def _open_text(path: Path):
    """Open a request file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=TEXT_ENCODING)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=TEXT_ENCODING) as f:
            yield f


def parse_request(doc: Any) -> LogConfigRequest:
    """Turn a decoded JSON document into a LogConfigRequest."""
    if isinstance(doc, list):
        doc = {"log_sources": doc}
    if not isinstance(doc, dict):
        raise MalformedConfigEntry(
            f"request must be a JSON object or list, got {type(doc).__name__}", value=doc
        )
    try:
        return LogConfigRequest.model_validate(doc)
    except ValidationError as e:
        raise MalformedConfigEntry(str(e), value=doc) from e


async def load_request(path: str | Path) -> LogConfigRequest:
    """Read and decode a request file."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Request file not found: {p}")

    async with _open_text(p) as f:
        text = await f.read()

    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedConfigEntry(f"invalid JSON: {e}", location=str(p)) from e
    return parse_request(doc)
