"""Append statistic results to per-namespace files.

Files hold back-to-back JSON documents with no separator; use iter_documents
to read them back.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List

from src.core.errors import PersistError
from src.domain.models import MetricIdentity, StatisticResult

_decoder = json.JSONDecoder()

_PLACEHOLDER = "_"


def _segments(component: str) -> List[str]:
    # "/aws/lambda/fn" nests as aws/lambda/fn; never absolute, never "..".
    parts = [p for p in component.split("/") if p not in ("", ".")]
    return [_PLACEHOLDER if p == ".." else p for p in parts] or [_PLACEHOLDER]


def output_path(base_dir: Path, metric: MetricIdentity) -> Path:
    """Only the first dimension names the file; later dimensions are ignored.

    Components are joined as text, so a slash inside a namespace or dimension
    value adds directory levels below ``base_dir`` instead of replacing it.
    """
    first = metric.first_dimension
    if first is not None:
        components = (metric.namespace, first.name, first.value)
    else:
        components = (metric.namespace, metric.name)
    path = Path(base_dir)
    for component in components:
        path = path.joinpath(*_segments(component))
    return path


def append_result(path: Path, metric: MetricIdentity, result: StatisticResult) -> int:
    """Append one serialized document to ``path``; returns bytes written.

    Blocking. No locking: concurrent appends to one file rely on O_APPEND.
    """
    try:
        payload = result.to_json()
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
        try:
            written = os.write(fd, payload)
            while written < len(payload):
                written += os.write(fd, payload[written:])
        finally:
            os.close(fd)
    except (OSError, ValueError, TypeError) as exc:
        raise PersistError(metric, exc) from exc
    return written


def iter_documents(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield each JSON document from a file of concatenated documents."""
    text = Path(path).read_text(encoding="utf-8")
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            return
        doc, pos = _decoder.raw_decode(text, pos)
        yield doc
