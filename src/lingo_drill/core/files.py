"""JSON and JSON Lines helpers for study content and session history."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

__all__ = [
    "read_jsonl",
    "write_jsonl",
    "append_jsonl",
    "read_records",
]


def read_jsonl(path: Path) -> List[Dict[str, Any]]:
    """Read one JSON object per non-blank line."""
    data: List[Dict[str, Any]] = []
    with Path(path).open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                item = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({exc.msg})") from exc
            if not isinstance(item, dict):
                raise ValueError(f"{path}:{lineno}: expected a JSON object")
            data.append(item)
    return data


def write_jsonl(path: Path, records: Sequence[Mapping[str, Any]]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as fh:
        for rec in records:
            fh.write(json.dumps(rec, ensure_ascii=False))
            fh.write("\n")


def append_jsonl(path: Path, record: Mapping[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False))
        fh.write("\n")


def read_records(path: Path) -> List[Dict[str, Any]]:
    """Load objects from a ``.jsonl`` file or a ``.json`` array.

    A ``.json`` document may also be an object wrapping the array under a
    ``data`` key, which is how generated content is stored.
    """
    p = Path(path)
    if p.suffix.lower() == ".jsonl":
        return read_jsonl(p)
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{p}: invalid JSON ({exc.msg})") from exc
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list) or not all(
        isinstance(item, dict) for item in payload
    ):
        raise ValueError(f"{p}: expected a JSON array of objects")
    return list(payload)
