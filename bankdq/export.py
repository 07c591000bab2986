"""
Tabular export of check records (CSV) and run payloads (JSON).
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import BaseModel

Record = Union[BaseModel, Mapping[str, Any]]


def records_to_rows(records: Iterable[Record]) -> List[Dict[str, Any]]:
    """Dump pydantic records to JSON-compatible dictionaries."""
    return [
        r.model_dump(mode="json") if isinstance(r, BaseModel) else dict(r) for r in records
    ]


def _cell(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return "" if value is None else value


def write_csv(path: Path | str, records: Iterable[Record]) -> Path:
    """
    Write records as CSV. Columns are the union of keys in first-seen order;
    nested values (e.g. a full source row) are embedded as JSON text.
    """
    rows = records_to_rows(records)
    columns: Dict[str, None] = {}
    for row in rows:
        columns.update(dict.fromkeys(row))

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(columns))
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _cell(v) for k, v in row.items()})
    return path


def write_json(path: Path | str, payload: Any) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True, default=str)
    return path


__all__ = ["records_to_rows", "write_csv", "write_json"]
