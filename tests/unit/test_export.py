from __future__ import annotations

import csv
import json
from pathlib import Path

from bankdq.domain.models import DuplicateKey, ExactDuplicate
from bankdq.export import records_to_rows, write_csv, write_json


def test_records_to_rows_dumps_models_and_mappings():
    rows = records_to_rows(
        [DuplicateKey(relation="customers", field="customer_id", value=3, occurrence_count=2)]
        + [{"metric": "x"}]
    )
    assert rows[0]["occurrence_count"] == 2
    assert rows[1] == {"metric": "x"}


def test_write_csv_embeds_nested_values_as_json(tmp_path: Path):
    path = write_csv(
        tmp_path / "out" / "exact.csv",
        [ExactDuplicate(row={"customer_id": 3, "name": None}, duplicate_count=2)],
    )

    with path.open("r", newline="", encoding="utf-8") as f:
        (row,) = list(csv.DictReader(f))

    assert row["duplicate_count"] == "2"
    assert json.loads(row["row"]) == {"customer_id": 3, "name": None}


def test_write_csv_uses_union_of_columns(tmp_path: Path):
    path = write_csv(tmp_path / "mixed.csv", [{"a": 1}, {"b": None}])

    with path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert rows == [{"a": "1", "b": ""}, {"a": "", "b": ""}]


def test_write_json(tmp_path: Path):
    path = write_json(tmp_path / "payload.json", {"b": 1, "a": [1, 2]})
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": [1, 2], "b": 1}
