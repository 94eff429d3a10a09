import json
from pathlib import Path

import pytest

from narrative_viz.io.readers import read_table


def test_read_csv_keeps_raw_strings(tmp_path: Path):
    p = tmp_path / "t.csv"
    p.write_text("Date,Cases\n2021-01-01,007\n2021-01-02,\n", encoding="utf-8")
    df = read_table(p)
    assert list(df.columns) == ["Date", "Cases"]
    assert df["Cases"].tolist() == ["007", ""]


def test_unknown_extension_defaults_to_csv(tmp_path: Path):
    p = tmp_path / "u.data"
    p.write_text("x,y\n9,8\n", encoding="utf-8")
    assert read_table(p).iloc[0].tolist() == ["9", "8"]


def test_read_json_and_ndjson(tmp_path: Path):
    arr = tmp_path / "j.json"
    arr.write_text(json.dumps([{"Date": "2021-01-01", "Cases": 3}]), encoding="utf-8")
    df = read_table(arr)
    assert df.loc[0, "Date"] == "2021-01-01"
    assert int(df.loc[0, "Cases"]) == 3

    nd = tmp_path / "j.ndjson"
    nd.write_text('{"a":1}\n{"a":2}\n', encoding="utf-8")
    assert read_table(nd)["a"].tolist() == [1, 2]


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_table(tmp_path / "nope.csv")
