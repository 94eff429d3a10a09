import datetime as dt
from dataclasses import FrozenInstanceError

import pytest

from narrative_viz.data.normalize import (
    AGE_BINS,
    DataSet,
    DataValidationError,
    Record,
    load_dataset,
    normalize_rows,
)


def test_normalize_builds_typed_records(tiny_ds):
    assert len(tiny_ds) == 3
    r0 = tiny_ds[0]
    assert r0.date == dt.date(2021, 1, 1)
    assert (r0.cases, r0.deaths, r0.hospitalizations) == (10, 1, 3)
    assert list(r0.age_groups) == list(AGE_BINS)
    assert r0.age_groups["18-29"] == 2
    assert isinstance(r0.cases, int)


def test_records_are_immutable(tiny_ds):
    r = tiny_ds[0]
    with pytest.raises(FrozenInstanceError):
        r.cases = 5
    with pytest.raises(TypeError):
        r.age_groups["0-17"] = 99


def test_age_columns_named_by_label_are_accepted(tiny_df):
    renamed = tiny_df.rename(columns={
        "Age_0_17": "0-17", "Age_18_29": "18-29", "Age_30_39": "30-39", "Age_40_49": "40-49",
        "Age_50_59": "50-59", "Age_60_69": "60-69", "Age_70_79": "70-79", "Age_80_plus": "80+",
    })
    ds = normalize_rows(renamed)
    assert ds[1].age_groups["80+"] == 2


def test_missing_columns_fail_fast(tiny_df):
    with pytest.raises(DataValidationError, match="Cases"):
        normalize_rows(tiny_df.drop(columns=["Cases"]))
    with pytest.raises(DataValidationError, match="Age_80_plus"):
        normalize_rows(tiny_df.drop(columns=["Age_80_plus"]))


@pytest.mark.parametrize("bad", ["", "abc", "-4", "1.5", "NaN"])
def test_bad_counts_name_row_and_column(make_rows, bad):
    df = make_rows([("2021-01-01", 1, 0, 0, None), ("2021-01-02", 2, 0, 0, None)])
    df.loc[1, "Deaths"] = bad
    with pytest.raises(DataValidationError) as ei:
        normalize_rows(df)
    assert ei.value.row == 1
    assert ei.value.column == "Deaths"


def test_numeric_cells_from_non_csv_sources(make_rows):
    df = make_rows([("2021-01-01", 1, 0, 0, None)])
    for c in df.columns[1:]:
        df[c] = df[c].astype(int)
    df["Cases"] = df["Cases"].astype(float)
    ds = normalize_rows(df)
    assert ds[0].cases == 1 and isinstance(ds[0].cases, int)


def test_unparsable_date(make_rows):
    df = make_rows([("2021-13-01", 1, 0, 0, None)])
    with pytest.raises(DataValidationError, match="unparsable date"):
        normalize_rows(df)


def test_duplicate_dates_rejected(make_rows):
    df = make_rows([("2021-01-01", 1, 0, 0, None), ("2021-01-01", 2, 0, 0, None)])
    with pytest.raises(DataValidationError, match="duplicate date"):
        normalize_rows(df)


def test_empty_table_rejected(tiny_df):
    with pytest.raises(DataValidationError):
        normalize_rows(tiny_df.iloc[0:0])


def test_unsorted_rows_are_resorted(make_rows):
    df = make_rows([
        ("2021-01-03", 3, 0, 0, None),
        ("2021-01-01", 1, 0, 0, None),
        ("2021-01-02", 2, 0, 0, None),
    ])
    ds = normalize_rows(df)
    assert [r.cases for r in ds] == [1, 2, 3]
    assert list(ds.dates) == sorted(ds.dates)


def test_dataset_rejects_out_of_order_records():
    a = Record(date=dt.date(2021, 1, 2), cases=1, deaths=0, hospitalizations=0)
    b = Record(date=dt.date(2021, 1, 1), cases=1, deaths=0, hospitalizations=0)
    with pytest.raises(DataValidationError):
        DataSet((a, b))
    with pytest.raises(DataValidationError):
        DataSet(())


def test_anchor_index_first_on_or_after(tiny_ds):
    assert tiny_ds.anchor_index(dt.date(2020, 12, 1)) == 0
    assert tiny_ds.anchor_index(dt.date(2021, 1, 2)) == 1
    assert tiny_ds.anchor_index(dt.date(2021, 1, 3)) == 2
    assert tiny_ds.anchor_index(dt.date(2021, 1, 4)) is None


def test_max_and_extent(tiny_ds):
    assert tiny_ds.max_of("cases") == 20
    assert tiny_ds.max_of("hospitalizations") == 5
    assert tiny_ds.extent() == (dt.date(2021, 1, 1), dt.date(2021, 1, 3))
    with pytest.raises(KeyError):
        tiny_ds.max_of("recoveries")


def test_load_sample_dataset(project_root):
    ds = load_dataset(project_root / "data" / "covid-19-data.csv")
    assert len(ds) > 200
    assert ds.first.date == dt.date(2020, 12, 1)
    assert all(a.date < b.date for a, b in zip(ds, list(ds)[1:]))
