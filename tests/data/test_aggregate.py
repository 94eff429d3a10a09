import datetime as dt

from narrative_viz.data.aggregate import age_bin_totals, reconcile_age_bins
from narrative_viz.data.normalize import AGE_BINS, normalize_rows


def test_bin_totals_are_exact_column_sums(tiny_ds):
    totals = age_bin_totals(tiny_ds)
    assert list(totals) == list(AGE_BINS)
    assert totals == {
        "0-17": 4, "18-29": 8, "30-39": 5, "40-49": 5,
        "50-59": 6, "60-69": 6, "70-79": 6, "80+": 5,
    }
    for b in AGE_BINS:
        assert totals[b] == sum(r.age_groups[b] for r in tiny_ds)


def test_large_values_stay_exact(make_rows):
    big = 10 ** 15 + 1
    df = make_rows([
        ("2021-01-01", big, 0, 0, [big, 0, 0, 0, 0, 0, 0, 0]),
        ("2021-01-02", big, 0, 0, [big, 0, 0, 0, 0, 0, 0, 0]),
        ("2021-01-03", 1, 0, 0, [1, 0, 0, 0, 0, 0, 0, 0]),
    ])
    totals = age_bin_totals(normalize_rows(df))
    assert totals["0-17"] == 2 * big + 1


def test_consistent_dataset_has_no_findings(tiny_ds):
    assert reconcile_age_bins(tiny_ds) == []
    assert sum(age_bin_totals(tiny_ds).values()) == sum(r.cases for r in tiny_ds)


def test_mismatch_is_reported_not_fixed(make_rows):
    df = make_rows([
        ("2021-01-01", 10, 0, 0, [1, 1, 1, 1, 1, 1, 1, 1]),
        ("2021-01-02", 5, 0, 0, [5, 0, 0, 0, 0, 0, 0, 0]),
    ])
    ds = normalize_rows(df)
    findings = reconcile_age_bins(ds)
    assert len(findings) == 1
    f = findings[0]
    assert f.date == dt.date(2021, 1, 1)
    assert (f.cases, f.age_total, f.delta) == (10, 8, -2)
    # data untouched
    assert ds[0].cases == 10
    assert age_bin_totals(ds)["0-17"] == 6
