import numpy as np
import pandas as pd
import pytest

from habtrend.aggregate import AGG_COLUMNS, aggregate_habitat, facet_trend_lines, fit_facet_trends


def _obs(rows):
    return pd.DataFrame(rows, columns=["SiteID", "Year", "HabType", "Watershed", "habvar", "habval"])


def test_one_row_per_year_and_facet(habitat):
    cells = aggregate_habitat(habitat, variable="StnFines")
    assert list(cells.columns) == AGG_COLUMNS
    facets = cells[["HabType", "Watershed"]].drop_duplicates()
    assert len(facets) == 4
    assert len(cells) == 4 * 4
    assert not cells.duplicated(["Year", "HabType", "Watershed"]).any()
    for _, g in cells.groupby(["HabType", "Watershed"]):
        assert sorted(g["Year"]) == [2010, 2011, 2012, 2013]


def test_counts_and_means_match_buckets(habitat):
    cells = aggregate_habitat(habitat, variable="StnFines").set_index(["Year", "HabType", "Watershed"])
    valid = habitat[(habitat["habvar"] == "StnFines") & habitat["habval"].notna()]
    expected = valid.groupby(["Year", "HabType", "Watershed"])["habval"].agg(["size", "mean"])
    for key, row in expected.iterrows():
        assert cells.loc[key, "n"] == row["size"]
        assert cells.loc[key, "avehab"] == pytest.approx(row["mean"])
    assert cells.loc[(2010, "run", "Upper"), "avehab"] == pytest.approx(20.0)
    assert cells.loc[(2010, "run", "Upper"), "n"] == 2


def test_missing_values_become_empty_cells(habitat):
    cells = aggregate_habitat(habitat, variable="StnFines").set_index(["Year", "HabType", "Watershed"])
    assert cells.loc[(2011, "riffle", "Upper"), "n"] == 0
    assert np.isnan(cells.loc[(2011, "riffle", "Upper"), "avehab"])
    assert cells.loc[(2013, "riffle", "Lower"), "n"] == 0


def test_gap_year_is_filled():
    df = _obs([
        ("S1", 2015, "run", "W", "StnFines", 1.0),
        ("S1", 2017, "run", "W", "StnFines", 3.0),
    ])
    cells = aggregate_habitat(df, variable="StnFines")
    assert cells["Year"].tolist() == [2015, 2016, 2017]
    gap = cells[cells["Year"] == 2016].iloc[0]
    assert gap["n"] == 0
    assert np.isnan(gap["avehab"])


def test_empty_selection(habitat):
    cells = aggregate_habitat(habitat, variable="StnFines", hab_types=["pool"])
    assert cells.empty
    assert list(cells.columns) == AGG_COLUMNS
    assert fit_facet_trends(cells).empty
    assert facet_trend_lines(cells, fit_facet_trends(cells)).empty


def test_aggregate_is_repeatable(habitat):
    a = aggregate_habitat(habitat, variable="StnFines", hab_types=["run", "riffle"], year_range=(2010, 2013))
    b = aggregate_habitat(habitat, variable="StnFines", hab_types=["run", "riffle"], year_range=(2010, 2013))
    pd.testing.assert_frame_equal(a, b)


def test_facet_linear_fit():
    df = _obs([
        ("S1", 2000, "pool", "W", "AvgDepth", 1.0),
        ("S1", 2001, "pool", "W", "AvgDepth", 3.0),
        ("S1", 2003, "pool", "W", "AvgDepth", 7.0),
        ("S2", 2000, "run", "W", "AvgDepth", 2.0),
    ])
    cells = aggregate_habitat(df, variable="AvgDepth")
    fits = fit_facet_trends(cells).set_index(["HabType", "Watershed"])
    pool = fits.loc[("pool", "W")]
    assert pool["slope"] == pytest.approx(2.0)
    assert pool["intercept"] + pool["slope"] * 2000 == pytest.approx(1.0)
    assert pool["mean"] == pytest.approx(11.0 / 3)
    assert pool["n_years"] == 3
    # single populated year cannot carry a line
    assert np.isnan(fits.loc[("run", "W"), "slope"])

    lines = facet_trend_lines(cells, fit_facet_trends(cells))
    assert set(lines["HabType"]) == {"pool"}
    assert lines["Year"].tolist() == [2000, 2001, 2002, 2003]
    assert lines["fitted"].iloc[-1] == pytest.approx(7.0)


def test_cells_never_mix_variables(habitat):
    cells = aggregate_habitat(habitat, "CanopyCover").set_index(["Year", "HabType", "Watershed"])
    assert cells.loc[(2010, "run", "Upper"), "avehab"] == 50.0
    fines = aggregate_habitat(habitat, "StnFines").set_index(["Year", "HabType", "Watershed"])
    assert fines.loc[(2010, "run", "Upper"), "n"] == 2
    assert fines.loc[(2010, "run", "Upper"), "avehab"] == 20.0
    assert aggregate_habitat(habitat, None).empty
    with pytest.raises(TypeError):
        aggregate_habitat(habitat)
