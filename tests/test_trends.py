import math

import numpy as np
import pytest

from habtrend.data import TrendSeries
from habtrend.trends import (
    RESULT_COLUMNS,
    TREND_DEC,
    TREND_FLAT,
    TREND_INC,
    batch_trends,
    classify_trend,
    detrend,
    rescale,
    results_frame,
    significance_stars,
    site_detail,
    site_trend,
)


def _series(values, start=2010, site="S", hab="run"):
    obs = tuple((start + i, float(v)) for i, v in enumerate(values))
    return TrendSeries(site_id=site, habvar="StnFines", hab_type=hab, lon=-122.0, lat=47.0, observations=obs)


def test_increasing_series_scenario():
    res = site_trend(_series([10, 20, 30]), year_range=(2010, 2012))
    assert res is not None
    assert res.tau == pytest.approx(1.0)
    assert res.trend == TREND_INC
    assert res.slope == pytest.approx(10.0)
    assert res.yrs == "2010, 2011, 2012"
    assert res.n == 3


def test_decreasing_series(prep):
    (b,) = prep[("SiteB", "StnFines")]
    res = site_trend(b)
    assert res.tau == pytest.approx(-1.0)
    assert res.trend == TREND_DEC
    assert res.slope < 0


def test_year_window_restricts_points(prep):
    (b,) = prep[("SiteB", "StnFines")]
    res = site_trend(b, year_range=(2010, 2012))
    assert res.n == 3
    assert res.yrs == "2010, 2011, 2012"


def test_too_few_points_is_omitted():
    assert site_trend(_series([1.0, 2.0])) is None
    assert site_trend(_series([1.0, np.nan, 2.0, np.nan])) is None
    assert site_trend(_series([])) is None


def test_constant_series_is_omitted():
    assert site_trend(_series([7, 7, 7, 7])) is None


def test_batch_drops_untestable_sites(prep):
    results = batch_trends(prep, "StnFines")
    keys = {(r.site_id, r.hab_type) for r in results}
    # SiteA riffle and SiteC riffle have two values, SiteD is constant
    assert keys == {("SiteA", "run"), ("SiteB", "run")}


def test_batch_direction_matches_tau_sign(prep):
    for r in batch_trends(prep, "StnFines", year_range=(2010, 2013)):
        if r.tau > 0:
            assert r.trend == TREND_INC
        elif r.tau < 0:
            assert r.trend == TREND_DEC
        else:
            assert r.trend == TREND_FLAT


def test_batch_filters_and_repeats(prep):
    assert batch_trends(prep, "StnFines", hab_types=["pool"]) == []
    assert batch_trends(prep, "MaxDepth") == []
    a = batch_trends(prep, "StnFines", hab_types=["run"], year_range=(2010, 2013))
    b = batch_trends(prep, "StnFines", hab_types=["run"], year_range=(2010, 2013))
    assert a == b


def test_flat_classification():
    assert classify_trend(0.0) == TREND_FLAT
    assert classify_trend(0.2) == TREND_INC
    assert classify_trend(-0.2) == TREND_DEC
    # two concordant and two discordant pairs
    res = site_trend(_series([1, 2, 2, 1]))
    assert res is not None
    assert res.tau == 0.0
    assert res.trend == TREND_FLAT


@pytest.mark.parametrize("p, stars", [
    (0.0005, "***"),
    (0.001, "**"),
    (0.009, "**"),
    (0.03, "*"),
    (0.05, "."),
    (0.099, "."),
    (0.1, ""),
    (0.8, ""),
    (float("nan"), ""),
])
def test_significance_stars(p, stars):
    assert significance_stars(p) == stars


def test_significance_custom_cuts():
    assert significance_stars(0.03, cuts=((0.05, "sig"),)) == "sig"
    assert significance_stars(0.07, cuts=((0.05, "sig"),)) == ""


def test_deviation_sums_to_zero(prep):
    (b,) = prep[("SiteB", "StnFines")]
    d = detrend(b, year_range=(2010, 2013))
    assert d["deviation"].sum() == pytest.approx(0.0, abs=1e-9)
    assert d["deviation"].iloc[0] == pytest.approx(30.0 - 20.0)
    a_riffle = [s for s in prep[("SiteA", "StnFines")] if s.hab_type == "riffle"][0]
    d = detrend(a_riffle)
    assert d["Year"].tolist() == [2010, 2012]
    assert d["deviation"].tolist() == pytest.approx([0.5, -0.5])


def test_rescale():
    out = rescale([0.0, 0.5, 1.0])
    assert out.tolist() == pytest.approx([2.0, 8.5, 15.0])
    assert rescale([0.3, 0.3]).tolist() == pytest.approx([8.5, 8.5])
    assert rescale([]).size == 0


def test_results_frame(prep):
    df = results_frame(batch_trends(prep, "StnFines"))
    assert list(df.columns) == RESULT_COLUMNS
    assert set(df["trend"]) == {TREND_INC, TREND_DEC}
    assert df["size"].between(2.0, 15.0).all()
    assert (df["pval"] == df["pval"].round(2)).all()
    empty = results_frame([])
    assert empty.empty
    assert list(empty.columns) == RESULT_COLUMNS


def test_site_detail_without_site(prep):
    assert site_detail(prep, None, "StnFines") is None
    assert site_detail(prep, "", "StnFines") is None


def test_site_detail(prep):
    detail = site_detail(prep, "SiteA", "StnFines", year_range=(2010, 2012))
    assert detail.hab_types == ["run", "riffle"]
    assert detail.trends["riffle"] is None
    run = detail.trends["run"]
    assert run.trend == TREND_INC
    assert detail.facet_title("riffle") == "riffle"
    assert detail.facet_title("run") == f"run {run.signif}".strip()
    run_rows = detail.series[detail.series["HabType"] == "run"]
    assert run_rows["deviation"].tolist() == pytest.approx([-10.0, 0.0, 10.0])


def test_site_detail_unknown_site(prep):
    detail = site_detail(prep, "Nowhere", "StnFines")
    assert detail is not None
    assert detail.series.empty
    assert detail.trends == {}


def test_results_are_finite(prep):
    for r in batch_trends(prep, "StnFines"):
        assert -1.0 <= r.tau <= 1.0
        assert 0.0 <= r.pval <= 1.0
        assert math.isfinite(r.slope)
