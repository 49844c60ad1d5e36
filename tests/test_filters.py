from habtrend.filters import filter_observations, filter_trend_series, site_choices, year_bounds


def test_filter_missing_habitat_type_is_empty(habitat):
    out = filter_observations(habitat, hab_types=["pool"])
    assert out.empty
    assert list(out.columns) == list(habitat.columns)


def test_filter_by_variable_and_year_range(habitat):
    out = filter_observations(habitat, variable="StnFines", year_range=(2011, 2012))
    assert set(out["habvar"]) == {"StnFines"}
    assert out["Year"].between(2011, 2012).all()
    assert len(out) == 9


def test_filter_reversed_year_range(habitat):
    a = filter_observations(habitat, year_range=(2012, 2011))
    b = filter_observations(habitat, year_range=(2011, 2012))
    assert a.equals(b)


def test_filter_single_site_string(habitat):
    out = filter_observations(habitat, sites="SiteB", hab_types="run")
    assert set(out["SiteID"]) == {"SiteB"}
    assert len(out) == 4


def test_filter_watershed(habitat):
    out = filter_observations(habitat, watersheds=["Lower"])
    assert set(out["SiteID"]) == {"SiteC", "SiteD"}


def test_filter_does_not_mutate_input(habitat):
    before = habitat.copy()
    filter_observations(habitat, hab_types=["run"], variable="StnFines", year_range=(2010, 2011))
    assert habitat.equals(before)


def test_filter_trend_series(prep):
    series = filter_trend_series(prep, "StnFines", sites=["SiteA"])
    assert [s.hab_type for s in series] == ["riffle", "run"]
    assert filter_trend_series(prep, "StnFines", sites=["SiteA"], hab_types=["pool"]) == []
    assert filter_trend_series(prep, "MaxDepth") == []


def test_year_bounds_and_sites(habitat):
    assert year_bounds(habitat) == (2010, 2013)
    assert year_bounds(habitat.iloc[0:0]) is None
    assert site_choices(habitat) == ["SiteA", "SiteB", "SiteC", "SiteD"]
    assert site_choices(habitat, "CanopyCover") == ["SiteA"]
