import numpy as np
import pandas as pd
import pytest

from habtrend.data import build_trend_prep, normalize_habitat

NAN = np.nan

_ROWS = [
    # SiteID, Year, HabType, Watershed, habvar, habval, Longitude, Latitude
    ("SiteA", 2010, "run", "Upper", "StnFines", 10.0, -122.10, 47.50),
    ("SiteA", 2011, "run", "Upper", "StnFines", 20.0, -122.10, 47.50),
    ("SiteA", 2012, "run", "Upper", "StnFines", 30.0, -122.10, 47.50),
    ("SiteA", 2010, "riffle", "Upper", "StnFines", 5.0, -122.10, 47.50),
    ("SiteA", 2011, "riffle", "Upper", "StnFines", NAN, -122.10, 47.50),
    ("SiteA", 2012, "riffle", "Upper", "StnFines", 4.0, -122.10, 47.50),
    ("SiteA", 2010, "run", "Upper", "CanopyCover", 50.0, -122.10, 47.50),
    ("SiteA", 2011, "run", "Upper", "CanopyCover", 55.0, -122.10, 47.50),
    ("SiteB", 2010, "run", "Upper", "StnFines", 30.0, -122.20, 47.60),
    ("SiteB", 2011, "run", "Upper", "StnFines", 25.0, -122.20, 47.60),
    ("SiteB", 2012, "run", "Upper", "StnFines", 15.0, -122.20, 47.60),
    ("SiteB", 2013, "run", "Upper", "StnFines", 10.0, -122.20, 47.60),
    ("SiteC", 2010, "riffle", "Lower", "StnFines", 8.0, -122.30, 47.40),
    ("SiteC", 2012, "riffle", "Lower", "StnFines", 9.0, -122.30, 47.40),
    ("SiteC", 2013, "riffle", "Lower", "StnFines", NAN, -122.30, 47.40),
    ("SiteD", 2010, "run", "Lower", "StnFines", 7.0, -122.40, 47.30),
    ("SiteD", 2011, "run", "Lower", "StnFines", 7.0, -122.40, 47.30),
    ("SiteD", 2012, "run", "Lower", "StnFines", 7.0, -122.40, 47.30),
]


@pytest.fixture
def raw_habitat():
    return pd.DataFrame(_ROWS, columns=[
        "SiteID", "Year", "HabType", "Watershed", "habvar", "habval", "Longitude", "Latitude",
    ])


@pytest.fixture
def habitat(raw_habitat):
    return normalize_habitat(raw_habitat)


@pytest.fixture
def prep(habitat):
    return build_trend_prep(habitat)
