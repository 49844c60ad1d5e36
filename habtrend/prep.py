"""Build the per-site trend-prep table from a habitat observation table.

Run: python -m habtrend.prep --habitat data/habitat.csv --out data/trend_prep.csv

The output is long-form (one row per site, variable, habitat type and year)
and is what ``habtrend.data.load_trend_prep`` reads back. A ``.sqlite`` or
``.db`` destination writes table ``trend_prep`` instead of a CSV.
"""

from __future__ import annotations

import argparse
import logging
import sqlite3
from pathlib import Path

import pandas as pd

from habtrend.data import build_trend_prep, iter_series, load_habitat, trend_prep_to_frame
from habtrend.paths import asset_path


def write_prep(df: pd.DataFrame, out: Path) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() in (".sqlite", ".db"):
        with sqlite3.connect(str(out)) as conn:
            df.to_sql("trend_prep", conn, if_exists="replace", index=False)
    else:
        df.to_csv(out, index=False)
    logging.getLogger(__name__).info("Wrote trend-prep table %s (%d rows)", out, len(df))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build the per-site trend-prep table from habitat observations.")
    parser.add_argument("--habitat", type=Path, default=None, help="Habitat table (CSV or SQLite); defaults to the configured path")
    parser.add_argument("--out", type=Path, default=None, help="Destination (CSV, or .sqlite/.db); defaults to the configured path")
    parser.add_argument("--dry-run", action="store_true", help="Report series counts without writing")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging verbosity")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper()))

    habitat_path = args.habitat if args.habitat is not None else asset_path("habitat")
    out_path = args.out if args.out is not None else asset_path("trend_prep")

    habitat = load_habitat(habitat_path)
    if habitat.empty:
        logging.getLogger(__name__).error("No habitat observations in %s", habitat_path)
        return 1
    prep = build_trend_prep(habitat)
    n_series = sum(1 for _ in iter_series(prep))
    if args.dry_run:
        print(f"Dry run: {len(prep)} site/variable pairs, {n_series} series from {habitat_path}")
        return 0
    df = trend_prep_to_frame(prep)
    write_prep(df, out_path)
    print(f"Trend-prep table written to {out_path} ({n_series} series, {len(df)} rows).")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
