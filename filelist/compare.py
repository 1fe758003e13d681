"""
Compare two inventories produced by `filelist`:

    filelist-compare OLD.tsv NEW.tsv

Prints the added / removed / changed files as TSV.
Exit 0 when identical, 1 when they differ, 2 on usage error.
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from filelist.formatter import HEADER

KEY = "Name"
COMPARED = ["Hash", "File Size"]
RESULT_COLUMNS = ["Name", "Status", "Old Hash", "New Hash"]


def load_inventory(path) -> pd.DataFrame:
    """Read a TSV inventory; every column as str, empty cells as ''."""
    p = Path(path)
    if p.stat().st_size == 0:
        return pd.DataFrame(columns=HEADER, dtype=str)
    try:
        df = pd.read_csv(p, sep="\t", dtype=str, keep_default_na=False, quoting=csv.QUOTE_NONE)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=HEADER, dtype=str)
    missing = [c for c in (KEY, *COMPARED) if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}")
    return df


def compare_inventories(old: pd.DataFrame, new: pd.DataFrame) -> pd.DataFrame:
    m = old[[KEY, *COMPARED]].merge(
        new[[KEY, *COMPARED]], on=KEY, how="outer", suffixes=("_old", "_new"), indicator=True
    )
    status = pd.Series("", index=m.index, dtype=object)
    status.loc[m["_merge"] == "left_only"] = "removed"
    status.loc[m["_merge"] == "right_only"] = "added"
    both = m["_merge"] == "both"
    differs = (m["Hash_old"] != m["Hash_new"]) | (m["File Size_old"] != m["File Size_new"])
    status.loc[both & differs] = "changed"

    out = pd.DataFrame(
        {
            "Name": m[KEY],
            "Status": status,
            "Old Hash": m["Hash_old"].fillna(""),
            "New Hash": m["Hash_new"].fillna(""),
        }
    )
    out = out[out["Status"] != ""]
    return out.sort_values("Name", kind="stable").reset_index(drop=True)[RESULT_COLUMNS]


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="filelist-compare", description="Diff two file inventories")
    ap.add_argument("old", type=Path)
    ap.add_argument("new", type=Path)
    try:
        args = ap.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        diff = compare_inventories(load_inventory(args.old), load_inventory(args.new))
    except (OSError, ValueError) as e:
        print(f"[compare] {e}", file=sys.stderr)
        return 2

    if diff.empty:
        return 0
    sys.stdout.write(diff.to_csv(sep="\t", index=False, lineterminator="\n"))
    return 1


if __name__ == "__main__":
    sys.exit(main())
