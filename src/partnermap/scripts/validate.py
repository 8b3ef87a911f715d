# File: partnermap/scripts/validate.py
from typing import Tuple
import pandas as pd

REJECT_COL = "_reject_reason"

def basic_validate(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split into (valid, rejects) with reason codes.

    Only the point is checked; every other field may be blank.
    """
    df = df.copy()
    df[REJECT_COL] = ""

    # Coordinate bounds
    lon = pd.to_numeric(df["longitude"], errors="coerce")
    lat = pd.to_numeric(df["latitude"], errors="coerce")
    df.loc[lon.isna() | (lon < -180) | (lon > 180), REJECT_COL] += "bad:longitude;"
    df.loc[lat.isna() | (lat < -90) | (lat > 90), REJECT_COL] += "bad:latitude;"

    rejects = df[df[REJECT_COL] != ""].copy()
    valid = df[df[REJECT_COL] == ""].drop(columns=[REJECT_COL])
    valid["longitude"] = lon[valid.index].astype(float)
    valid["latitude"] = lat[valid.index].astype(float)

    return valid, rejects
