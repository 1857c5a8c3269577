from __future__ import annotations
from typing import Any
import os

import pandas as pd


DATA_DIR = os.environ.get("HOOPS_DATA_DIR", "Data")
PBP_CSV = os.path.join(DATA_DIR, "pbp_with_dates.csv")


def normalize_key(s: Any) -> str:
    return str(s or '').strip().lower().replace(' ', '_').replace('-', '_')


def clock_to_seconds(val: Any) -> Any:
    if val is None or val == '':
        return ''
    if isinstance(val, (int, float)):
        return int(val)
    s = str(val)
    if ':' in s:
        mm, ss = s.split(':', 1)
        return int(mm or 0) * 60 + int(float(ss or 0))
    return int(float(s))


def join_game_dates(pbp: pd.DataFrame, dates: pd.DataFrame) -> pd.DataFrame:
    """Left join game dates onto play-by-play by game id.

    Keys are compared as strings so ids read back from CSV still match.
    """
    return (
        pbp
        .assign(game_id=lambda d: d['game_id'].astype(str))
        .merge(
            dates.assign(game_id=lambda d: d['game_id'].astype(str)),
            on='game_id',
            how='left',
        )
    )


def write_pbp_csv(df: pd.DataFrame, path: str = PBP_CSV) -> str:
    """Write the joined play-by-play table, replacing any earlier export."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    df.to_csv(path, index=False, date_format='%Y-%m-%d')
    print(f"Saved to: {path}")
    print(f"Shape: {df.shape}")
    return path


def load_pbp_csv(path: str = PBP_CSV) -> pd.DataFrame:
    """Read an exported play-by-play CSV back into a DataFrame."""
    df = pd.read_csv(path, dtype={'game_id': str}, keep_default_na=True)
    if 'date' in df.columns:
        df['date'] = pd.to_datetime(df['date'])
    for col in ('description', 'team', 'home', 'away', 'time_remaining_half'):
        if col in df.columns:
            df[col] = df[col].fillna('')
    return df
