from typing import Dict, Any, Iterable, Sequence

import numpy as np
import pandas as pd

REGULATION_SECONDS = 2400
OT_SECONDS = 300

# Descriptions read like "Zion Williamson made Dunk." or
# "RJ Barrett missed Three Point Jumper."
MADE_RE = r'\bmade\b'
ATTEMPT_RE = r'\b(?:made|missed)\b'
FREE_THROW_RE = r'free throw'
THREE_RE = r'three point'

SUMMARY_COLUMNS = [
    'fg_made', 'fg_taken', 'fg_pct',
    'ft_made', 'ft_taken', 'ft_pct',
    'three_made', 'three_taken', 'three_pct',
    'points',
]


def _pct(made: pd.Series, taken: pd.Series) -> pd.Series:
    """made / taken, NaN where nothing was taken."""
    return made / taken.where(taken > 0)


def classify_plays(df: pd.DataFrame) -> pd.DataFrame:
    """Flag shot attempts, makes and free throws from the play description."""
    desc = df['description'].fillna('').astype(str)
    attempt = desc.str.contains(ATTEMPT_RE, case=False, regex=True)
    made = desc.str.contains(MADE_RE, case=False, regex=True)
    free_throw = attempt & desc.str.contains(FREE_THROW_RE, case=False, regex=True)
    three = attempt & ~free_throw & desc.str.contains(THREE_RE, case=False, regex=True)

    return df.assign(
        shot_attempt=attempt & ~free_throw,
        shot_made=made & ~free_throw,
        free_throw=free_throw,
        ft_made=made & free_throw,
        three_point=three,
        three_made=made & three,
    ).assign(
        points_scored=lambda d: np.select(
            [d['three_made'], d['shot_made'], d['ft_made']],
            [3, 2, 1],
            default=0,
        )
    )


def _aggregate(df: pd.DataFrame, by: Sequence[str]) -> pd.DataFrame:
    return (
        df
        .groupby(list(by), as_index=False, dropna=False)
        .agg(
            fg_made=('shot_made', 'sum'),
            fg_taken=('shot_attempt', 'sum'),
            ft_made=('ft_made', 'sum'),
            ft_taken=('free_throw', 'sum'),
            three_made=('three_made', 'sum'),
            three_taken=('three_point', 'sum'),
            points=('points_scored', 'sum'),
        )
        .assign(
            fg_pct=lambda d: _pct(d['fg_made'], d['fg_taken']),
            ft_pct=lambda d: _pct(d['ft_made'], d['ft_taken']),
            three_pct=lambda d: _pct(d['three_made'], d['three_taken']),
        )
    )


def shooting_summary(df: pd.DataFrame, by: Iterable[str] = ('game_id', 'team')) -> pd.DataFrame:
    """Field goal and free throw makes, attempts and percentages per group.

    Only shot attempts and free throws are counted, so period markers,
    rebounds and timeouts never add rows. Such plays can still fall in a
    group with an empty team if the feed leaves the team off.
    """
    by = list(by)
    return (
        df
        .pipe(classify_plays)
        .loc[lambda d: d['shot_attempt'] | d['free_throw']]
        .pipe(_aggregate, by)
        .loc[:, by + SUMMARY_COLUMNS]
        .sort_values(by)
        .reset_index(drop=True)
    )


def shooting_by_half(df: pd.DataFrame) -> pd.DataFrame:
    return shooting_summary(df, by=('game_id', 'half', 'team'))


def player_points_by_half(df: pd.DataFrame, player: str) -> pd.DataFrame:
    """Points and shooting for one player in each half of each game.

    Plays are attributed to the player whose name opens the description.
    Needs the joined table (a 'date' column).
    """
    by = ['game_id', 'half', 'date']
    return (
        df
        .loc[lambda d: d['description'].fillna('').str.startswith(player)]
        .pipe(classify_plays)
        .pipe(_aggregate, by)
        .loc[:, by + ['points', 'fg_made', 'fg_taken', 'ft_made', 'ft_taken']]
        .assign(player=player)
        .sort_values(['date', 'half'])
        .reset_index(drop=True)
    )


def win_prob_timeline(df: pd.DataFrame) -> pd.DataFrame:
    """Add seconds elapsed since tip-off; each overtime adds five minutes."""
    return (
        df
        .assign(
            secs_elapsed=lambda d: (
                REGULATION_SECONDS
                + OT_SECONDS * (d['half'] - 2).clip(lower=0)
                - d['secs_remaining']
            )
        )
        .sort_values(['game_id', 'play_id'])
        .reset_index(drop=True)
    )


def game_summary_table(df: pd.DataFrame) -> Dict[str, Any]:
    """Headline numbers for the loaded games."""
    if df.empty:
        return {"error": "No data available"}

    finals = df.sort_values('play_id').groupby('game_id').tail(1)
    summary = {
        "games": df['game_id'].nunique(),
        "plays": len(df),
        "avg_total_points": (finals['home_score'] + finals['away_score']).mean(),
        "largest_final_margin": finals['score_diff'].abs().max(),
        "largest_home_lead": df['score_diff'].max(),
        "largest_away_lead": -df['score_diff'].min(),
    }

    shooting = shooting_summary(df)
    if not shooting.empty:
        summary.update({
            "avg_fg_pct": shooting['fg_pct'].mean(),
            "avg_ft_pct": shooting['ft_pct'].mean(),
            "best_fg_pct": shooting['fg_pct'].max(),
        })

    return summary
