import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import os
from typing import Optional

from export_utils import PBP_CSV, load_pbp_csv
from report_data import (
    game_summary_table,
    player_points_by_half,
    shooting_summary,
    win_prob_timeline,
)


class HoopsVisualizer:
    """Create charts from joined play-by-play data."""

    def __init__(self):
        plt.style.use('default')
        sns.set_palette("husl")

    def _finish(self, ax, save_path: Optional[str], show: bool):
        ax.grid(True, alpha=0.3)
        plt.tight_layout()
        if save_path:
            ax.figure.savefig(save_path, dpi=150)
            print(f"Chart saved to: {save_path}")
        if show:
            plt.show()
        return ax

    def plot_shooting_scatter(self, summary: pd.DataFrame, title: str = "FG% vs FT%",
                              save_path: Optional[str] = None, show: bool = True):
        """Scatter of field goal vs free throw percentage, one point per game and team."""
        data = summary.dropna(subset=['fg_pct', 'ft_pct']) if not summary.empty else summary
        if data.empty:
            print("No shooting data available for plotting")
            return None

        fig, ax = plt.subplots(figsize=(10, 7))
        sns.scatterplot(data=data, x='fg_pct', y='ft_pct', hue='team', s=120,
                        edgecolor='black', ax=ax)
        ax.set_title(title, fontsize=16, fontweight='bold')
        ax.set_xlabel('Field Goal %', fontsize=12)
        ax.set_ylabel('Free Throw %', fontsize=12)
        return self._finish(ax, save_path, show)

    def plot_win_probability(self, timeline: pd.DataFrame, title: str = "Home Win Probability",
                             save_path: Optional[str] = None, show: bool = True):
        """Win probability over game time, one line per game."""
        if timeline.empty or 'win_prob' not in timeline.columns:
            print("No win probability data available for plotting")
            return None

        fig, ax = plt.subplots(figsize=(14, 6))
        sns.lineplot(data=timeline, x='secs_elapsed', y='win_prob', hue='game_id',
                     estimator=None, ax=ax)
        ax.axhline(y=0.5, color='gray', linestyle='--', alpha=0.7)
        ax.axvline(x=1200, color='black', linestyle=':', alpha=0.5, label='Halftime')
        ax.set_ylim(0, 1)
        ax.set_title(title, fontsize=16, fontweight='bold')
        ax.set_xlabel('Seconds Elapsed', fontsize=12)
        ax.set_ylabel('Win Probability', fontsize=12)
        ax.legend()
        return self._finish(ax, save_path, show)

    def plot_score_differential(self, timeline: pd.DataFrame, title: str = "Score Differential",
                                save_path: Optional[str] = None, show: bool = True):
        if timeline.empty:
            print("No play-by-play data available for plotting")
            return None

        fig, ax = plt.subplots(figsize=(14, 6))
        sns.lineplot(data=timeline, x='secs_elapsed', y='score_diff', hue='game_id',
                     estimator=None, ax=ax)
        ax.axhline(y=0, color='gray', linestyle='--', alpha=0.7)
        ax.set_title(title, fontsize=16, fontweight='bold')
        ax.set_xlabel('Seconds Elapsed', fontsize=12)
        ax.set_ylabel('Home - Away', fontsize=12)
        return self._finish(ax, save_path, show)

    def plot_player_points(self, player_df: pd.DataFrame, player: str,
                           save_path: Optional[str] = None, show: bool = True):
        """Points per half across game dates for one player."""
        if player_df.empty:
            print(f"No plays found for {player}")
            return None

        data = player_df.assign(half=player_df['half'].astype(str))
        fig, ax = plt.subplots(figsize=(12, 6))
        sns.lineplot(data=data, x='date', y='points', hue='half', marker='o', ax=ax)
        ax.set_title(f"{player} - Points by Half", fontsize=16, fontweight='bold')
        ax.set_xlabel('Date', fontsize=12)
        ax.set_ylabel('Points in Half', fontsize=12)
        plt.setp(ax.get_xticklabels(), rotation=45)
        return self._finish(ax, save_path, show)


def main():
    """Load the exported play-by-play and draw the walkthrough charts."""
    if not os.path.exists(PBP_CSV):
        print("No data file found. Please run export_all_csvs.py first.")
        return

    print(f"Loading data from {PBP_CSV}")
    df = load_pbp_csv(PBP_CSV)
    print(f"Loaded {len(df)} plays from {df['game_id'].nunique()} games")

    visualizer = HoopsVisualizer()
    timeline = win_prob_timeline(df)
    visualizer.plot_shooting_scatter(shooting_summary(df))
    visualizer.plot_win_probability(timeline)
    visualizer.plot_score_differential(timeline)

    player = "Zion Williamson"
    visualizer.plot_player_points(player_points_by_half(df, player), player)

    summary = game_summary_table(df)
    print("\n" + "=" * 50)
    print("GAME SUMMARY")
    print("=" * 50)
    for key, value in summary.items():
        if isinstance(value, float):
            print(f"{key.replace('_', ' ').title()}: {value:.2f}")
        else:
            print(f"{key.replace('_', ' ').title()}: {value}")


if __name__ == "__main__":
    main()
