import os
import argparse
from typing import List, Optional

import pandas as pd
import requests
import sys

# Discover repo root (script is in scripts/) early so we can add path before imports
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
from export_utils import PBP_CSV, join_game_dates, normalize_key, write_pbp_csv
from report_data import (
    game_summary_table,
    player_points_by_half,
    shooting_by_half,
    shooting_summary,
    win_prob_timeline,
)
from scraper import ESPNScraper


def chart_path(chart_dir: Optional[str], name: str) -> Optional[str]:
    if not chart_dir:
        return None
    os.makedirs(chart_dir, exist_ok=True)
    return os.path.join(chart_dir, f"{normalize_key(name)}.png")


def win_prob_title(recaps: pd.DataFrame) -> str:
    """Recap headline when charting a single game, generic title otherwise."""
    headlines = [h for h in recaps['headline'] if h]
    if len(recaps) == 1 and headlines:
        return headlines[0]
    return "Home Win Probability"


def run(game_ids: List[str], out: str, player: str, plots: bool = True,
        chart_dir: Optional[str] = None, scraper: Optional[ESPNScraper] = None):
    """Fetch, join, export, aggregate and plot the given games in order."""
    scraper = scraper or ESPNScraper()

    try:
        pbp = scraper.get_pbp_games(game_ids)
        dates = scraper.get_game_dates(game_ids)
        recaps = scraper.get_game_recaps(game_ids)
    except requests.exceptions.RequestException as e:
        raise SystemExit(f"Could not fetch ESPN data for games {', '.join(game_ids)}.\nOriginal error: {e}")

    joined = join_game_dates(pbp, dates)
    write_pbp_csv(joined, out)

    by_game = shooting_summary(joined)
    by_half = shooting_by_half(joined)
    player_df = player_points_by_half(joined, player)
    timeline = win_prob_timeline(joined)

    print("\nRecaps:")
    for row in recaps.itertuples(index=False):
        print(f"{row.game_id}: {row.headline}")

    print("\nShooting by game:")
    print(by_game.to_string(index=False))
    print("\nShooting by half:")
    print(by_half.to_string(index=False))
    print(f"\n{player} by half:")
    print(player_df.to_string(index=False))

    if plots:
        # Deferred: pulls in matplotlib
        from visualizer import HoopsVisualizer
        visualizer = HoopsVisualizer()
        show = chart_dir is None
        visualizer.plot_shooting_scatter(by_game, save_path=chart_path(chart_dir, "shooting_scatter"), show=show)
        visualizer.plot_win_probability(timeline, title=win_prob_title(recaps), save_path=chart_path(chart_dir, "win_probability"), show=show)
        visualizer.plot_score_differential(timeline, save_path=chart_path(chart_dir, "score_differential"), show=show)
        visualizer.plot_player_points(player_df, player, save_path=chart_path(chart_dir, f"{player} points"), show=show)

    summary = game_summary_table(joined)
    print("\n" + "=" * 50)
    for key, value in summary.items():
        if isinstance(value, float):
            print(f"{key.replace('_', ' ').title()}: {value:.2f}")
        else:
            print(f"{key.replace('_', ' ').title()}: {value}")

    return joined


def main():
    parser = argparse.ArgumentParser(description='Export ESPN play-by-play joined with game dates, then chart it')
    parser.add_argument('--game-id', action='append', dest='game_ids',
                        help='ESPN game id to include (repeatable). Defaults to the five sample games.')
    parser.add_argument('--out', type=str, default=PBP_CSV, help=f'Output CSV path (default {PBP_CSV})')
    parser.add_argument('--player', type=str, default='Zion Williamson', help='Player for the points-by-half chart')
    parser.add_argument('--no-plots', action='store_true', help='Skip chart rendering')
    parser.add_argument('--chart-dir', type=str, help='Save charts as PNG files here instead of showing them')
    args = parser.parse_args()

    game_ids = args.game_ids or ESPNScraper.GAME_IDS
    print(f"Processing {len(game_ids)} games…")
    run(game_ids, args.out, args.player, plots=not args.no_plots, chart_dir=args.chart_dir)


if __name__ == '__main__':
    main()
