import requests
import json
import pandas as pd
from bs4 import BeautifulSoup
import os
from typing import Dict, List, Optional

from export_utils import DATA_DIR, clock_to_seconds


class ESPNScraper:
    """ESPN scraper for men's college basketball play-by-play and game dates."""

    SUMMARY_URL = "https://site.api.espn.com/apis/site/v2/sports/basketball/mens-college-basketball/summary"
    MATCHUP_URL = "https://www.espn.com/mens-college-basketball/matchup/_/gameId"
    RECAP_URL = "https://www.espn.com/mens-college-basketball/recap/_/gameId"

    # Date/time line on the matchup page, e.g. "7:00 PM, March 22, 2019"
    DATE_SELECTOR = "div.GameInfo__Meta > span"

    # Duke, 2019 NCAA tournament run
    GAME_IDS = ["401123376", "401123398", "401123417", "401123420", "401123427"]

    HALF_SECONDS = 1200

    PBP_COLUMNS = [
        'game_id', 'play_id', 'half', 'time_remaining_half', 'secs_remaining',
        'home_score', 'away_score', 'score_diff', 'description', 'win_prob',
        'home_favored_by', 'home', 'away', 'team',
    ]

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'
        })

    def get_pbp_game(self, game_id: str) -> pd.DataFrame:
        """
        Fetch play-by-play for a single game.

        Args:
            game_id: ESPN event id

        Returns:
            DataFrame with one row per play
        """
        df = self.parse_pbp_to_dataframe(self.fetch_summary(game_id), game_id)
        print(f"Successfully fetched {len(df)} plays")
        return df

    def fetch_summary(self, game_id: str) -> Dict:
        """Raw summary feed JSON for one game."""
        print(f"Fetching play-by-play for game {game_id}...")
        response = self.session.get(self.SUMMARY_URL, params={'event': game_id})
        response.raise_for_status()
        return response.json()

    def get_pbp_games(self, game_ids: Optional[List[str]] = None) -> pd.DataFrame:
        """Fetch play-by-play for several games, one request at a time."""
        if game_ids is None:
            game_ids = self.GAME_IDS
        frames = [self.get_pbp_game(gid) for gid in game_ids]
        if not frames:
            return pd.DataFrame(columns=self.PBP_COLUMNS)
        return pd.concat(frames, ignore_index=True)

    def parse_pbp_to_dataframe(self, data: Dict, game_id: str) -> pd.DataFrame:
        """
        Parse a summary feed response into the play-by-play table.

        Args:
            data: Decoded JSON from the summary feed
            game_id: ESPN event id the response belongs to

        Returns:
            DataFrame with game_id, play_id, half, clock, scores,
            description, win_prob and home_favored_by
        """
        competitors = data.get('header', {}).get('competitions', [{}])[0].get('competitors', [])
        teams = {'home': '', 'away': ''}
        team_names = {}
        for comp in competitors:
            team = comp.get('team', {})
            name = team.get('location') or team.get('displayName') or ''
            teams[comp.get('homeAway', '')] = name
            team_names[str(team.get('id', ''))] = name

        # Feed reports win probability only for some plays
        win_probs = {
            str(wp.get('playId')): wp.get('homeWinPercentage')
            for wp in data.get('winprobability', []) or []
        }

        # ESPN spreads are quoted for the home side: -5.5 means home is favored by 5.5
        pickcenter = data.get('pickcenter') or []
        spread = pickcenter[0].get('spread') if pickcenter else None
        home_favored_by = -float(spread) if spread is not None else float('nan')

        parsed_plays = []
        for i, play in enumerate(data.get('plays', []) or [], start=1):
            half = play.get('period', {}).get('number')
            clock = play.get('clock', {}).get('displayValue', '')
            home_score = int(play.get('homeScore', 0))
            away_score = int(play.get('awayScore', 0))

            parsed_plays.append({
                'game_id': str(game_id),
                'play_id': i,
                'half': half,
                'time_remaining_half': clock,
                'secs_remaining': self._secs_remaining(half, clock),
                'home_score': home_score,
                'away_score': away_score,
                'score_diff': home_score - away_score,
                'description': (play.get('text') or '').strip(),
                'win_prob': win_probs.get(str(play.get('id'))),
                'home_favored_by': home_favored_by,
                'home': teams['home'],
                'away': teams['away'],
                'team': team_names.get(str(play.get('team', {}).get('id', '')), ''),
            })

        df = pd.DataFrame(parsed_plays, columns=self.PBP_COLUMNS)
        if not df.empty:
            df['win_prob'] = pd.to_numeric(df['win_prob']).ffill()
        return df

    def _secs_remaining(self, half: Optional[int], clock: str) -> Optional[int]:
        """Seconds left in regulation, or in the current overtime."""
        if half is None or not clock:
            return None
        # Under a minute the clock reads "45.2"
        secs = clock_to_seconds(clock)
        if half == 1:
            return secs + self.HALF_SECONDS
        return secs

    def get_game_date(self, game_id: str) -> pd.Timestamp:
        """Scrape the calendar date of a game from its matchup page."""
        url = f"{self.MATCHUP_URL}/{game_id}"
        print(f"Fetching date for game {game_id}...")
        response = self.session.get(url)
        response.raise_for_status()
        return self.parse_game_date(response.text)

    def parse_game_date(self, html: str) -> pd.Timestamp:
        soup = BeautifulSoup(html, 'html.parser')
        node = soup.select_one(self.DATE_SELECTOR)
        if node is None:
            raise ValueError(f"No date found on matchup page (selector {self.DATE_SELECTOR!r})")

        text = node.get_text(strip=True)
        # "7:00 PM, March 22, 2019" -> "March 22, 2019"
        if ',' in text and ':' in text.split(',')[0]:
            text = text.split(',', 1)[1].strip()
        return pd.to_datetime(text).normalize()

    def get_game_dates(self, game_ids: Optional[List[str]] = None) -> pd.DataFrame:
        """One row per game id with its parsed date."""
        if game_ids is None:
            game_ids = self.GAME_IDS
        rows = [{'game_id': str(gid), 'date': self.get_game_date(gid)} for gid in game_ids]
        return pd.DataFrame(rows, columns=['game_id', 'date'])

    def get_game_recap(self, game_id: str) -> Dict:
        url = f"{self.RECAP_URL}/{game_id}"
        print(f"Fetching recap for game {game_id}...")
        response = self.session.get(url)
        response.raise_for_status()
        recap = self.parse_game_recap(response.text)
        recap['game_id'] = str(game_id)
        return recap

    def parse_game_recap(self, html: str) -> Dict:
        """Pull the headline and first paragraph from a recap page."""
        soup = BeautifulSoup(html, 'html.parser')
        headline = soup.select_one('h1')
        lede = soup.select_one('div.Story__Body p')
        return {
            'headline': headline.get_text(strip=True) if headline else '',
            'lede': lede.get_text(strip=True) if lede else '',
        }

    def get_game_recaps(self, game_ids: Optional[List[str]] = None) -> pd.DataFrame:
        """One row per game id with its recap headline and lede."""
        if game_ids is None:
            game_ids = self.GAME_IDS
        rows = [self.get_game_recap(gid) for gid in game_ids]
        return pd.DataFrame(rows, columns=['game_id', 'headline', 'lede'])

    def save_raw_data(self, data: Dict, game_id: str, directory: Optional[str] = None) -> str:
        """
        Save a raw summary feed response under the data directory.

        Args:
            data: Decoded summary feed, as returned by fetch_summary
            game_id: ESPN event id
            directory: Target folder, defaults to <DATA_DIR>/raw

        Returns:
            Path to saved file
        """
        directory = directory or os.path.join(DATA_DIR, 'raw')
        os.makedirs(directory, exist_ok=True)
        filepath = os.path.join(directory, f"summary_{game_id}.json")

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        print(f"Raw summary for game {game_id} saved to: {filepath} ({len(data.get('plays', []) or [])} plays)")
        return filepath


def main():
    """Fetch the sample games and show what came back."""
    scraper = ESPNScraper()

    # Keep one untouched feed response around for inspecting field names
    first_id = scraper.GAME_IDS[0]
    raw = scraper.fetch_summary(first_id)
    scraper.save_raw_data(raw, first_id)

    pbp = scraper.get_pbp_games()
    print(f"\nPlay-by-play DataFrame shape: {pbp.shape}")
    print("\nFirst few plays:")
    print(pbp.head())

    dates = scraper.get_game_dates()
    print("\nGame dates:")
    print(dates)

    recaps = scraper.get_game_recaps()
    print("\n" + "=" * 50)
    print("Sample games:")
    for row in recaps.itertuples(index=False):
        print(f"Game {row.game_id}: {row.headline}")


if __name__ == "__main__":
    main()
