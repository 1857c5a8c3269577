import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest
import requests

from scraper import ESPNScraper


GAME_DATES = {
    "401123376": "March 22, 2019",
    "401123398": "March 24, 2019",
    "401123417": "March 29, 2019",
    "401123420": "March 31, 2019",
    "401123427": "April 6, 2019",
}

DUKE = {"id": "150", "location": "Duke", "displayName": "Duke Blue Devils"}
UCF = {"id": "2116", "location": "UCF", "displayName": "UCF Knights"}


def play(pid, period, clock, text, home, away, team=None):
    p = {
        "id": pid,
        "period": {"number": period},
        "clock": {"displayValue": clock},
        "text": text,
        "homeScore": home,
        "awayScore": away,
    }
    if team is not None:
        p["team"] = {"id": team["id"]}
    return p


def make_summary(spread="-13.5"):
    """Summary feed payload trimmed to the fields the scraper reads."""
    return {
        "header": {
            "competitions": [{
                "competitors": [
                    {"homeAway": "home", "team": DUKE},
                    {"homeAway": "away", "team": UCF},
                ]
            }]
        },
        "pickcenter": [{"provider": {"name": "consensus"}, "spread": spread}] if spread is not None else [],
        "winprobability": [
            {"playId": "1", "homeWinPercentage": 0.90},
            {"playId": "2", "homeWinPercentage": 0.92},
            {"playId": "4", "homeWinPercentage": 0.95},
            {"playId": "8", "homeWinPercentage": 0.90},
            {"playId": "10", "homeWinPercentage": 1.0},
        ],
        "plays": [
            play("1", 1, "20:00", "Jump Ball won by Duke", 0, 0, DUKE),
            play("2", 1, "19:40", "Zion Williamson made Dunk.", 2, 0, DUKE),
            play("3", 1, "19:20", "Aubrey Dawkins missed Three Point Jumper.", 2, 0, UCF),
            play("4", 1, "18:55", "RJ Barrett made Three Point Jumper. Assisted by Tre Jones.", 5, 0, DUKE),
            play("5", 1, "18:30", "Zion Williamson missed Free Throw.", 5, 0, DUKE),
            play("6", 1, "18:30", "Zion Williamson made Free Throw.", 6, 0, DUKE),
            play("7", 1, "0:00", "End of 1st half", 6, 0),
            play("8", 2, "19:30", "Tacko Fall made Layup.", 6, 2, UCF),
            play("9", 2, "45.2", "Zion Williamson made Jumper.", 8, 2, DUKE),
            play("10", 2, "0:00", "End of Game", 8, 2),
        ],
    }


def matchup_html(date_text):
    return f"""
    <html><body>
      <div class="GameInfo__Meta">
        <span>7:00 PM, {date_text}</span>
        <span>Coverage: CBS</span>
      </div>
    </body></html>
    """


RECAP_HTML = """
<html><body>
  <h1>Zion, Duke survive UCF scare</h1>
  <div class="Story__Body"><p>Duke held on in the final seconds.</p><p>More.</p></div>
</body></html>
"""


class FakeResponse:
    def __init__(self, payload=None, text="", status_code=200):
        self._payload = payload
        self.text = text
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Serves canned ESPN responses keyed by game id."""

    def __init__(self, missing=()):
        self.headers = {}
        self.calls = []
        self.missing = set(missing)

    def get(self, url, params=None):
        self.calls.append((url, params))
        if params and "event" in params:
            gid = params["event"]
            if gid in self.missing:
                return FakeResponse(status_code=404)
            return FakeResponse(payload=make_summary())
        gid = url.rstrip("/").rsplit("/", 1)[-1]
        if gid in self.missing:
            return FakeResponse(status_code=404)
        if "/recap/" in url:
            return FakeResponse(text=RECAP_HTML)
        return FakeResponse(text=matchup_html(GAME_DATES[gid]))


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def scraper(session):
    return ESPNScraper(session=session)


@pytest.fixture
def game_ids():
    return list(GAME_DATES)


@pytest.fixture
def pbp(scraper, game_ids):
    return scraper.get_pbp_games(game_ids)


@pytest.fixture
def joined(scraper, pbp, game_ids):
    from export_utils import join_game_dates
    return join_game_dates(pbp, scraper.get_game_dates(game_ids))


@pytest.fixture
def single_game():
    return ESPNScraper(session=FakeSession()).parse_pbp_to_dataframe(make_summary(), "401123376")


@pytest.fixture
def expected_dates():
    return {gid: pd.Timestamp(d) for gid, d in GAME_DATES.items()}
