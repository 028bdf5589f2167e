from __future__ import annotations

import json
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import requests

from magtag_gateway.ingestion.events import fetch_dated_events, parse_dated_events
from magtag_gateway.ingestion.nhl_client import fetch_json, fetch_next, fetch_today
from magtag_gateway.ingestion.nhl_parser import (
    MalformedScheduleError,
    parse_next,
    parse_today,
)
from magtag_gateway.ingestion.schema import GamePhase
from magtag_gateway.ingestion.scrape import fetch_secondary_schedule, parse_schedule_html
from magtag_gateway.ingestion.teams import SHARKS_ID, team_nickname
from magtag_gateway.settings import GatewaySettings

FIXTURES = Path(__file__).parent / "fixtures"


def _load(name: str) -> dict:
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


class _FakeResponse:
    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text


class NhlParserTests(unittest.TestCase):
    def test_parse_next_fixture(self) -> None:
        game = parse_next(_load("next_game.json"))

        self.assertIsNotNone(game)
        self.assertEqual(2020020531, game.game_id)
        self.assertEqual(datetime(2021, 3, 21, 18, 0, tzinfo=timezone.utc), game.start_time)
        self.assertEqual("Pittsburgh Penguins", game.home.name)
        self.assertEqual(SHARKS_ID, game.away.id)
        self.assertIs(GamePhase.PREVIEW, game.phase)
        self.assertFalse(game.pregame)
        self.assertFalse(game.time_tbd)
        self.assertIsNone(game.clock)

    def test_parse_today_intermission_fixture(self) -> None:
        game = parse_today(_load("today_intermission.json"))

        self.assertIs(GamePhase.LIVE, game.phase)
        self.assertEqual("1st", game.clock.ordinal)
        self.assertEqual("END", game.clock.time_remaining)
        self.assertTrue(game.clock.intermission.active)
        self.assertEqual(761, game.clock.intermission.seconds_remaining)

    def test_parse_today_empty(self) -> None:
        self.assertIsNone(parse_today(_load("today_empty.json")))

    def test_parse_next_without_teams(self) -> None:
        self.assertIsNone(parse_next({"teams": []}))
        self.assertIsNone(parse_next({"teams": [{"id": 28}]}))

    def test_pregame_detailed_state(self) -> None:
        document = _load("next_game.json")
        game_json = document["teams"][0]["nextGameSchedule"]["dates"][0]["games"][0]
        game_json["status"]["detailedState"] = "Pre-Game"
        game_json["status"]["startTimeTBD"] = True

        game = parse_next(document)

        self.assertTrue(game.pregame)
        self.assertTrue(game.time_tbd)

    def test_unknown_game_state_is_malformed(self) -> None:
        document = _load("today_intermission.json")
        document["dates"][0]["games"][0]["status"]["abstractGameState"] = "Suspended"

        with self.assertRaises(MalformedScheduleError):
            parse_today(document)

    def test_bad_game_date_is_malformed(self) -> None:
        document = _load("today_intermission.json")
        document["dates"][0]["games"][0]["gameDate"] = "tonight"

        with self.assertRaises(MalformedScheduleError):
            parse_today(document)

    def test_game_date_without_offset_is_malformed(self) -> None:
        document = _load("today_intermission.json")
        document["dates"][0]["games"][0]["gameDate"] = "2021-03-19T18:00:00"

        with self.assertRaises(MalformedScheduleError):
            parse_today(document)

    def test_missing_team_id_is_malformed(self) -> None:

        document = _load("today_intermission.json")
        del document["dates"][0]["games"][0]["teams"]["home"]["team"]["id"]

        with self.assertRaises(MalformedScheduleError):
            parse_today(document)

    def test_non_object_document_is_malformed(self) -> None:
        with self.assertRaises(MalformedScheduleError):
            parse_today(["not", "a", "schedule"])
        with self.assertRaises(MalformedScheduleError):
            parse_next({"teams": "nope"})


class NhlClientTests(unittest.TestCase):
    def test_fetch_json_retries_server_errors(self) -> None:
        with patch(
            "magtag_gateway.ingestion.nhl_client._SESSION.get",
            side_effect=[
                _FakeResponse(503, "busy"),
                _FakeResponse(200, '{"totalItems": 0}'),
            ],
        ) as mock_get, patch("magtag_gateway.ingestion.nhl_client.time.sleep") as mock_sleep:
            payload = fetch_json("https://example.test/schedule", timeout=5)

        self.assertEqual({"totalItems": 0}, payload)
        self.assertEqual(2, mock_get.call_count)
        self.assertEqual((0.5,), mock_sleep.call_args.args)

    def test_fetch_json_gives_up_after_retries(self) -> None:
        with patch(
            "magtag_gateway.ingestion.nhl_client._SESSION.get",
            side_effect=requests.ConnectionError("down"),
        ) as mock_get, patch("magtag_gateway.ingestion.nhl_client.time.sleep") as mock_sleep:
            payload = fetch_json("https://example.test/schedule", timeout=5)

        self.assertIsNone(payload)
        self.assertEqual(3, mock_get.call_count)
        self.assertEqual(2, mock_sleep.call_count)

    def test_fetch_json_client_error_is_not_retried(self) -> None:
        with patch(
            "magtag_gateway.ingestion.nhl_client._SESSION.get",
            return_value=_FakeResponse(404, "missing"),
        ) as mock_get:
            self.assertIsNone(fetch_json("https://example.test/teams/99", timeout=5))

        self.assertEqual(1, mock_get.call_count)

    def test_fetch_json_invalid_body(self) -> None:
        with patch(
            "magtag_gateway.ingestion.nhl_client._SESSION.get",
            return_value=_FakeResponse(200, "<html>"),
        ):
            self.assertIsNone(fetch_json("https://example.test/schedule", timeout=5))

    def test_fetch_today_builds_schedule_request(self) -> None:
        settings = GatewaySettings(nhl_api_base="https://nhl.test/api/v1", http_timeout_seconds=3)
        with patch(
            "magtag_gateway.ingestion.nhl_client._SESSION.get",
            return_value=_FakeResponse(200, "{}"),
        ) as mock_get:
            fetch_today(28, settings)

        self.assertEqual(("https://nhl.test/api/v1/schedule",), mock_get.call_args.args)
        self.assertEqual(
            {"expand": "schedule.linescore", "teamId": 28},
            mock_get.call_args.kwargs["params"],
        )
        self.assertEqual(3, mock_get.call_args.kwargs["timeout"])

    def test_files_take_precedence_over_network(self) -> None:
        settings = GatewaySettings(
            today_file=str(FIXTURES / "today_empty.json"),
            next_file=str(FIXTURES / "next_game.json"),
        )
        with patch("magtag_gateway.ingestion.nhl_client._SESSION.get") as mock_get:
            today = fetch_today(28, settings)
            next_doc = fetch_next(28, settings)

        mock_get.assert_not_called()
        self.assertEqual(0, today["totalItems"])
        self.assertEqual(28, next_doc["teams"][0]["id"])

    def test_missing_file_is_absent(self) -> None:
        settings = GatewaySettings(today_file=str(FIXTURES / "nope.json"))
        self.assertIsNone(fetch_today(28, settings))


class DatedEventTests(unittest.TestCase):
    def test_parse_sorts_by_instant(self) -> None:
        events = parse_dated_events(
            [
                {"date": "2021-04-02T19:00:00-07:00", "name": "Fan Fest"},
                {"date": "2021-03-30T12:00:00Z", "name": "Draft Lottery"},
            ]
        )

        self.assertEqual(["Draft Lottery", "Fan Fest"], [event.name for event in events])

    def test_parse_rejects_bad_documents(self) -> None:
        with self.assertRaises(ValueError):
            parse_dated_events({"date": "2021-03-30T12:00:00Z"})
        with self.assertRaises(ValueError):
            parse_dated_events([{"date": "2021-03-30T12:00:00", "name": "No offset"}])
        with self.assertRaises(ValueError):
            parse_dated_events([{"name": "No date"}])

    def test_fetch_malformed_url_document_is_empty(self) -> None:
        settings = GatewaySettings(events_url="https://events.test/list.json")
        with patch(
            "magtag_gateway.ingestion.events.fetch_json",
            return_value={"unexpected": True},
        ):
            self.assertEqual([], fetch_dated_events(settings))

    def test_fetch_disabled(self) -> None:
        self.assertEqual([], fetch_dated_events(GatewaySettings()))


class SecondaryScheduleScrapeTests(unittest.TestCase):
    def test_parse_fixture(self) -> None:
        html = (FIXTURES / "secondary_schedule.html").read_text(encoding="utf-8")

        games = parse_schedule_html(html)

        self.assertEqual(
            ["Stockton Heat", "Bakersfield Condors", "Henderson Silver Knights"],
            [game.opponent for game in games],
        )
        self.assertEqual([True, False, True], [game.home for game in games])
        self.assertEqual(
            datetime(2021, 3, 21, 1, 0, tzinfo=timezone.utc),
            games[1].instant,
        )

    def test_parse_list_markup_and_dedupes(self) -> None:
        html = """
        <ul>
          <li><time datetime="2021-03-20T18:00:00-07:00"></time>
              <span class="opponent">at Ontario Reign</span></li>
          <li><time datetime="2021-03-20T18:00:00-07:00"></time>
              <span class="opponent">at Ontario Reign</span></li>
          <li><span class="opponent">vs. Iowa Wild</span></li>
        </ul>
        """

        games = parse_schedule_html(html)

        self.assertEqual(1, len(games))
        self.assertEqual("Ontario Reign", games[0].opponent)
        self.assertFalse(games[0].home)

    def test_fetch_from_url_failure_is_empty(self) -> None:
        settings = GatewaySettings(secondary_schedule_url="https://ahl.test/schedule")
        with patch("magtag_gateway.ingestion.scrape.fetch_text", return_value=None):
            self.assertEqual([], fetch_secondary_schedule(settings))

    def test_fetch_from_file(self) -> None:
        settings = GatewaySettings(
            secondary_schedule_file=str(FIXTURES / "secondary_schedule.html")
        )
        self.assertEqual(3, len(fetch_secondary_schedule(settings)))


class TeamDirectoryTests(unittest.TestCase):
    def test_nicknames(self) -> None:
        self.assertEqual("Sharks", team_nickname(SHARKS_ID))
        self.assertEqual("", team_nickname(11))


if __name__ == "__main__":
    unittest.main()
