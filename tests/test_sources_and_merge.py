from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from magtag_gateway.status.engine import (
    LONG_SLEEP_SECONDS,
    DisplayPayload,
    default_payload,
)
from magtag_gateway.status.merge import select_earliest
from magtag_gateway.status.sources import (
    DatedEvent,
    ScheduledOpponent,
    resolve_dated_events,
    resolve_secondary_schedule,
)

VENUE = timezone(timedelta(hours=-8))
NOW = datetime(2021, 3, 19, 20, 0, tzinfo=timezone.utc)


def _payload(top: str, instant: datetime | None) -> DisplayPayload:
    return DisplayPayload(
        top=top,
        middle="",
        bottom="",
        current_time="12:00PM",
        sleep_seconds=60,
        event_instant=instant,
    )


class DatedEventSourceTests(unittest.TestCase):
    def test_picks_first_event_strictly_after_now(self) -> None:
        events = [
            DatedEvent(instant=NOW - timedelta(days=1), name="Past"),
            DatedEvent(instant=NOW, name="Right Now"),
            DatedEvent(instant=datetime(2021, 3, 20, 3, 0, tzinfo=timezone.utc), name="Watch Party"),
            DatedEvent(instant=NOW + timedelta(days=9), name="Later"),
        ]

        payload = resolve_dated_events(events, NOW, VENUE, "Coming Up")

        self.assertEqual("Coming Up", payload.top)
        self.assertEqual("Watch Party", payload.middle)
        self.assertEqual("Today @ 7:00PM", payload.bottom)
        self.assertEqual("12:00PM", payload.current_time)
        self.assertEqual(LONG_SLEEP_SECONDS, payload.sleep_seconds)

    def test_nothing_upcoming(self) -> None:
        events = [DatedEvent(instant=NOW - timedelta(hours=1), name="Past")]

        self.assertIsNone(resolve_dated_events(events, NOW, VENUE, "Coming Up"))
        self.assertIsNone(resolve_dated_events([], NOW, VENUE, "Coming Up"))


class SecondaryScheduleSourceTests(unittest.TestCase):
    def test_away_game(self) -> None:
        schedule = [
            ScheduledOpponent(
                instant=datetime(2021, 3, 21, 1, 0, tzinfo=timezone.utc),
                opponent="Bakersfield Condors",
                home=False,
            )
        ]

        payload = resolve_secondary_schedule(schedule, NOW, VENUE, "Barracuda")

        self.assertEqual("Barracuda Next Up", payload.top)
        self.assertEqual("@ Bakersfield Condors", payload.middle)
        self.assertEqual("Mar 20 @ 5:00PM", payload.bottom)

    def test_home_game_within_near_horizon(self) -> None:
        schedule = [
            ScheduledOpponent(instant=NOW + timedelta(minutes=10), opponent="Stockton Heat")
        ]

        payload = resolve_secondary_schedule(schedule, NOW, VENUE, "Barracuda")

        self.assertEqual("vs Stockton Heat", payload.middle)
        self.assertEqual(60, payload.sleep_seconds)


class SelectEarliestTests(unittest.TestCase):
    default = default_payload("Sharks", NOW, VENUE)

    def test_earliest_wins(self) -> None:
        primary = _payload("primary", NOW + timedelta(days=2))
        secondary = _payload("secondary", NOW + timedelta(days=1))

        self.assertIs(secondary, select_earliest(primary, secondary, default=self.default))

    def test_ties_keep_first(self) -> None:
        primary = _payload("primary", NOW)
        secondary = _payload("secondary", NOW)

        self.assertIs(primary, select_earliest(primary, secondary, default=self.default))

    def test_missing_sources_are_skipped(self) -> None:
        secondary = _payload("secondary", NOW + timedelta(days=1))

        self.assertIs(secondary, select_earliest(None, secondary, default=self.default))
        self.assertIs(secondary, select_earliest(self.default, secondary, default=self.default))

    def test_nothing_available_returns_default(self) -> None:
        self.assertIs(self.default, select_earliest(None, None, default=self.default))
        self.assertIs(self.default, select_earliest(default=self.default))


if __name__ == "__main__":
    unittest.main()
