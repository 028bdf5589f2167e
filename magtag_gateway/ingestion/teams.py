"""NHL stats API team id to nickname mapping."""

from types import MappingProxyType
from typing import Mapping

SHARKS_ID = 28

TEAM_NICKNAMES: Mapping[int, str] = MappingProxyType(
    {
        1: "Devils",
        2: "Islanders",
        3: "Rangers",
        4: "Flyers",
        5: "Penguins",
        6: "Bruins",
        7: "Sabres",
        8: "Canadiens",
        9: "Senators",
        10: "Maple Leafs",
        12: "Hurricanes",
        13: "Panthers",
        14: "Lightning",
        15: "Capitals",
        16: "Blackhawks",
        17: "Red Wings",
        18: "Predators",
        19: "Blues",
        20: "Flames",
        21: "Avalanche",
        22: "Oilers",
        23: "Canucks",
        24: "Ducks",
        25: "Stars",
        26: "Kings",
        28: "Sharks",
        29: "Blue Jackets",
        30: "Wild",
        52: "Jets",
        53: "Coyotes",
        54: "Golden Knights",
        55: "Kraken",
    }
)


def team_nickname(team_id: int) -> str:
    """Return the nickname for ``team_id``, or an empty string when unknown."""
    return TEAM_NICKNAMES.get(team_id, "")
