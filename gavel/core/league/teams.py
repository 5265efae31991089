"""
Franchise data.

The ten franchises that take part in the auction, with their default
purse, aggression and squad-composition requirements.
"""

from dataclasses import dataclass
from typing import Optional

from gavel.core.enums import PlayerRole
from gavel.core.models import Team

DEFAULT_PURSE = 100.0

# Minimum players per role. Wicket-keeper batsmen count toward the
# wicket-keeper requirement, so they need no slots of their own.
DEFAULT_ROLE_NEEDS: dict[PlayerRole, int] = {
    PlayerRole.BATSMAN: 6,
    PlayerRole.BOWLER: 6,
    PlayerRole.ALL_ROUNDER: 2,
    PlayerRole.WICKET_KEEPER: 1,
    PlayerRole.WICKET_KEEPER_BATSMAN: 0,
}


@dataclass(frozen=True)
class FranchiseData:
    """Static data for a franchise."""
    id: str
    name: str
    aggression: int


FRANCHISES: list[FranchiseData] = [
    FranchiseData("mi", "Mumbai Indians", 70),
    FranchiseData("csk", "Chennai Super Kings", 65),
    FranchiseData("rcb", "Royal Challengers Bangalore", 75),
    FranchiseData("kkr", "Kolkata Knight Riders", 60),
    FranchiseData("dc", "Delhi Capitals", 65),
    FranchiseData("srh", "Sunrisers Hyderabad", 68),
    FranchiseData("rr", "Rajasthan Royals", 72),
    FranchiseData("pbks", "Punjab Kings", 70),
    FranchiseData("gt", "Gujarat Titans", 68),
    FranchiseData("lsg", "Lucknow Super Giants", 70),
]

FRANCHISES_BY_ID: dict[str, FranchiseData] = {f.id: f for f in FRANCHISES}


def create_team(data: FranchiseData, purse: float = DEFAULT_PURSE) -> Team:
    """Create a fresh Team (empty squad, default role needs) from franchise data."""
    return Team(
        id=data.id,
        name=data.name,
        purse=purse,
        role_needs=dict(DEFAULT_ROLE_NEEDS),
        aggression=data.aggression,
    )


def create_default_teams(purse: float = DEFAULT_PURSE) -> list[Team]:
    """Create all ten franchises. Each call returns independent Team objects."""
    return [create_team(data, purse) for data in FRANCHISES]


def get_franchise(franchise_id: str) -> Optional[FranchiseData]:
    return FRANCHISES_BY_ID.get(franchise_id)
