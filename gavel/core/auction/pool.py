"""
Auction pool queries.

Which players can still go under the hammer. A player is unavailable
once any team holds them, either retained before the auction or bought
during it.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from gavel.core.auction.errors import PlayerUnavailableError
from gavel.core.models import Player, Team


@dataclass
class DuplicateCheck:
    """Result of checking a player against teams and the auctioned set."""
    is_duplicate: bool
    reason: Optional[str] = None
    location: Optional[str] = None  # "retained", "squad", "auctioned"


@dataclass
class PoolStats:
    """Counts describing the auction pool."""
    total_players: int
    retained_players: int
    squad_players: int
    auctionable_players: int
    unavailable_players: int

    def to_dict(self) -> dict:
        return {
            "total_players": self.total_players,
            "retained_players": self.retained_players,
            "squad_players": self.squad_players,
            "auctionable_players": self.auctionable_players,
            "unavailable_players": self.unavailable_players,
        }


def retained_player_ids(teams: Iterable[Team]) -> set[str]:
    return {p.id for team in teams for p in team.retained_players}


def squad_player_ids(teams: Iterable[Team]) -> set[str]:
    return {p.id for team in teams for p in team.squad}


def unavailable_player_ids(teams: Iterable[Team]) -> set[str]:
    """Every player ID held by any team."""
    ids: set[str] = set()
    for team in teams:
        ids.update(team.held_player_ids())
    return ids


def is_player_retained(player: Player, teams: Iterable[Team]) -> bool:
    return player.id in retained_player_ids(teams)


def is_player_in_squad(player: Player, teams: Iterable[Team]) -> bool:
    return player.id in squad_player_ids(teams)


def is_player_available(player: Player, teams: Iterable[Team]) -> bool:
    """A player is available while no team holds them."""
    return player.id not in unavailable_player_ids(teams)


def auctionable_players(players: Iterable[Player], teams: Iterable[Team]) -> list[Player]:
    """Players no team holds, in their original order."""
    unavailable = unavailable_player_ids(teams)
    return [p for p in players if p.id not in unavailable]


def find_retaining_team(player: Player, teams: Iterable[Team]) -> Optional[Team]:
    for team in teams:
        if any(p.id == player.id for p in team.retained_players):
            return team
    return None


def find_owning_team(player: Player, teams: Iterable[Team]) -> Optional[Team]:
    for team in teams:
        if any(p.id == player.id for p in team.squad):
            return team
    return None


def check_for_duplicate(
    player: Player,
    teams: Iterable[Team],
    auctioned_ids: Optional[set[str]] = None,
) -> DuplicateCheck:
    """
    Check whether a player has already been claimed.

    Retention is checked first, then squads, then the auctioned set, so a
    retained player is always reported as retained.
    """
    teams = list(teams)

    retaining = find_retaining_team(player, teams)
    if retaining is not None:
        return DuplicateCheck(
            True,
            f'Player "{player.name}" is already retained by {retaining.name}',
            "retained",
        )

    owning = find_owning_team(player, teams)
    if owning is not None:
        return DuplicateCheck(
            True,
            f"Player \"{player.name}\" is already in {owning.name}'s squad",
            "squad",
        )

    if auctioned_ids and player.id in auctioned_ids:
        return DuplicateCheck(
            True,
            f'Player "{player.name}" has already been auctioned',
            "auctioned",
        )

    return DuplicateCheck(False)


def validate_player_for_auction(
    player: Player,
    teams: Iterable[Team],
    auctioned_ids: Optional[set[str]] = None,
) -> None:
    """
    Raises:
        PlayerUnavailableError: the player is retained, held or already auctioned
    """
    check = check_for_duplicate(player, teams, auctioned_ids)
    if check.is_duplicate:
        raise PlayerUnavailableError(check.reason or "Player is a duplicate")


def pool_stats(players: Iterable[Player], teams: Iterable[Team]) -> PoolStats:
    players = list(players)
    teams = list(teams)
    unavailable = unavailable_player_ids(teams)
    return PoolStats(
        total_players=len(players),
        retained_players=len(retained_player_ids(teams)),
        squad_players=len(squad_player_ids(teams)),
        auctionable_players=sum(1 for p in players if p.id not in unavailable),
        unavailable_players=len(unavailable),
    )
