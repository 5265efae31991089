"""Team (franchise) model."""

from dataclasses import dataclass, field

from gavel.core.enums import PlayerRole
from gavel.core.models.player import Player

MAX_SQUAD_SIZE = 25


@dataclass
class Team:
    """
    A franchise competing in the auction.

    The purse only goes down once the auction starts: retention costs
    are debited during setup and sale prices when a round closes.
    """

    id: str
    name: str
    purse: float = 100.0

    squad: list[Player] = field(default_factory=list)
    retained_players: list[Player] = field(default_factory=list)

    # Minimum number of players required per role
    role_needs: dict[PlayerRole, int] = field(default_factory=dict)

    aggression: int = 50  # 0-100, propensity to bid
    overseas_count: int = 0

    @property
    def squad_size(self) -> int:
        return len(self.squad)

    def held_player_ids(self) -> set[str]:
        """IDs of every player this team holds (retained or acquired)."""
        ids = {p.id for p in self.retained_players}
        ids.update(p.id for p in self.squad)
        return ids

    def holds(self, player: Player) -> bool:
        return player.id in self.held_player_ids()

    def role_count(self, role: PlayerRole) -> int:
        """Count squad players that fill the given role's requirement."""
        return sum(1 for p in self.squad if role in p.role.counts_toward)

    def needs_role(self, role: PlayerRole) -> bool:
        """Check whether the squad is still short of the requirement for a role."""
        return self.role_count(role) < self.role_needs.get(role, 0)

    def debit(self, amount: float) -> None:
        """Take an amount out of the purse."""
        if amount < 0:
            raise ValueError(f"Cannot debit a negative amount ({amount})")
        self.purse = round(self.purse - amount, 2)

    def add_player(self, player: Player) -> None:
        """Add an acquired player to the squad."""
        self.squad.append(player)
        if player.is_overseas:
            self.overseas_count += 1

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "purse": self.purse,
            "squad": [p.to_dict() for p in self.squad],
            "retained_players": [p.to_dict() for p in self.retained_players],
            "role_needs": {role.value: count for role, count in self.role_needs.items()},
            "aggression": self.aggression,
            "overseas_count": self.overseas_count,
        }

    def __str__(self) -> str:
        return f"{self.name} (purse {self.purse:.2f} Cr, {self.squad_size} players)"
