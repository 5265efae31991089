"""Player role definitions."""

from enum import Enum


class PlayerRole(Enum):
    """Playing roles used for squad composition."""

    BATSMAN = "Batsman"
    BOWLER = "Bowler"
    ALL_ROUNDER = "All-rounder"
    WICKET_KEEPER = "Wicket-keeper"
    WICKET_KEEPER_BATSMAN = "Wicket-keeper Batsman"

    @property
    def counts_toward(self) -> tuple["PlayerRole", ...]:
        """
        Roles whose squad requirement this role contributes to.

        A wicket-keeper batsman fills its own slot and also covers
        the wicket-keeper requirement.
        """
        if self == PlayerRole.WICKET_KEEPER_BATSMAN:
            return (PlayerRole.WICKET_KEEPER_BATSMAN, PlayerRole.WICKET_KEEPER)
        return (self,)
