"""
Pre-auction retention.

Teams may keep players from their previous squad. Retained players are
charged against the purse before the auction starts:

- Capped players, in slab order: 18, 14, 8, 4 Cr
- Uncapped players: 4 Cr each
"""

import logging
from typing import Iterable

from gavel.core.auction.errors import RetentionError
from gavel.core.models import Player, Team

logger = logging.getLogger(__name__)

CAPPED_RETENTION_COSTS: tuple[float, ...] = (18.0, 14.0, 8.0, 4.0)
UNCAPPED_RETENTION_COST = 4.0


def retention_cost(retained: Iterable[Player]) -> float:
    """
    Total purse cost of retaining the given players.

    Raises:
        RetentionError: more capped players than there are cost slabs
    """
    retained = list(retained)
    capped = [p for p in retained if p.is_capped]
    uncapped = [p for p in retained if not p.is_capped]

    if len(capped) > len(CAPPED_RETENTION_COSTS):
        raise RetentionError(
            f"No retention cost slab for capped player {len(capped)}; "
            f"at most {len(CAPPED_RETENTION_COSTS)} capped players can be retained"
        )

    total = sum(CAPPED_RETENTION_COSTS[: len(capped)])
    total += len(uncapped) * UNCAPPED_RETENTION_COST
    return float(total)


def apply_retentions(team: Team, retained: Iterable[Player]) -> float:
    """
    Retain players for a team ahead of the auction.

    Retained players join both the retained list and the squad, and the
    retention cost is debited from the purse. Nothing changes on error.

    Returns:
        The amount debited

    Raises:
        RetentionError: no cost slab, purse too small, or player already held
    """
    retained = list(retained)
    held = team.held_player_ids()
    for player in retained:
        if player.id in held:
            raise RetentionError(f"{team.name} already holds {player.name}")

    cost = retention_cost(retained)
    if cost > team.purse:
        raise RetentionError(
            f"{team.name} cannot afford retentions: cost {cost} Cr, purse {team.purse} Cr"
        )

    for player in retained:
        team.retained_players.append(player)
        team.add_player(player)
    team.debit(cost)

    logger.info(f"{team.name} retained {len(retained)} players for {cost} Cr")
    return cost
