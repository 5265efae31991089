"""Franchise setup: default teams and retentions."""

from gavel.core.league.retention import (
    CAPPED_RETENTION_COSTS,
    UNCAPPED_RETENTION_COST,
    apply_retentions,
    retention_cost,
)
from gavel.core.league.teams import (
    DEFAULT_PURSE,
    DEFAULT_ROLE_NEEDS,
    FRANCHISES,
    FranchiseData,
    create_default_teams,
    create_team,
    get_franchise,
)

__all__ = [
    "CAPPED_RETENTION_COSTS",
    "DEFAULT_PURSE",
    "DEFAULT_ROLE_NEEDS",
    "FRANCHISES",
    "FranchiseData",
    "UNCAPPED_RETENTION_COST",
    "apply_retentions",
    "create_default_teams",
    "create_team",
    "get_franchise",
    "retention_cost",
]
