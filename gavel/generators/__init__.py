"""Content generators."""

from gavel.generators.player import generate_player, generate_player_pool

__all__ = [
    "generate_player",
    "generate_player_pool",
]
