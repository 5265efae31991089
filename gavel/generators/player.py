"""Auction pool generation."""

import random
from typing import Optional

from gavel.core.enums import PlayerRole
from gavel.core.models import Player

# Sample names for generation
FIRST_NAMES = [
    "Rohit", "Virat", "Shubman", "Rishabh", "Hardik", "Jasprit", "Ravindra",
    "Suryakumar", "Shreyas", "Ishan", "Sanju", "Yuzvendra", "Kuldeep",
    "Mohammed", "Arshdeep", "Axar", "Washington", "Prithvi", "Ruturaj",
    "Devdutt", "Rinku", "Tilak", "Yashasvi", "Avesh", "Umran", "Deepak",
    "Jos", "David", "Glenn", "Pat", "Mitchell", "Trent", "Kane", "Rashid",
    "Quinton", "Kagiso", "Andre", "Sunil", "Nicholas", "Faf", "Heinrich",
    "Liam", "Sam", "Jofra", "Marcus", "Travis", "Aiden", "Wanindu",
]

LAST_NAMES = [
    "Sharma", "Kohli", "Gill", "Pant", "Pandya", "Bumrah", "Jadeja",
    "Yadav", "Iyer", "Kishan", "Samson", "Chahal", "Shami", "Singh",
    "Patel", "Sundar", "Shaw", "Gaikwad", "Padikkal", "Varma", "Jaiswal",
    "Khan", "Malik", "Chahar", "Buttler", "Warner", "Maxwell", "Cummins",
    "Starc", "Boult", "Williamson", "de Kock", "Rabada", "Russell", "Narine",
    "Pooran", "du Plessis", "Klaasen", "Livingstone", "Curran", "Archer",
    "Stoinis", "Head", "Markram", "Hasaranga", "Marsh", "Rahul", "Thakur",
]

# Share of the pool per role
ROLE_WEIGHTS: dict[PlayerRole, float] = {
    PlayerRole.BATSMAN: 0.30,
    PlayerRole.BOWLER: 0.30,
    PlayerRole.ALL_ROUNDER: 0.20,
    PlayerRole.WICKET_KEEPER: 0.05,
    PlayerRole.WICKET_KEEPER_BATSMAN: 0.15,
}

# (share of pool, rating range, base price choices, max price range)
RATING_TIERS = [
    (0.08, (91, 98), [2.0], (15.0, 25.0)),
    (0.22, (80, 90), [1.5, 2.0], (8.0, 16.0)),
    (0.40, (70, 79), [0.75, 1.0, 1.5], (4.0, 9.0)),
    (0.30, (55, 69), [0.3, 0.5, 0.75], (2.5, 5.0)),
]


def _round_to_quarter(value: float) -> float:
    return round(round(value * 4) / 4, 2)


def generate_player(
    role: Optional[PlayerRole] = None,
    rating: Optional[int] = None,
    name: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Player:
    """
    Generate a random auction player.

    Args:
        role: Role to generate (weighted random if None)
        rating: Target rating (drawn from the tier distribution if None)
        name: Specific name (random if None)
        rng: Random source, for reproducible pools

    Returns:
        Generated Player with prices consistent with the rating
    """
    rng = rng or random.Random()

    if role is None:
        roles = list(ROLE_WEIGHTS)
        role = rng.choices(roles, weights=[ROLE_WEIGHTS[r] for r in roles])[0]

    if rating is None:
        tier = rng.choices(RATING_TIERS, weights=[t[0] for t in RATING_TIERS])[0]
        rating = rng.randint(*tier[1])
    else:
        tier = next(
            (t for t in RATING_TIERS if t[1][0] <= rating <= t[1][1]),
            RATING_TIERS[0] if rating > 90 else RATING_TIERS[-1],
        )

    _, _, base_choices, (max_low, max_high) = tier
    base_price = rng.choice(base_choices)
    # Floor sits at or a little under the opening price
    min_price = round(base_price * rng.choice([0.8, 1.0]), 2)
    max_price = max(base_price, _round_to_quarter(rng.uniform(max_low, max_high)))

    is_capped = rng.random() < (0.85 if rating >= 80 else 0.4)
    popularity = max(10, min(100, int(rng.gauss(rating, 12))))

    return Player(
        id=f"{rng.getrandbits(48):012x}",
        name=name or f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        role=role,
        base_price=base_price,
        min_price=min_price,
        max_price=max_price,
        rating=rating,
        popularity=popularity,
        is_capped=is_capped,
        is_overseas=rng.random() < 0.3,
    )


def generate_player_pool(
    num_players: int = 60,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> list[Player]:
    """
    Generate an auction pool, best players first.

    Marquee sets open the auction, as they do in the real thing, so the
    pool is ordered by capped status and then rating.

    Args:
        num_players: Pool size
        seed: Seed for a reproducible pool (ignored if rng is given)
        rng: Random source

    Returns:
        List of players in auction order
    """
    rng = rng or random.Random(seed)
    pool = [generate_player(rng=rng) for _ in range(num_players)]
    pool.sort(key=lambda p: (p.is_capped, p.rating), reverse=True)
    return pool
