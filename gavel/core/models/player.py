"""Player model (the unit being auctioned)."""

from dataclasses import dataclass, field
from uuid import uuid4

from gavel.core.enums import PlayerRole


@dataclass(frozen=True)
class Player:
    """
    A player listed in the auction pool.

    Prices are in crores. A player can never be sold below min_price
    or above max_price; bidding opens at base_price.
    """

    id: str = field(default_factory=lambda: uuid4().hex[:12])
    name: str = ""
    role: PlayerRole = PlayerRole.BATSMAN

    # Pricing
    base_price: float = 2.0
    min_price: float = 2.0
    max_price: float = 20.0

    # Evaluation (0-100 scales)
    rating: int = 70
    popularity: int = 50

    is_capped: bool = False    # Has played international cricket (marquee)
    is_overseas: bool = False  # Counts against the overseas quota

    def __post_init__(self):
        if not 0 < self.min_price <= self.base_price <= self.max_price:
            raise ValueError(
                f"Player {self.name or self.id}: prices must satisfy "
                f"0 < min ({self.min_price}) <= base ({self.base_price}) <= max ({self.max_price})"
            )

    @property
    def price_range(self) -> float:
        """Distance between floor and ceiling."""
        return self.max_price - self.min_price

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "base_price": self.base_price,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "rating": self.rating,
            "popularity": self.popularity,
            "is_capped": self.is_capped,
            "is_overseas": self.is_overseas,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            role=PlayerRole(data.get("role", PlayerRole.BATSMAN.value)),
            base_price=float(data["base_price"]),
            min_price=float(data["min_price"]),
            max_price=float(data["max_price"]),
            rating=int(data.get("rating", 70)),
            popularity=int(data.get("popularity", 50)),
            is_capped=bool(data.get("is_capped", False)),
            is_overseas=bool(data.get("is_overseas", False)),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.role.value}, {self.rating})"
