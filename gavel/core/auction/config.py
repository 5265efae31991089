"""
Auction configuration.

Timer pacing and sequencing behaviour for an auction run.
All settings can be overridden via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AuctionConfig:
    """Timing configuration for the auction engine and sequencer."""

    # Round timer
    timer_duration: int = field(
        default_factory=lambda: int(os.getenv("GAVEL_TIMER_DURATION", "30"))
    )
    tick_interval: float = field(
        default_factory=lambda: float(os.getenv("GAVEL_TICK_INTERVAL", "1.0"))
    )

    # AI pacing (seconds)
    initial_engagement_delay: float = field(
        default_factory=lambda: float(os.getenv("GAVEL_INITIAL_ENGAGEMENT_DELAY", "1.0"))
    )
    bid_reaction_delay: float = field(
        default_factory=lambda: float(os.getenv("GAVEL_BID_REACTION_DELAY", "0.3"))
    )

    # Sequencer
    auto_advance: bool = field(
        default_factory=lambda: os.getenv("GAVEL_AUTO_ADVANCE", "false").lower() == "true"
    )
    advance_delay: float = field(
        default_factory=lambda: float(os.getenv("GAVEL_ADVANCE_DELAY", "1.0"))
    )

    @classmethod
    def from_env(cls) -> "AuctionConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.timer_duration <= 0:
            errors.append("GAVEL_TIMER_DURATION must be positive")
        if self.tick_interval <= 0:
            errors.append("GAVEL_TICK_INTERVAL must be positive")
        if self.initial_engagement_delay < 0:
            errors.append("GAVEL_INITIAL_ENGAGEMENT_DELAY cannot be negative")
        if self.bid_reaction_delay < 0:
            errors.append("GAVEL_BID_REACTION_DELAY cannot be negative")
        if self.advance_delay < 0:
            errors.append("GAVEL_ADVANCE_DELAY cannot be negative")
        return errors


# Singleton config instance
_config: Optional[AuctionConfig] = None


def get_config() -> AuctionConfig:
    """Get the global auction configuration."""
    global _config
    if _config is None:
        _config = AuctionConfig.from_env()
    return _config
