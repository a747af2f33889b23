"""
Game rule configuration and validation.
"""

import os

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=2,
        ge=2,
        le=6,
        description="Minimum number of participants required to start a round"
    )
    max_players: int = Field(
        default=6,
        ge=2,
        le=6,
        description="Maximum number of participants allowed in a room"
    )
    max_bots: int = Field(
        default=3,
        ge=0,
        le=3,
        description="Maximum number of bots the host may add"
    )
    tokens_to_win: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Round wins needed to win the game"
    )
    log_limit: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Number of event log entries kept per room"
    )
    bot_think_delay: float = Field(
        default=0.8,
        ge=0.0,
        le=10.0,
        description="Seconds a bot waits before acting"
    )
    auto_draw: bool = Field(
        default=False,
        description="Draw automatically for the participant whose turn begins"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't undercut minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)


_ENV_FIELDS = {
    'LETTER_MIN_PLAYERS': 'min_players',
    'LETTER_MAX_PLAYERS': 'max_players',
    'LETTER_MAX_BOTS': 'max_bots',
    'LETTER_TOKENS_TO_WIN': 'tokens_to_win',
    'LETTER_LOG_LIMIT': 'log_limit',
    'LETTER_BOT_DELAY': 'bot_think_delay',
    'LETTER_AUTO_DRAW': 'auto_draw',
}


def load_rules_from_env() -> RuleConfig:
    """Build a RuleConfig from ``LETTER_*`` environment variables."""
    overrides = {}
    for env_name, field_name in _ENV_FIELDS.items():
        value = os.getenv(env_name)
        if value is None or value == '':
            continue
        if field_name == 'auto_draw':
            overrides[field_name] = value.lower() in ('1', 'true', 'yes')
        else:
            overrides[field_name] = value
    return create_rules(**overrides)
