"""
Tests for rule configuration.
"""

import pytest
from pydantic import ValidationError

from mystery_letter.rules import create_rules, default_rules, load_rules_from_env


def test_defaults():
    assert default_rules.min_players == 2
    assert default_rules.max_players == 6
    assert default_rules.max_bots == 3
    assert default_rules.tokens_to_win == 3
    assert default_rules.auto_draw is False


def test_create_rules_overrides():
    rules = create_rules(tokens_to_win=5, bot_think_delay=0)
    assert rules.tokens_to_win == 5
    assert rules.bot_think_delay == 0
    # The shared default is untouched
    assert default_rules.tokens_to_win == 3


def test_max_players_cannot_undercut_min():
    with pytest.raises(ValidationError):
        create_rules(min_players=4, max_players=3)


def test_player_count_bounds():
    with pytest.raises(ValidationError):
        create_rules(max_players=7)
    assert default_rules.validate_player_count(2)
    assert not default_rules.validate_player_count(1)


def test_load_rules_from_env(monkeypatch):
    monkeypatch.setenv("LETTER_TOKENS_TO_WIN", "4")
    monkeypatch.setenv("LETTER_BOT_DELAY", "0.1")
    monkeypatch.setenv("LETTER_AUTO_DRAW", "true")
    monkeypatch.delenv("LETTER_MAX_PLAYERS", raising=False)

    rules = load_rules_from_env()
    assert rules.tokens_to_win == 4
    assert rules.bot_think_delay == pytest.approx(0.1)
    assert rules.auto_draw is True
    assert rules.max_players == 6
