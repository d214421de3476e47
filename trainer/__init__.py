"""Poker trainer: bot opponents, the hand-driving session and the console table."""

from .bots import BotDecision, Personality, PERSONALITIES, decide
from .session import TrainerSession, create_players

__all__ = ["BotDecision", "Personality", "PERSONALITIES", "decide", "TrainerSession", "create_players"]
