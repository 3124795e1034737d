"""
Automated players for the duel.

- RandomAgent: Baseline random selection over valid actions
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent

__all__ = [
    "BaseAgent",
    "RandomAgent",
]
