"""
Models package for cardmate.
Contains data models for players, courses and scorecards.
"""

from .course import Course, Hole
from .player import ActivePlayer, Player
from .scorecard import Scorecard, ScorecardPlayer

__all__ = ['ActivePlayer', 'Course', 'Hole', 'Player', 'Scorecard', 'ScorecardPlayer']
