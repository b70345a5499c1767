"""Data models for Disc Tracker."""

from .scorecard import RawCsvTable, ColumnMap, ReconciledHole, ReconciledRound
from .round import NewRound, Round, NewHoleResult, HoleResult, ManualRoundRequest

__all__ = [
    'RawCsvTable',
    'ColumnMap',
    'ReconciledHole',
    'ReconciledRound',
    'NewRound',
    'Round',
    'NewHoleResult',
    'HoleResult',
    'ManualRoundRequest',
]
